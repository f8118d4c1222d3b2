"""
Readable rendering of token bytes for log messages.
"""

import unicodedata


def render_bytes(b: bytes) -> str:
    """
    Decode token bytes for display.

    Merged tokens often hold partial UTF-8 sequences, so undecodable bytes are
    shown as ``\\xNN`` instead of being replaced. Control characters
    (categories Cc, Cf, Cn, ...) are shown as ``\\uNNNN``.
    """
    text = b.decode("utf-8", errors="backslashreplace")
    return "".join(
        c if unicodedata.category(c)[0] != "C" else f"\\u{ord(c):04x}" for c in text
    )
