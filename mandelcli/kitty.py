"""
Inline images through the kitty terminal graphics protocol.

An image is sent as base64 PNG data split over one or more APC escape
sequences (ESC _G <control> ; <payload> ESC \\). The first sequence
carries the display size in cells; every sequence says whether more
chunks follow. Terminals without graphics support ignore the sequences.
"""

import base64

ESC = "\x1b"
APC_START = ESC + "_G"
APC_END = ESC + "\\"

# Maximum number of base64 characters per escape sequence
CHUNK_SIZE = 16384

# a=T: transmit and display, f=100: PNG
TRANSMIT_PNG = "a=T,f=100"

# a=d,d=A: delete all images; q=2: suppress responses
CLEAR_IMAGES = APC_START + "a=d,d=A,q=2;" + APC_END


def chunk_payload(data, chunk_size=CHUNK_SIZE):
    """Base64-encode data and split it into chunks of at most chunk_size characters."""
    payload = base64.standard_b64encode(bytes(data)).decode("ascii")
    chunks = [payload[i:i + chunk_size] for i in range(0, len(payload), chunk_size)]
    return chunks or [""]


def encode_kitty(png_bytes, cols, rows):
    """
    Build the escape sequence stream that displays a PNG inline.

    Args:
        png_bytes: Encoded PNG image
        cols, rows: Display size in terminal cells

    Returns:
        str ready to be written verbatim to the terminal
    """
    chunks = chunk_payload(png_bytes)
    last = len(chunks) - 1
    parts = []
    for index, chunk in enumerate(chunks):
        control = f"{TRANSMIT_PNG},m={0 if index == last else 1}"
        if index == 0:
            control += f",c={cols},r={rows}"
        parts.append(f"{APC_START}{control};{chunk}{APC_END}")
    return "".join(parts)
