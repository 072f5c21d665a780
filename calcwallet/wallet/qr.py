"""
QR code generation utilities.
"""

import logging

import qrcode
from qrcode.exceptions import DataOverflowError

logger = logging.getLogger(__name__)


def framed_text(data: str) -> str:
    """Simple framed display"""
    lines = []
    lines.append('┌' + '─' * (len(data) + 2) + '┐')
    lines.append('│ ' + data + ' │')
    lines.append('└' + '─' * (len(data) + 2) + '┘')
    return '\n'.join(lines)


def generate_qr_ascii(data: str, border: int = 1) -> str:
    """
    Render ``data`` as a terminal QR code using full-block characters.
    Falls back to a framed text box if the data does not fit a QR code.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=1,
        border=border
    )
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except DataOverflowError:
        logger.debug("Data too long for a QR code (%d chars)", len(data))
        return framed_text(data)

    lines = []
    for row in qr.get_matrix():
        line = ''
        for cell in row:
            line += '██' if cell else '  '
        lines.append(line)
    return '\n'.join(lines)
