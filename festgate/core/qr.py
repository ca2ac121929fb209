"""QR code rendering for member badges and canteen station posters."""
import io

import qrcode
from qrcode.image.svg import SvgImage


def generate_qr_code(data: str, svg: bool = True) -> io.BytesIO:
    """Generate a QR code as a BytesIO object.

    Args:
        data: The token to encode; QR payloads are the bare opaque token
        svg: Render SVG (default) or PNG

    Returns:
        io.BytesIO positioned at the start of the rendered image
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    if svg:
        img = qr.make_image(image_factory=SvgImage)
    else:
        img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer)
    buffer.seek(0)
    return buffer
