"""QR rendering for pickup tokens."""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def render_qr_data_uri(data: str, width: int = 256, border: int = 1) -> str:
    """Render ``data`` as a PNG QR code and return it as a data URI.

    The module size is chosen so the image comes out close to ``width``
    pixels, never smaller than one pixel per module.
    """
    code = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=border)
    code.add_data(data)
    code.make(fit=True)
    code.box_size = max(1, width // (code.modules_count + 2 * border))

    image = code.make_image()
    buffer = io.BytesIO()
    image.save(buffer)
    return PNG_DATA_URI_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")
