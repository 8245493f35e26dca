from __future__ import annotations

import io
from typing import Optional

import numpy as np
import qrcode
from PIL import Image

from ..core.exceptions import ValidationError
from .scanner import Decoder, default_decoder, first_payload


def render_student_qr(student_id: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """PNG QR badge whose payload is the student's id."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(student_id)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(raw: bytes, *, decoder: Optional[Decoder] = None) -> Optional[str]:
    """Payload of the first QR code found in an uploaded image, if any."""
    try:
        img = Image.open(io.BytesIO(raw)).convert("L")
    except (OSError, ValueError) as e:
        raise ValidationError(f"Unreadable image: {e}")
    return first_payload((decoder or default_decoder())(np.array(img)))
