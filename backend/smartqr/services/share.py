# smartqr/services/share.py
import base64
import logging

from ..core.errors import ShareError, SmartQRError
from ..core.qr_utils import render_qr, to_png_bytes

logger = logging.getLogger(__name__)

SHARE_TITLE = "Smart QR Pro"
SHARE_TEXT = "Generated with Smart QR Pro"


def build_share_payload(content: str, can_share_files: bool = True, **render_options) -> dict:
    """
    Describe what the client should hand to its share sheet: the rendered
    PNG when the device can share files, the bare payload text otherwise.
    """
    if not content:
        raise ShareError()

    if not can_share_files:
        return {"kind": "text", "text": content}

    try:
        png = to_png_bytes(render_qr(content, **render_options))
    except SmartQRError as e:
        logger.warning("[SHARE FAILED] %s", e.message)
        raise ShareError()

    return {
        "kind": "file",
        "title": SHARE_TITLE,
        "text": SHARE_TEXT,
        "filename": "qr.png",
        "image_base64": base64.b64encode(png).decode("ascii"),
    }
