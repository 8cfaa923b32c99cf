# smartqr/core/qr_utils.py
import logging
import time
from io import BytesIO
from pathlib import Path

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from qrcode.exceptions import DataOverflowError
from PIL import Image, ImageColor, ImageDraw
from fastapi.responses import StreamingResponse

from .config import settings
from .errors import EmptyPayloadError, EncodingError

logger = logging.getLogger(__name__)

# -----------------------------------------------------
# 🔹 Writable paths (safe for production & Docker)
# -----------------------------------------------------
QR_DIR = Path(settings.QR_SAVE_DIR).resolve()

# Logo box and its background patch, as fractions of the image side
LOGO_RATIO = 0.22
LOGO_PADDING_RATIO = 0.02
LOGO_RADIUS_RATIO = 0.04

# Foreground/background below this ratio is refused before encoding
MIN_CONTRAST_RATIO = 2.0

COLOR_PRESETS = [
    {"name": "Standard", "foreground": "#000000", "background": "#ffffff"},
    {"name": "Lavender", "foreground": "#6750A4", "background": "#F3E5F5"},
    {"name": "Deep Sea", "foreground": "#01579B", "background": "#E1F5FE"},
    {"name": "Emerald", "foreground": "#1B5E20", "background": "#E8F5E9"},
    {"name": "Midnight", "foreground": "#FFFFFF", "background": "#1A1C1E"},
    {"name": "Sunset", "foreground": "#852221", "background": "#FFDAD6"},
]


# -----------------------------------------------------
# 🔹 Colors
# -----------------------------------------------------
def parse_color(value: str) -> tuple[int, int, int]:
    try:
        rgb = ImageColor.getrgb(value)
    except (ValueError, AttributeError, TypeError):
        raise EncodingError(f"Invalid color: {value!r}", code="qr/invalid_color")
    return rgb[:3]


def _relative_luminance(rgb: tuple[int, int, int]) -> float:
    def channel(c: int) -> float:
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (channel(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(a: tuple[int, int, int], b: tuple[int, int, int]) -> float:
    la, lb = sorted((_relative_luminance(a), _relative_luminance(b)), reverse=True)
    return (la + 0.05) / (lb + 0.05)


def _hex(rgb: tuple[int, int, int]) -> str:
    return "#%02x%02x%02x" % rgb


# -----------------------------------------------------
# 🔹 Logo
# -----------------------------------------------------
def default_logo(size: int = 256) -> Image.Image:
    """Draw the Smart QR Pro brand mark (dark tile, three finder dots, centre badge)."""
    scale = size / 100
    logo = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(logo)

    def box(x0, y0, x1, y1):
        return [x0 * scale, y0 * scale, x1 * scale, y1 * scale]

    draw.rounded_rectangle(box(0, 0, 100, 100), radius=20 * scale, fill="#1a1c1e")
    draw.rectangle(box(30, 30, 40, 40), fill="#00f2fe")
    draw.rectangle(box(60, 30, 70, 40), fill="#27d0fe")
    draw.rectangle(box(30, 60, 40, 70), fill="#4facfe")
    draw.ellipse(box(32, 32, 68, 68), fill="white")
    draw.line(box(50, 42, 50, 58), fill="#6750A4", width=max(1, int(2 * scale)))
    draw.line(box(42, 50, 58, 50), fill="#6750A4", width=max(1, int(2 * scale)))
    return logo


def overlay_logo(img: Image.Image, logo: Image.Image, background: str) -> Image.Image:
    """
    Composite ``logo`` in the centre of ``img`` on a rounded patch of the
    background color. Only safe on codes encoded at error-correction level H.
    """
    result = img.convert("RGB")
    side = min(result.size)
    logo_size = int(side * LOGO_RATIO)
    padding = int(side * LOGO_PADDING_RATIO)
    left = (result.width - logo_size) // 2
    top = (result.height - logo_size) // 2

    draw = ImageDraw.Draw(result)
    draw.rounded_rectangle(
        [left - padding, top - padding, left + logo_size + padding, top + logo_size + padding],
        radius=int(side * LOGO_RADIUS_RATIO),
        fill=background,
    )

    mark = logo.convert("RGBA").resize((logo_size, logo_size), Image.LANCZOS)
    result.paste(mark, (left, top), mark)
    return result


# -----------------------------------------------------
# 🔹 Generate QR image
# -----------------------------------------------------
def render_qr(
    payload: str,
    size: int | None = None,
    foreground: str = "#000000",
    background: str = "#ffffff",
    use_logo: bool = True,
    logo: Image.Image | None = None,
) -> Image.Image:
    if not payload:
        raise EmptyPayloadError()

    size = size or settings.QR_SIZE
    fg = parse_color(foreground)
    bg = parse_color(background)
    if contrast_ratio(fg, bg) < MIN_CONTRAST_RATIO:
        raise EncodingError()

    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_H, border=4)
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        logger.warning("[QR ENCODING FAILED] %s (%d chars)", e, len(payload))
        raise EncodingError()

    modules = qr.modules_count + 2 * qr.border
    qr.box_size = max(1, size // modules)
    img = qr.make_image(fill_color=_hex(fg), back_color=_hex(bg)).convert("RGB")
    if img.size != (size, size):
        img = img.resize((size, size), Image.NEAREST)

    if use_logo:
        img = overlay_logo(img, logo or default_logo(), _hex(bg))

    logger.info("[QR GENERATED] %s", payload[:120])
    return img


def to_png_bytes(img: Image.Image) -> bytes:
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def qr_filename() -> str:
    return f"smart-qr-pro-{int(time.time() * 1000)}.png"


def stream_png(img: Image.Image, filename: str | None = None, headers: dict | None = None):
    buf = BytesIO(to_png_bytes(img))
    headers = dict(headers or {})
    if filename:
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return StreamingResponse(buf, media_type="image/png", headers=headers)


def save_qr_image(img: Image.Image, directory: str | Path | None = None) -> Path:
    # ✅ Ensure target directory is writable
    target_dir = Path(directory).resolve() if directory else QR_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / qr_filename()
    img.save(path, format="PNG")
    logger.info("[QR SAVED] %s", path)
    return path
