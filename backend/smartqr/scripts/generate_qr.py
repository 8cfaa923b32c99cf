"""
Render a QR code for some text and save it as a PNG.

Usage:
  python -m smartqr.scripts.generate_qr "https://example.com"
  python -m smartqr.scripts.generate_qr "40.7128,-74.0060" --out ./qr --no-logo
"""
import argparse
import logging

from smartqr.core.classifier import classify
from smartqr.core.config import settings
from smartqr.core.logging import setup_logging
from smartqr.core.qr_utils import render_qr, save_qr_image

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a Smart QR Pro PNG")
    parser.add_argument("text")
    parser.add_argument("--out", default=settings.QR_SAVE_DIR)
    parser.add_argument("--foreground", default="#000000")
    parser.add_argument("--background", default="#ffffff")
    parser.add_argument("--size", type=int, default=settings.QR_SIZE)
    parser.add_argument("--no-logo", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)
    result = classify(args.text)
    if not result.formatted:
        parser.error("nothing to encode")

    img = render_qr(
        result.formatted,
        size=args.size,
        foreground=args.foreground,
        background=args.background,
        use_logo=not args.no_logo,
    )
    path = save_qr_image(img, args.out)
    print(f"{result.type.label}: {result.formatted} → {path}")
    return path


if __name__ == "__main__":
    main()
