"""
Scan a QR code with the local camera and print its classified payload.

Usage:
  python -m smartqr.scripts.scan_camera --camera 0
"""
import argparse
import sys

from smartqr.core.classifier import classify
from smartqr.core.config import settings
from smartqr.core.errors import CameraPermissionError, CameraUnavailableError
from smartqr.core.logging import setup_logging
from smartqr.services.scanner import ScanSession


def main(argv=None):
    parser = argparse.ArgumentParser(description="Scan a QR code from the camera")
    parser.add_argument("--camera", type=int, default=0)
    parser.add_argument("--max-frames", type=int, default=None)
    args = parser.parse_args(argv)

    setup_logging(settings.LOG_LEVEL)

    def on_success(text: str):
        result = classify(text)
        print(f"{result.type.label}: {result.formatted}")

    try:
        text = ScanSession(on_success, camera_index=args.camera).run(max_frames=args.max_frames)
    except CameraPermissionError as e:
        print(f"{e.message}", file=sys.stderr)
        return 2
    except CameraUnavailableError as e:
        print(f"{e.message} Try again.", file=sys.stderr)
        return 1
    return 0 if text else 1


if __name__ == "__main__":
    sys.exit(main())
