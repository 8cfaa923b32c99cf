# smartqr/core/errors.py
"""
User-facing error taxonomy.

Every error carries a human-readable message and a machine code
(``"qr/encoding_error"``, ``"file/too_large"``, ...). The API layer turns
them into ``{"error": message, "code": code}`` JSON bodies.
"""


class SmartQRError(Exception):
    code = "app/error"
    status_code = 400
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class EmptyPayloadError(SmartQRError):
    code = "qr/empty_payload"
    default_message = "Nothing to encode."


class EncodingError(SmartQRError):
    code = "qr/encoding_error"
    status_code = 422
    default_message = "Low contrast or too much data for these colors."


class FileTooLargeError(SmartQRError):
    code = "file/too_large"
    status_code = 413
    default_message = "File exceeds 20MB limit"


class UploadError(SmartQRError):
    code = "network/failed"
    status_code = 502
    default_message = "A network error occurred during the upload."


class ScanError(SmartQRError):
    code = "scan/invalid_image"
    default_message = "Could not read the image."


class CameraPermissionError(SmartQRError):
    code = "camera/permission_denied"
    status_code = 403
    default_message = (
        "Camera access was denied. Please enable camera permissions "
        "in your device settings to use the scanner feature."
    )


class CameraUnavailableError(SmartQRError):
    code = "camera/unavailable"
    status_code = 503
    default_message = "Could not access the camera. Please ensure no other app is using it."


class ShareError(SmartQRError):
    code = "share/unavailable"
    status_code = 503
    default_message = "Sharing unavailable on this device."


class NotFoundError(SmartQRError):
    code = "app/not_found"
    status_code = 404
    default_message = "Not found."
