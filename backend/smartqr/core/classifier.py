# smartqr/core/classifier.py
"""
Content classification and QR payload formatting.

``detect`` maps free text to a :class:`DataType` and ``format_payload`` turns
it into the exact string handed to the QR encoder. Both are pure and total:
they never raise for string input.
"""
import re
from dataclasses import dataclass
from enum import Enum


class DataType(str, Enum):
    FILE = "file"
    URL = "url"
    APP_STORE = "app_store"
    EMAIL = "email"
    PHONE = "phone"
    WIFI = "wifi"
    LOCATION = "location"
    VCARD = "vcard"
    TEXT = "text"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    DataType.FILE: "Cloud File",
    DataType.URL: "Website",
    DataType.APP_STORE: "App Store",
    DataType.EMAIL: "Email",
    DataType.PHONE: "Phone",
    DataType.WIFI: "WiFi",
    DataType.LOCATION: "Location",
    DataType.VCARD: "Contact",
    DataType.TEXT: "Text",
}


@dataclass(frozen=True)
class ClassifiedPayload:
    type: DataType
    formatted: str


# -----------------------------------------------------
# 🔹 Detection rules (order matters: first match wins)
# -----------------------------------------------------
CLOUD_STORAGE_DOMAINS = ("firebasestorage.googleapis.com", "res.cloudinary.com")
FILE_EXTENSIONS = (".pdf", ".zip", ".docx", ".jpg", ".png")
APP_STORE_MARKERS = ("play.google.com/store", "apps.apple.com")

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
BARE_DOMAIN_RE = re.compile(
    r"[a-z0-9]+([\-.][a-z0-9]+)*\.[a-z]{2,5}(:[0-9]{1,5})?(/.*)?", re.IGNORECASE
)
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"\+?[0-9\s\-]{7,15}")
WIFI_RE = re.compile(r"^WIFI:", re.IGNORECASE)
LOCATION_RE = re.compile(r"-?\d+\.\d+,\s?-?\d+\.\d+", re.ASCII)
VCARD_RE = re.compile(r"^BEGIN:VCARD", re.IGNORECASE)

MAPS_PREFIX = "https://www.google.com/maps?q="


def _is_file(text: str) -> bool:
    lower = text.lower()
    if any(domain in text for domain in CLOUD_STORAGE_DOMAINS):
        return True
    return lower.endswith(FILE_EXTENSIONS)


def _is_url(text: str) -> bool:
    return bool(SCHEME_RE.match(text) or BARE_DOMAIN_RE.fullmatch(text))


def detect(raw_input: str) -> DataType:
    text = (raw_input or "").strip()
    if not text:
        return DataType.TEXT

    if _is_file(text):
        return DataType.FILE

    if _is_url(text):
        if any(marker in text for marker in APP_STORE_MARKERS):
            return DataType.APP_STORE
        return DataType.URL

    if EMAIL_RE.fullmatch(text):
        return DataType.EMAIL

    if PHONE_RE.fullmatch(text):
        return DataType.PHONE

    if WIFI_RE.match(text):
        return DataType.WIFI

    if LOCATION_RE.fullmatch(text):
        return DataType.LOCATION

    if VCARD_RE.match(text):
        return DataType.VCARD

    return DataType.TEXT


def format_payload(data_type: DataType, raw_input: str) -> str:
    text = (raw_input or "").strip()
    if not text:
        return ""

    if data_type in (DataType.URL, DataType.APP_STORE, DataType.FILE):
        # browsers need a scheme to open it
        return text if SCHEME_RE.match(text) else f"https://{text}"

    if data_type == DataType.PHONE:
        return text if text.startswith("tel:") else "tel:" + re.sub(r"\s+", "", text)

    if data_type == DataType.EMAIL:
        return text if text.startswith("mailto:") else f"mailto:{text}"

    if data_type == DataType.LOCATION:
        return text if text.startswith(MAPS_PREFIX) else f"{MAPS_PREFIX}{text}"

    return text


def classify(raw_input: str) -> ClassifiedPayload:
    data_type = detect(raw_input)
    return ClassifiedPayload(type=data_type, formatted=format_payload(data_type, raw_input))


# -----------------------------------------------------
# 🔹 WiFi payload builder
# -----------------------------------------------------
WIFI_ENCRYPTIONS = ("WPA", "WEP", "nopass")
_WIFI_SPECIAL_RE = re.compile(r'([\\;,:"])')


def _escape_wifi(value: str) -> str:
    return _WIFI_SPECIAL_RE.sub(r"\\\1", value)


def build_wifi_payload(ssid: str, password: str = "", encryption: str = "WPA") -> str:
    """
    Build a ``WIFI:T:<enc>;S:<ssid>;P:<password>;;`` join string.

    An empty password always means an open network (``nopass``).
    """
    if not ssid:
        raise ValueError("SSID is required")
    if encryption not in WIFI_ENCRYPTIONS:
        raise ValueError(f"Unsupported encryption: {encryption}")
    if not password:
        encryption = "nopass"
    return f"WIFI:T:{encryption};S:{_escape_wifi(ssid)};P:{_escape_wifi(password or '')};;"
