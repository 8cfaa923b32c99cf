from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, List, Optional
from datetime import datetime

from ..core.classifier import DataType
from ..services.preferences import ThemeMode


class ClassifyRequest(BaseModel):
    input: str = ""


class ClassifyResponse(BaseModel):
    type: DataType
    label: str
    formatted: str


class GenerateRequest(BaseModel):
    input: str = ""
    foreground: str = "#000000"
    background: str = "#ffffff"
    size: Optional[int] = Field(None, ge=64, le=4096)
    use_logo: bool = True


class WiFiRequest(BaseModel):
    ssid: str = Field(..., min_length=1)
    password: str = ""
    encryption: Literal["WPA", "WEP", "nopass"] = "WPA"


class ShareRequest(BaseModel):
    input: str = ""
    can_share_files: bool = True


class ScanResult(BaseModel):
    text: str
    type: DataType
    label: str
    formatted: str


class ScanResponse(BaseModel):
    found: bool
    results: List[ScanResult] = []


class HistoryItem(BaseModel):
    id: int
    content: str
    data_type: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CloudFileResponse(BaseModel):
    id: int
    name: str
    size: int
    url: str
    public_id: Optional[str] = None
    content_type: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ThemeUpdate(BaseModel):
    mode: ThemeMode


class ThemeResponse(BaseModel):
    mode: ThemeMode
    effective: ThemeMode
