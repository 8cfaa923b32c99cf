# smartqr/services/uploader.py
"""
File upload orchestration.

An upload is reported as a stream of typed events: ``ProgressEvent`` with
non-decreasing percents, then exactly one ``SuccessEvent`` or ``ErrorEvent``.
The transport (Cloudinary by default) runs in a worker thread and pushes its
progress back onto the event loop.

    orchestrator = UploadOrchestrator()
    async for event in orchestrator.events(LocalFile.from_bytes("a.pdf", data)):
        ...

There is no way to cancel an upload once the transport has started.
"""
from __future__ import annotations

import asyncio
import io
import logging
import mimetypes
import socket
from dataclasses import dataclass, field
from typing import AsyncIterator, BinaryIO, Callable, Optional, Union

import requests
from urllib3 import encode_multipart_formdata

from ..core.config import settings
from ..core.errors import FileTooLargeError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

OFFLINE_MESSAGE = "Network offline. Please check your internet connection."
NETWORK_FAILED_MESSAGE = "A network error occurred during the upload."
PROVIDER_FAILED_MESSAGE = "Upload failed at Cloudinary server."
INIT_FAILED_MESSAGE = "Initialization error during upload."


# ---------------------------------------------------------
# Files & events
# ---------------------------------------------------------
@dataclass
class LocalFile:
    name: str
    size: int
    stream: BinaryIO
    content_type: Optional[str] = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: Optional[str] = None) -> "LocalFile":
        return cls(name=name, size=len(data), stream=io.BytesIO(data), content_type=content_type)

    def guess_type(self) -> str:
        return self.content_type or mimetypes.guess_type(self.name)[0] or "application/octet-stream"


@dataclass(frozen=True)
class ProgressEvent:
    percent: int

    def to_dict(self) -> dict:
        return {"status": "loading", "progress": self.percent}


@dataclass(frozen=True)
class SuccessEvent:
    url: str
    public_id: str = ""

    def to_dict(self) -> dict:
        return {"status": "success", "url": self.url, "public_id": self.public_id}


@dataclass(frozen=True)
class ErrorEvent:
    message: str
    code: str

    def to_dict(self) -> dict:
        return {"status": "error", "message": self.message, "code": self.code}


UploadEvent = Union[ProgressEvent, SuccessEvent, ErrorEvent]


@dataclass
class UploadResult:
    url: str
    public_id: str = ""
    raw: dict = field(default_factory=dict)


class TransportError(Exception):
    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


# ---------------------------------------------------------
# Cloudinary transport
# ---------------------------------------------------------
class _ProgressBody:
    """File-like request body that reports how many bytes have been read."""

    chunk_size = 64 * 1024

    def __init__(self, body: bytes, on_progress: ProgressCallback):
        self._buf = io.BytesIO(body)
        self._total = len(body)
        self._on_progress = on_progress

    def __len__(self):
        return self._total

    def read(self, size: int = -1) -> bytes:
        chunk = self._buf.read(size if size and size > 0 else self.chunk_size)
        if chunk:
            self._on_progress(self._buf.tell(), self._total)
        return chunk

    def __iter__(self):
        while True:
            chunk = self.read(self.chunk_size)
            if not chunk:
                break
            yield chunk


class CloudinaryTransport:
    """Unsigned-preset upload to Cloudinary's ``auto`` resource endpoint."""

    api_base = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        upload_preset: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.upload_preset = upload_preset or settings.CLOUDINARY_UPLOAD_PRESET
        self.timeout = timeout or settings.UPLOAD_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        # "auto" lets Cloudinary pick image / video / raw for PDFs and ZIPs
        return f"{self.api_base}/{self.cloud_name}/auto/upload"

    def send(self, file: LocalFile, on_progress: ProgressCallback) -> UploadResult:
        body, content_type = encode_multipart_formdata(
            {
                "file": (file.name, file.stream.read(), file.guess_type()),
                "upload_preset": self.upload_preset,
            }
        )
        try:
            resp = self.session.post(
                self.endpoint,
                data=_ProgressBody(body, on_progress),
                headers={"Content-Type": content_type},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("[UPLOAD] network failure: %s", e)
            raise TransportError(NETWORK_FAILED_MESSAGE, "network/failed")

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if not resp.ok:
            message = (payload.get("error") or {}).get("message") or PROVIDER_FAILED_MESSAGE
            raise TransportError(message, "cloudinary/api_error")

        url = payload.get("secure_url") or payload.get("url")
        if not url:
            raise TransportError(PROVIDER_FAILED_MESSAGE, "cloudinary/api_error")
        return UploadResult(url=url, public_id=payload.get("public_id", ""), raw=payload)


def is_online(host: Optional[str] = None, port: int = 443, timeout: float = 3.0) -> bool:
    try:
        with socket.create_connection((host or settings.CONNECTIVITY_HOST, port), timeout=timeout):
            return True
    except OSError:
        return False


# ---------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------
class UploadOrchestrator:
    def __init__(
        self,
        transport=None,
        online_check: Optional[Callable[[], bool]] = None,
        max_bytes: Optional[int] = None,
    ):
        self.transport = transport or CloudinaryTransport()
        self.online_check = online_check or is_online
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES

    def validate(self, file: LocalFile) -> None:
        if file.size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise FileTooLargeError(f"File exceeds {limit_mb}MB limit")

    def events(self, file: LocalFile) -> AsyncIterator[UploadEvent]:
        """Validate ``file`` now, then return the event stream for its upload."""
        self.validate(file)
        return self._run(file)

    async def upload(self, file: LocalFile, on_update: Callable[[UploadEvent], None]) -> UploadEvent:
        terminal: Optional[UploadEvent] = None
        async for event in self.events(file):
            on_update(event)
            terminal = event
        return terminal

    def _send(self, file: LocalFile, on_progress: ProgressCallback) -> UploadEvent:
        try:
            result = self.transport.send(file, on_progress)
        except TransportError as e:
            return ErrorEvent(e.message, e.code)
        except Exception as e:
            logger.exception("[UPLOAD] transport crashed for %s", file.name)
            return ErrorEvent(str(e) or INIT_FAILED_MESSAGE, "fatal/init")
        return SuccessEvent(url=result.url, public_id=result.public_id)

    async def _run(self, file: LocalFile) -> AsyncIterator[UploadEvent]:
        loop = asyncio.get_running_loop()
        try:
            online = await loop.run_in_executor(None, self.online_check)
        except Exception:
            logger.exception("[UPLOAD] connectivity check failed")
            online = False
        if not online:
            logger.info("[UPLOAD] offline, skipped %s", file.name)
            yield ErrorEvent(OFFLINE_MESSAGE, "network/offline")
            return

        queue: asyncio.Queue = asyncio.Queue()

        def on_progress(sent: int, total: int) -> None:
            if total > 0:
                loop.call_soon_threadsafe(queue.put_nowait, ProgressEvent(round(sent * 100 / total)))

        def work() -> None:
            terminal = self._send(file, on_progress)
            loop.call_soon_threadsafe(queue.put_nowait, terminal)

        logger.info("[UPLOAD] started %s (%d bytes)", file.name, file.size)
        yield ProgressEvent(0)
        worker = loop.run_in_executor(None, work)

        last = 0
        while True:
            event = await queue.get()
            if isinstance(event, ProgressEvent):
                if event.percent > last:
                    last = min(event.percent, 100)
                    yield ProgressEvent(last)
                continue
            await worker
            logger.info("[UPLOAD] finished %s → %s", file.name, event.to_dict()["status"])
            yield event
            return
