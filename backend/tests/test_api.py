import base64
import json

from fastapi.testclient import TestClient

from smartqr.core.qr_utils import render_qr, to_png_bytes
from smartqr.main import app
from smartqr.services.uploader import UploadOrchestrator

MIB = 1024 * 1024


def ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert client.get("/health/db").json()["database"] == "ok"


def test_classify(client):
    r = client.post("/qr/classify", json={"input": "+1 555-123-4567"})
    assert r.status_code == 200
    assert r.json() == {"type": "phone", "label": "Phone", "formatted": "tel:+15551234567"}


def test_generate_returns_png_and_records_history(client):
    r = client.post("/qr/generate", json={"input": "example.com", "size": 256})
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert r.headers["x-qr-type"] == "url"
    assert r.headers["x-qr-payload"] == "https://example.com"
    assert r.content.startswith(b"\x89PNG")

    history = client.get("/history").json()
    assert [h["content"] for h in history] == ["https://example.com"]


def test_generate_empty_input(client):
    r = client.post("/qr/generate", json={"input": "   "})
    assert r.status_code == 400
    assert r.json()["code"] == "qr/empty_payload"
    assert client.get("/history").json() == []


def test_generate_low_contrast(client):
    r = client.post("/qr/generate", json={"input": "hello", "foreground": "#ffffff", "background": "#ffffff"})
    assert r.status_code == 422
    assert r.json() == {"error": "Low contrast or too much data for these colors.", "code": "qr/encoding_error"}


def test_download_sets_filename(client):
    r = client.get("/qr/download", params={"input": "hello", "use_logo": "false"})
    assert r.status_code == 200
    assert 'filename="smart-qr-pro-' in r.headers["content-disposition"]


def test_presets(client):
    names = [p["name"] for p in client.get("/qr/presets").json()["presets"]]
    assert names[0] == "Standard" and "Midnight" in names


def test_wifi(client):
    r = client.post("/qr/wifi", json={"ssid": "Home", "password": "secret", "encryption": "WPA"})
    assert r.json() == {"type": "wifi", "label": "WiFi", "formatted": "WIFI:T:WPA;S:Home;P:secret;;"}


def test_wifi_requires_ssid(client):
    assert client.post("/qr/wifi", json={"ssid": "", "password": "x"}).status_code == 422


def test_unexpected_value_error_is_not_reported_as_bad_input(monkeypatch):
    from smartqr.routers import qr

    def broken(raw):
        raise ValueError("bug")

    monkeypatch.setattr(qr, "classify", broken)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.post("/qr/classify", json={"input": "hello"})
    assert r.status_code == 500


def test_share_file_and_text(client):
    r = client.post("/qr/share", json={"input": "hello", "can_share_files": True})
    body = r.json()
    assert body["kind"] == "file" and body["filename"] == "qr.png"
    assert base64.b64decode(body["image_base64"]).startswith(b"\x89PNG")

    r = client.post("/qr/share", json={"input": "user@example.com", "can_share_files": False})
    assert r.json() == {"kind": "text", "text": "mailto:user@example.com"}


def test_share_without_content(client):
    r = client.post("/qr/share", json={"input": ""})
    assert r.status_code == 503
    assert r.json()["code"] == "share/unavailable"


def test_scan_image(client):
    png = to_png_bytes(render_qr("user@example.com", size=400, use_logo=False))
    r = client.post("/scan/image", files={"file": ("qr.png", png, "image/png")})
    assert r.status_code == 200
    assert r.json()["found"] is True
    assert r.json()["results"][0]["type"] == "email"
    assert r.json()["results"][0]["formatted"] == "mailto:user@example.com"


def test_scan_garbage(client):
    r = client.post("/scan/image", files={"file": ("x.png", b"nope", "image/png")})
    assert r.status_code == 400
    assert r.json()["code"] == "scan/invalid_image"


def test_upload_streams_events_and_saves_file(upload_client, fake_transport):
    r = upload_client.post("/uploads", files={"file": ("report.pdf", b"%PDF" * 1000, "application/pdf")})
    assert r.status_code == 200

    events = ndjson(r)
    assert events[0] == {"status": "loading", "progress": 0}
    assert events[-1]["status"] == "success"
    assert sum(e["status"] != "loading" for e in events) == 1

    files = upload_client.get("/uploads/files").json()
    assert files[0]["name"] == "report.pdf"
    assert files[0]["size"] == 4000
    history = upload_client.get("/history").json()
    assert history[0]["data_type"] == "file"


def test_upload_still_ends_with_success_when_recording_fails(upload_client, monkeypatch):
    from smartqr.routers import uploads

    def db_down(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(uploads, "save_cloud_file", db_down)
    r = upload_client.post("/uploads", files={"file": ("report.pdf", b"%PDF", "application/pdf")})

    events = ndjson(r)
    terminal = [e for e in events if e["status"] != "loading"]
    assert len(terminal) == 1
    assert terminal[0]["status"] == "success"
    assert events[-1] is terminal[0]
    assert upload_client.get("/uploads/files").json() == []


def test_upload_too_large_is_rejected_before_network(upload_client, fake_transport, orchestrator):
    orchestrator.max_bytes = 1 * MIB
    r = upload_client.post("/uploads", files={"file": ("big.zip", b"0" * (2 * MIB), "application/zip")})
    assert r.status_code == 413
    assert r.json()["code"] == "file/too_large"
    assert fake_transport.calls == 0


def test_upload_offline(client, fake_transport):
    from smartqr.routers.uploads import get_orchestrator

    app.dependency_overrides[get_orchestrator] = lambda: UploadOrchestrator(transport=fake_transport, online_check=lambda: False)
    events = ndjson(client.post("/uploads", files={"file": ("a.txt", b"hi", "text/plain")}))
    assert events == [{"status": "error", "message": "Network offline. Please check your internet connection.", "code": "network/offline"}]


def test_cloud_file_delete_and_usage(upload_client):
    upload_client.post("/uploads", files={"file": ("a.pdf", b"x" * MIB, "application/pdf")})
    file_id = upload_client.get("/uploads/files").json()[0]["id"]

    assert upload_client.get("/uploads/usage").json() == {"files": 1, "storage_used_mb": 1.0}
    assert upload_client.delete(f"/uploads/files/{file_id}").status_code == 200
    assert upload_client.delete(f"/uploads/files/{file_id}").status_code == 404


def test_theme_settings(client):
    assert client.get("/settings/theme").json() == {"mode": "system", "effective": "light"}
    dark_hint = {"Sec-CH-Prefers-Color-Scheme": "dark"}
    assert client.get("/settings/theme", headers=dark_hint).json()["effective"] == "dark"

    r = client.put("/settings/theme", json={"mode": "dark"})
    assert r.json() == {"mode": "dark", "effective": "dark"}
    assert client.get("/").json()["appearance"] == {"mode": "dark", "effective": "dark"}

    assert client.put("/settings/theme", json={"mode": "sepia"}).status_code == 422


def test_clear_history(client):
    client.post("/qr/generate", json={"input": "hello", "size": 128, "use_logo": False})
    assert client.delete("/history").json() == {"deleted": 1}
