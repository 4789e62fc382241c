"""
Tests for file uploads, the media gallery and the health probe.
"""
from pathlib import Path

from evenza_api.app.core.config import settings

from conftest import event_payload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, headers, content=PNG_BYTES, filename="photo.png", mime="image/png", **form):
    data = {"type": "image", "folder": "events"}
    data.update(form)
    return client.post(
        "/api/upload",
        files={"file": (filename, content, mime)},
        data=data,
        headers=headers,
    )


# ============================================================================
# Uploads
# ============================================================================

class TestUpload:

    def test_upload_image(self, client, user):
        response = _upload(client, user["headers"])

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/uploads/events/")
        assert url.endswith(".png")
        stored = Path(settings.upload_dir) / "events" / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == PNG_BYTES

    def test_requires_login(self, client):
        assert _upload(client, {}).status_code == 401

    def test_wrong_mime(self, client, user):
        response = _upload(client, user["headers"], filename="notes.txt", mime="text/plain")

        assert response.status_code == 400
        assert "Invalid file format" in response.json()["detail"]

    def test_unknown_type(self, client, user):
        assert _upload(client, user["headers"], type="audio").status_code == 400

    def test_video_mime_for_image_type(self, client, user):
        assert _upload(client, user["headers"], filename="clip.mp4", mime="video/mp4").status_code == 400

    def test_too_large(self, client, user, monkeypatch):
        monkeypatch.setattr(settings, "max_image_size", 16)

        response = _upload(client, user["headers"])

        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_empty_file(self, client, user):
        assert _upload(client, user["headers"], content=b"").status_code == 400

    def test_folder_is_sanitized(self, client, user):
        response = _upload(client, user["headers"], folder="../../etc")

        assert response.json()["url"].startswith("/uploads/etc/")
        assert (Path(settings.upload_dir) / "etc").is_dir()

    def test_video_upload(self, client, user):
        response = _upload(client, user["headers"], content=b"\x00" * 32, filename="clip.mp4", mime="video/mp4", type="video")

        assert response.status_code == 200
        assert response.json()["url"].endswith(".mp4")


# ============================================================================
# Gallery
# ============================================================================

class TestMedia:

    def _create(self, client, admin, **overrides):
        body = {"title": "Finals", "url": "/uploads/gallery/a.jpg", "category": "events"}
        body.update(overrides)
        return client.post("/api/media", json=body, headers=admin["headers"])

    def test_create_and_list(self, client, admin):
        self._create(client, admin)
        self._create(client, admin, title="Trailer", type="video", url="/uploads/gallery/b.mp4", category="trips")

        everything = client.get("/api/media").json()["media"]
        videos = client.get("/api/media", params={"type": "video"}).json()["media"]
        events = client.get("/api/media", params={"category": "events"}).json()["media"]

        assert len(everything) == 2
        assert [m["title"] for m in videos] == ["Trailer"]
        assert [m["title"] for m in events] == ["Finals"]

    def test_create_linked_to_event(self, client, admin):
        event = client.post("/api/admin/events", json=event_payload(), headers=admin["headers"]).json()

        response = self._create(client, admin, related_event_id=event["id"])

        assert response.status_code == 201
        assert response.json()["related_event_id"] == event["id"]

    def test_create_linked_to_missing_event(self, client, admin):
        response = self._create(client, admin, related_event_id=999)

        assert response.status_code == 404
        assert response.json()["detail"] == "Event not found"

    def test_create_linked_to_missing_trip(self, client, admin):
        response = self._create(client, admin, related_trip_id=999)

        assert response.status_code == 404
        assert client.get("/api/media").json()["media"] == []

    def test_create_requires_admin(self, client, user):
        assert self._create(client, user).status_code == 403

    def test_delete(self, client, admin):
        media_id = self._create(client, admin).json()["id"]

        assert client.delete(f"/api/media/{media_id}", headers=admin["headers"]).status_code == 204
        assert client.delete(f"/api/media/{media_id}", headers=admin["headers"]).status_code == 404


class TestHealth:

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok", "database": "ok"}
