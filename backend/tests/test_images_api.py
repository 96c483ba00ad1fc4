import base64
from contextlib import contextmanager
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api import server
from api.routes import files as files_route
from api.routes import images as images_route
from api.routes import ingest as ingest_route
from images.models import Base, Image, Mask, MaskType
from images.service import ImageService


def _setup_api(monkeypatch, data_root: Path):
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)

    @contextmanager
    def _test_session_scope():
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    monkeypatch.setattr("images.service.engine", engine)
    monkeypatch.setattr("images.service.session_scope", _test_session_scope)
    monkeypatch.setattr(server, "ensure_schema", lambda: None)

    service = ImageService(data_root=data_root, patient_nb_width=3)
    for route in (images_route, files_route, ingest_route):
        monkeypatch.setattr(route, "image_service", service)

    return SessionLocal


def _seed(SessionLocal) -> int:
    with SessionLocal() as session:
        image = Image(patient_nb="001", filename="video_0001_0000.jpg")
        session.add(image)
        session.flush()
        session.add_all(
            [
                Mask(image_id=image.id, mask_type=MaskType.OCCLUSION, filename="occlusion_colored_video_0001_0000.jpg"),
                Mask(image_id=image.id, mask_type=MaskType.LAYER_GRADCAM, filename="layer_gradcam_colored_video_0001_0000.jpg"),
            ]
        )
        session.add(Image(patient_nb="002", filename="video_0002_0000.jpg"))
        session.commit()
        return image.id


def test_list_and_get_images(tmp_path: Path, monkeypatch):
    SessionLocal = _setup_api(monkeypatch, tmp_path)
    image_id = _seed(SessionLocal)
    client = TestClient(server.create_app())

    response = client.get("/api/images")
    assert response.status_code == 200
    assert [item["patient_nb"] for item in response.json()] == ["001", "002"]

    response = client.get(f"/api/images/id/{image_id}")
    assert response.status_code == 200
    assert response.json() == {"id": image_id, "filename": "video_0001_0000.jpg", "patient_nb": "001"}

    assert client.get("/api/images/id/9999").status_code == 404


def test_list_images_for_patient(tmp_path: Path, monkeypatch):
    SessionLocal = _setup_api(monkeypatch, tmp_path)
    _seed(SessionLocal)
    client = TestClient(server.create_app())

    response = client.get("/api/images/patient/002")
    assert response.status_code == 200
    assert [item["filename"] for item in response.json()] == ["video_0002_0000.jpg"]

    assert client.get("/api/images/patient/777").json() == []


def test_image_set_links_masks_to_file_urls(tmp_path: Path, monkeypatch):
    SessionLocal = _setup_api(monkeypatch, tmp_path)
    image_id = _seed(SessionLocal)
    client = TestClient(server.create_app())

    response = client.get(f"/api/images/{image_id}/set")
    assert response.status_code == 200
    payload = response.json()
    assert payload["original_image"] == "/api/file/001/video_0001_0000.jpg"
    assert [mask["type"] for mask in payload["masks"]] == ["occlusion", "layer_gradcam"]
    assert payload["masks"][0]["image_url"] == "/api/file/001/occlusion_colored_video_0001_0000.jpg"
    assert all(isinstance(mask["id"], str) for mask in payload["masks"])

    assert client.get("/api/images/9999/set").status_code == 404


def test_serve_file_returns_bytes_with_content_type(tmp_path: Path, monkeypatch):
    _setup_api(monkeypatch, tmp_path)
    (tmp_path / "001").mkdir()
    (tmp_path / "001" / "saliency_colored_video_0001_0000.png").write_bytes(b"\x89PNGdata")
    client = TestClient(server.create_app())

    response = client.get("/api/file/001/saliency_colored_video_0001_0000.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == b"\x89PNGdata"


def test_serve_file_missing_and_escaping(tmp_path: Path, monkeypatch):
    data_root = tmp_path / "data"
    _setup_api(monkeypatch, data_root)
    (data_root / "001").mkdir(parents=True)
    secret = tmp_path / "secret.jpg"
    secret.write_bytes(b"secret")
    (data_root / "001" / "escape.jpg").symlink_to(secret)
    client = TestClient(server.create_app())

    assert client.get("/api/file/001/video_9999.jpg").status_code == 404
    assert client.get("/api/file/001/escape.jpg").status_code == 400


def test_serve_patient_file_inline(tmp_path: Path, monkeypatch):
    SessionLocal = _setup_api(monkeypatch, tmp_path)
    image_id = _seed(SessionLocal)
    (tmp_path / "001").mkdir()
    (tmp_path / "001" / "video_0001_0000.jpg").write_bytes(b"\xff\xd8jpeg")
    client = TestClient(server.create_app())

    response = client.get("/api/file/001")
    assert response.status_code == 200
    payload = response.json()
    assert payload["id"] == image_id
    assert payload["content_type"] == "image/jpeg"
    assert base64.b64decode(payload["data"]) == b"\xff\xd8jpeg"

    # Record exists but the file is gone
    assert client.get("/api/file/002").status_code == 404
    # No record at all
    assert client.get("/api/file/404").status_code == 404


def test_health_and_readiness(tmp_path: Path, monkeypatch):
    SessionLocal = _setup_api(monkeypatch, tmp_path)
    monkeypatch.setattr("db.session.SessionLocal", SessionLocal)
    client = TestClient(server.create_app())

    assert client.get("/api/health").json() == {"status": "healthy"}
    assert client.get("/api/ready").json() == {"status": "ready", "database": "connected"}
