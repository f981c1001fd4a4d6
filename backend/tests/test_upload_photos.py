"""
Tests for the command-line uploader: local compression, then multipart POST.
"""
import importlib.util
import io
import os
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

SCRIPT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts", "upload_photos.py")


@pytest.fixture(scope="module")
def uploader():
    spec = importlib.util.spec_from_file_location("upload_photos", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def big_photo(tmp_path):
    path = tmp_path / "wide.bmp"
    Image.linear_gradient("L").resize((3000, 1000)).convert("RGB").save(path, format="BMP")
    return path


def make_session(url="https://photos.test/u/a/p-wide.jpg"):
    session = MagicMock()
    session.post.return_value.json.return_value = {"url": url}
    return session


def test_upload_file_compresses_before_sending(uploader, big_photo):
    session = make_session()

    result = uploader.upload_file(session, "http://api.test/", "album-1", str(big_photo), 0.7, 1920, "Dunes")

    assert result == {"url": "https://photos.test/u/a/p-wide.jpg"}
    args, kwargs = session.post.call_args
    assert args == ("http://api.test/api/v1/photos",)
    assert kwargs["data"] == {"album_id": "album-1", "caption": "Dunes"}
    filename, data, content_type = kwargs["files"]["file"]
    assert filename == "wide.jpg"
    assert content_type == "image/jpeg"
    assert len(data) < big_photo.stat().st_size
    with Image.open(io.BytesIO(data)) as img:
        assert img.size == (1920, 640)


def test_main_counts_failures(uploader, big_photo, tmp_path, monkeypatch):
    session = make_session()
    monkeypatch.setattr(uploader.requests, "Session", lambda: session)

    missing = tmp_path / "missing.jpg"
    exit_code = uploader.main([
        "--token", "t0ken", "--album", "album-1", str(big_photo), str(missing),
    ])

    assert exit_code == 1
    session.headers.__setitem__.assert_called_once_with("Authorization", "Bearer t0ken")
    assert session.post.call_count == 1


def test_main_reports_http_errors(uploader, big_photo, monkeypatch):
    session = make_session()
    session.post.return_value.raise_for_status.side_effect = requests.HTTPError("413 Payload Too Large")
    monkeypatch.setattr(uploader.requests, "Session", lambda: session)

    assert uploader.main(["--token", "t0ken", "--album", "album-1", str(big_photo)]) == 1


def test_main_requires_token(uploader, big_photo, monkeypatch):
    monkeypatch.delenv("KEEPSAKE_TOKEN", raising=False)

    with pytest.raises(SystemExit):
        uploader.main(["--album", "album-1", str(big_photo)])
