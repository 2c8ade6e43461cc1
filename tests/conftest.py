# tests/conftest.py
# Pytest configuration w/ isolation fixtures for deterministic test runs

import base64
import io
import json
from pathlib import Path

import pytest

PROVIDER_ENV_VARS = [
    "GOOGLE_API_KEY",
    "GOOGLE_GENERATIVE_AI_API_KEY",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GOOGLE_CLOUD_PROJECT",
    "VERTEX_PROJECT",
    "GOOGLE_CLOUD_LOCATION",
    "VERTEX_LOCATION",
    "VERTEX_MODEL",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
]


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    # Patch Path.home() to isolated temp directory
    fake_home = tmp_path / "fake_home"
    fake_home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: fake_home)

    # strip real credentials so provider discovery is deterministic
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    # ! reset global settings_manager state & point it at the isolated location
    from create_image.config.settings import settings_manager

    settings_manager._config = None
    settings_manager.config_dir = fake_home / ".config" / "create-image"
    settings_manager.repository_path = None

    # ! reset output manager to NullOutputManager for test isolation
    from create_image.core.output import reset_output_manager

    reset_output_manager()

    yield fake_home

    reset_output_manager()


@pytest.fixture(autouse=True)
def block_network():
    # Block all network calls by default w/ pytest-socket
    # tests requiring network must explicitly enable w/ pytest.mark.enable_socket
    try:
        pytest_socket = pytest.importorskip("pytest_socket")
        pytest_socket.disable_socket()
    except pytest.skip.Exception:
        # Pytest-socket not installed, skip network blocking
        pass


@pytest.fixture
def mock_env_vars(monkeypatch):
    # Seed test environment w/ provider credentials
    test_env = {
        "GOOGLE_API_KEY": "test-google-key-1234",
        "OPENROUTER_API_KEY": "test-openrouter-key-5678",
        "GOOGLE_CLOUD_PROJECT": "test-project",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    return test_env


@pytest.fixture
def make_png():
    # Build small solid-colour PNG bytes
    from PIL import Image

    def _make(color=(255, 0, 0), size=(32, 24)) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", size, color).save(buf, "PNG")
        return buf.getvalue()

    return _make


@pytest.fixture
def png_b64(make_png):
    return base64.b64encode(make_png()).decode("ascii")


@pytest.fixture
def repo(tmp_path):
    # Image-generator repository w/ two templates
    repo_dir = tmp_path / "image-generator"
    templates = repo_dir / "templates"

    illustrative = templates / "sports" / "illustrative"
    (illustrative / "style-references").mkdir(parents=True)
    (illustrative / "prompts").mkdir()
    (illustrative / "config.json").write_text(
        json.dumps(
            {
                "description": "Coaching illustrations for pickleball",
                "tags": ["pickleball", "coaching"],
                "supported_types": ["diagram", "illustration"],
                "version": "1.2.0",
            }
        ),
        encoding="utf-8",
    )
    (illustrative / "style-guide.json").write_text(
        json.dumps({"palette": ["#1a2332"]}), encoding="utf-8"
    )
    (illustrative / "domain-knowledge.txt").write_text(
        "Court is 20x44 feet.\n", encoding="utf-8"
    )
    (illustrative / "prompts" / "diagram.txt").write_text(
        "Top-down court diagram", encoding="utf-8"
    )
    (illustrative / "style-references" / "bold-grid.png").write_bytes(b"\x89PNG grid")
    (illustrative / "style-references" / "warm.jpg").write_bytes(b"\xff\xd8 jpg")

    photo = templates / "business" / "photo"
    photo.mkdir(parents=True)
    (photo / "config.json").write_text(
        json.dumps({"description": "Corporate photography", "tags": ["office"]}),
        encoding="utf-8",
    )

    # directory w/o config.json is skipped by the registry scan
    (templates / "business" / "draft").mkdir()

    return repo_dir
