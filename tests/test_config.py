"""Settings loading from the environment."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from vinovault.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("PORT", "DOCUMENT_ROOT", "ENTRY_DOCUMENT", "HEALTH_USER_AGENT_TOKEN", "LOG_LEVEL", "SHUTDOWN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_defaults():
    s = Settings()
    assert s.PORT == 8080
    assert s.ENTRY_DOCUMENT == "index.html"
    assert s.HEALTH_USER_AGENT_TOKEN == "GoogleHC"
    assert s.SHUTDOWN_TIMEOUT is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("HEALTH_USER_AGENT_TOKEN", "kube-probe")
    monkeypatch.setenv("SHUTDOWN_TIMEOUT", "12.5")
    s = Settings()
    assert s.PORT == 9000
    assert s.HEALTH_USER_AGENT_TOKEN == "kube-probe"
    assert s.SHUTDOWN_TIMEOUT == 12.5


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("PORT=8181\nENTRY_DOCUMENT=shell.html\n")
    s = Settings()
    assert s.PORT == 8181
    assert s.entry_document_path.name == "shell.html"


@pytest.mark.parametrize("port", ["-1", "65536", "http"])
def test_invalid_port(monkeypatch, port):
    monkeypatch.setenv("PORT", port)
    with pytest.raises(ValidationError):
        Settings()


def test_relative_document_root_is_made_absolute(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCUMENT_ROOT", "dist")
    s = Settings()
    assert s.DOCUMENT_ROOT == str(tmp_path / "dist")
    assert s.document_root == (tmp_path / "dist").resolve()


def test_default_document_root_is_working_directory(tmp_path):
    s = Settings()
    assert s.document_root == tmp_path.resolve()
    assert s.entry_document_path == tmp_path.resolve() / "index.html"


def test_document_root_resolved_once(monkeypatch, tmp_path):
    s = Settings(DOCUMENT_ROOT="dist")

    def no_resolve(self, strict=False):
        raise AssertionError("document root resolved again")

    monkeypatch.setattr(Path, "resolve", no_resolve)
    assert s.document_root == tmp_path / "dist"
    assert s.entry_document_path == tmp_path / "dist" / "index.html"
