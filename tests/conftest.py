"""Shared fixtures: a small UI bundle on disk and clients for it."""

import pytest
from httpx import AsyncClient, ASGITransport

from vinovault import static
from vinovault.config import Settings
from vinovault.main import create_app

INDEX_HTML = b"<!doctype html><html><body><div id=\"root\"></div></body></html>"
APP_JS = b"console.log('cellar');"


@pytest.fixture
def bundle(tmp_path):
    """A document root holding an SPA shell and a few assets."""
    root = tmp_path / "dist"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "app.js").write_bytes(APP_JS)
    (root / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (root / "manifest.json").write_bytes(b'{"name": "VinoVault"}')
    (root / "wine.dat").write_bytes(b"\x00\x01\x02")

    assets = root / "assets"
    assets.mkdir()
    (assets / "style.css").write_bytes(b"body { color: #722f37; }")
    (assets / "label.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (assets / "Bottle.JPG").write_bytes(b"\xff\xd8\xff")
    (assets / "grape.svg").write_bytes(b"<svg/>")
    (assets / "Cellar.tsx").write_bytes(b"export const Cellar = () => null;")

    # A sibling whose name shares the root's prefix
    (tmp_path / "dist2").mkdir()
    (tmp_path / "dist2" / "secret.txt").write_bytes(b"secret")
    (tmp_path / "outside.txt").write_bytes(b"outside")
    return root


@pytest.fixture
def settings(bundle):
    return Settings(DOCUMENT_ROOT=str(bundle), PORT=0)


@pytest.fixture
def stat_calls(monkeypatch):
    """Record every path the server looks up on disk."""
    calls = []
    real_stat = static.stat_asset

    async def counting_stat(path):
        calls.append(path)
        return await real_stat(path)

    monkeypatch.setattr(static, "stat_asset", counting_stat)
    return calls


@pytest.fixture
async def client(settings):
    transport = ASGITransport(app=create_app(settings))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def index_html():
    return INDEX_HTML


@pytest.fixture
def app_js():
    return APP_JS
