import json
import types
import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from tornado import httpclient, httpserver, testing, websocket

from mathboard.services.errors import GenerationError
from mathboard.services.relay_service import RelayService
from mathboard.services.storage_service import StorageService


class FakeGeminiService:
    def __init__(self):
        self.reply = "Antwort"
        self.chunks = ["Hallo", "", " Welt"]
        self.stream_error_after = None
        self.chat_error = None
        self.sketch = {"layers": [{"name": "Schritt 1", "strokes": []}]}
        self.sketch_error = None
        self.calls = []

    async def chat(self, messages):
        self.calls.append(("chat", list(messages)))
        if self.chat_error:
            raise self.chat_error
        return self.reply

    async def stream_chat(self, messages):
        self.calls.append(("stream_chat", list(messages)))
        for index, chunk in enumerate(self.chunks):
            if self.stream_error_after == index:
                raise GenerationError("stream broke")
            if chunk:
                yield chunk

    async def generate_sketch(self, topic):
        self.calls.append(("generate_sketch", topic))
        if self.sketch_error:
            raise self.sketch_error
        return self.sketch


class FakeUploadRepository:
    def __init__(self):
        self.records = []

    async def insert(self, record):
        self.records.append(dict(record))

    async def get(self, key):
        return next((dict(r) for r in self.records if r["key"] == key), None)

    async def list(self, folder=None):
        matching = [dict(r) for r in self.records if not folder or r["folder"] == folder]
        return sorted(matching, key=lambda r: r["created_at"], reverse=True)

    async def delete(self, key):
        before = len(self.records)
        self.records = [r for r in self.records if r["key"] != key]
        return len(self.records) < before

    async def delete_by_folder(self, folder):
        keys = [r["key"] for r in self.records if r["folder"] == folder]
        self.records = [r for r in self.records if r["folder"] != folder]
        return keys


class FakeFolderRepository:
    def __init__(self):
        self.folders = {}

    async def insert(self, name):
        doc = {"name": name, "created_at": datetime.now(timezone.utc)}
        self.folders[name] = doc
        return dict(doc)

    async def get(self, name):
        doc = self.folders.get(name)
        return dict(doc) if doc else None

    async def list(self):
        return [dict(self.folders[name]) for name in sorted(self.folders)]

    async def delete(self, name):
        return self.folders.pop(name, None) is not None


@pytest.fixture
def app_env(monkeypatch, tmp_path):
    import mathboard.main as main

    env = types.SimpleNamespace(
        main=main,
        gemini=FakeGeminiService(),
        uploads=FakeUploadRepository(),
        folders=FakeFolderRepository(),
        relay=RelayService(),
        storage=StorageService(root=str(tmp_path / "uploads")),
    )
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    monkeypatch.setattr(main, "GeminiService", lambda: env.gemini)
    monkeypatch.setattr(main, "UploadRepository", lambda: env.uploads)
    monkeypatch.setattr(main, "FolderRepository", lambda: env.folders)
    monkeypatch.setattr(main, "RelayService", lambda: env.relay)
    monkeypatch.setattr(main, "StorageService", lambda: env.storage)
    return env


@pytest_asyncio.fixture
async def server(app_env):
    app = app_env.main.make_app()
    http_server = httpserver.HTTPServer(app)
    sock, port = testing.bind_unused_port()
    http_server.add_socket(sock)
    client = httpclient.AsyncHTTPClient()

    async def fetch(path, method="GET", body=None, headers=None):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        return await client.fetch(
            f"http://127.0.0.1:{port}{path}",
            method=method,
            body=body,
            headers=headers,
            raise_error=False,
        )

    async def connect(query="", headers=None, subprotocols=None):
        url = f"ws://127.0.0.1:{port}/ws/classlink"
        if query:
            url = f"{url}?{query}"
        return await websocket.websocket_connect(
            httpclient.HTTPRequest(url, headers=headers), subprotocols=subprotocols
        )

    yield types.SimpleNamespace(port=port, env=app_env, fetch=fetch, connect=connect)
    http_server.stop()


def multipart_body(fields=None, files=None):
    """Encode form fields and (name, filename, content_type, data) files as multipart/form-data."""
    boundary = uuid.uuid4().hex
    lines = []
    for name, value in (fields or {}).items():
        lines.append(f"--{boundary}\r\nContent-Disposition: form-data; name=\"{name}\"\r\n\r\n{value}\r\n".encode())
    for name, filename, content_type, data in files or []:
        lines.append(
            (
                f"--{boundary}\r\nContent-Disposition: form-data; name=\"{name}\"; filename=\"{filename}\"\r\n"
                f"Content-Type: {content_type}\r\n\r\n"
            ).encode()
            + data
            + b"\r\n"
        )
    lines.append(f"--{boundary}--\r\n".encode())
    return b"".join(lines), {"Content-Type": f"multipart/form-data; boundary={boundary}"}


@pytest.fixture
def multipart():
    return multipart_body
