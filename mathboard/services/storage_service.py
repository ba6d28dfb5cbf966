import os
import re
import uuid
from pathlib import Path
from typing import Optional

from tornado.ioloop import IOLoop


UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
ROOT_FOLDER = "root"


def sanitize_filename(filename: str) -> str:
    name = os.path.basename(filename or "").strip()
    name = UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
    return name[:128] or "file"


def build_object_key(filename: str, folder: Optional[str] = None) -> str:
    return f"{folder or ROOT_FOLDER}/{uuid.uuid4().hex}-{sanitize_filename(filename)}"


class StorageService:
    """Local filesystem object store. Blocking file I/O runs in the IOLoop's executor."""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or os.getenv("UPLOAD_ROOT") or "uploads").resolve()

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"object key escapes storage root: {key!r}")
        return path

    def _write(self, key: str, body: bytes) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)

    def _delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    async def put(self, key: str, body: bytes) -> None:
        await IOLoop.current().run_in_executor(None, self._write, key, body)

    async def delete(self, key: str) -> bool:
        return await IOLoop.current().run_in_executor(None, self._delete, key)

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()
