import os

import logging

import tornado.ioloop
import tornado.web

from mathboard.handlers import (
    ChatHandler,
    ChatStreamHandler,
    ClassLinkWebSocketHandler,
    DocsHandler,
    FolderCollectionHandler,
    FolderItemHandler,
    HealthHandler,
    SketchHandler,
    UploadCollectionHandler,
    UploadItemHandler,
)
from mathboard.handlers.base import parse_origins
from mathboard.repositories import FolderRepository, UploadRepository
from mathboard.services.gemini_service import GeminiService
from mathboard.services.relay_service import RelayService
from mathboard.services.storage_service import StorageService


DEFAULT_MAX_UPLOAD_BYTES = 25 * 1024 * 1024


def make_app() -> tornado.web.Application:
    gemini_service = GeminiService()
    storage_service = StorageService()
    upload_repo = UploadRepository()
    folder_repo = FolderRepository()
    relay = RelayService()
    allowed_origins = parse_origins(os.getenv("ALLOWED_ORIGINS"))

    uploads = dict(storage_service=storage_service, upload_repo=upload_repo, folder_repo=folder_repo)

    return tornado.web.Application(
        [
            (r"/health", HealthHandler),
            (r"/docs", DocsHandler),
            (r"/api/chat", ChatHandler, dict(gemini_service=gemini_service)),
            (r"/api/chat/stream", ChatStreamHandler, dict(gemini_service=gemini_service)),
            (r"/api/sketch", SketchHandler, dict(gemini_service=gemini_service)),
            (r"/api/uploads", UploadCollectionHandler, uploads),
            (
                r"/api/uploads/(.+)",
                UploadItemHandler,
                dict(storage_service=storage_service, upload_repo=upload_repo),
            ),
            (r"/api/folders", FolderCollectionHandler, dict(folder_repo=folder_repo)),
            (r"/api/folders/([^/]+)", FolderItemHandler, uploads),
            (
                r"/ws/classlink",
                ClassLinkWebSocketHandler,
                dict(relay=relay, allowed_origins=allowed_origins),
            ),
        ],
        allowed_origins=allowed_origins,
    )


def setup_logger(name):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    return logger


def main() -> None:
    logger = setup_logger("mathboard")
    logger.info(f"Started server process {os.getpid()}")
    port = int(os.environ.get("PORT", "8000"))
    address = os.environ.get("ADDRESS", "0.0.0.0")
    max_body_size = int(os.environ.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))
    app = make_app()
    logger.info("Waiting for application startup...")
    app.listen(port=port, address=address, max_body_size=max_body_size)
    logger.info("Application startup complete.")
    logger.info(f"Tornado running on http://{address}:{port} (Press Ctrl+C to quit)")
    tornado.ioloop.IOLoop.current().start()


if __name__ == "__main__":
    main()
