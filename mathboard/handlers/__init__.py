from .health_handler import HealthHandler
from .docs_handler import DocsHandler
from .chat_handler import ChatHandler, ChatStreamHandler
from .sketch_handler import SketchHandler
from .upload_handler import (
    FolderCollectionHandler,
    FolderItemHandler,
    UploadCollectionHandler,
    UploadItemHandler,
)
from .classlink_ws_handler import ClassLinkWebSocketHandler

__all__ = [
    "HealthHandler",
    "DocsHandler",
    "ChatHandler",
    "ChatStreamHandler",
    "SketchHandler",
    "FolderCollectionHandler",
    "FolderItemHandler",
    "UploadCollectionHandler",
    "UploadItemHandler",
    "ClassLinkWebSocketHandler",
]
