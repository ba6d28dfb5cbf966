from .folder_repository import FolderRepository
from .upload_repository import UploadRepository

__all__ = ["FolderRepository", "UploadRepository"]
