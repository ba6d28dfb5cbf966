import logging
from datetime import datetime, timezone

from pymongo.errors import PyMongoError

from mathboard.handlers.base import ApiError, JsonHandler
from mathboard.models import CreateFolderRequest, Folder, UploadRecord
from mathboard.repositories import FolderRepository, UploadRepository
from mathboard.services.storage_service import StorageService, build_object_key


logger = logging.getLogger(__name__)


class UploadCollectionHandler(JsonHandler):
    def initialize(
        self,
        storage_service: StorageService,
        upload_repo: UploadRepository,
        folder_repo: FolderRepository,
    ):
        self.storage_service = storage_service
        self.upload_repo = upload_repo
        self.folder_repo = folder_repo

    async def get(self):
        folder = self.get_argument("folder", default=None) or None
        records = await self.upload_repo.list(folder)
        uploads = [UploadRecord.model_validate(record).model_dump(mode="json") for record in records]
        self.write_json({"uploads": uploads})

    async def post(self):
        files = self.request.files.get("file")
        if not files:
            raise ApiError(400, "file required")
        upload = files[0]
        folder = (self.get_body_argument("folder", default="") or "").strip() or None
        if folder and await self.folder_repo.get(folder) is None:
            raise ApiError(400, f"unknown folder: {folder}")

        record = UploadRecord(
            key=build_object_key(upload.filename, folder),
            filename=upload.filename or "file",
            folder=folder,
            content_type=upload.content_type or "application/octet-stream",
            size=len(upload.body),
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self.storage_service.put(record.key, upload.body)
        except OSError as exc:
            logger.error("Storing upload %s failed: %s", record.key, exc)
            raise ApiError(500, "storage operation failed", detail=str(exc))
        try:
            await self.upload_repo.insert(record.model_dump())
        except PyMongoError as exc:
            logger.error("Recording upload %s failed: %s", record.key, exc)
            await self._discard(record.key)
            raise ApiError(500, "storage operation failed", detail=str(exc))
        logger.info("Stored upload %s (%d bytes)", record.key, record.size)
        self.write_json({"upload": record.model_dump(mode="json")}, status=201)

    async def _discard(self, key: str) -> None:
        """Remove a stored object whose metadata never made it into the collection."""
        try:
            await self.storage_service.delete(key)
        except (OSError, ValueError) as exc:
            logger.warning("Removing orphaned object %s failed: %s", key, exc)


class UploadItemHandler(JsonHandler):
    def initialize(self, storage_service: StorageService, upload_repo: UploadRepository):
        self.storage_service = storage_service
        self.upload_repo = upload_repo

    async def delete(self, key: str):
        if await self.upload_repo.get(key) is None:
            raise ApiError(404, f"unknown upload: {key}")
        try:
            await self.storage_service.delete(key)
        except (OSError, ValueError) as exc:
            logger.error("Deleting upload %s failed: %s", key, exc)
            raise ApiError(500, "storage operation failed", detail=str(exc))
        await self.upload_repo.delete(key)
        self.write_json({"deleted": key})


class FolderCollectionHandler(JsonHandler):
    def initialize(self, folder_repo: FolderRepository):
        self.folder_repo = folder_repo

    async def get(self):
        folders = [Folder.model_validate(doc).model_dump(mode="json") for doc in await self.folder_repo.list()]
        self.write_json({"folders": folders})

    async def post(self):
        request = self.parse_body(CreateFolderRequest, "valid folder name required")
        if await self.folder_repo.get(request.name) is not None:
            raise ApiError(409, f"folder already exists: {request.name}")
        doc = await self.folder_repo.insert(request.name)
        self.write_json({"folder": Folder.model_validate(doc).model_dump(mode="json")}, status=201)


class FolderItemHandler(JsonHandler):
    """Deleting a folder removes its uploads from the store and the metadata collection."""

    def initialize(
        self,
        storage_service: StorageService,
        upload_repo: UploadRepository,
        folder_repo: FolderRepository,
    ):
        self.storage_service = storage_service
        self.upload_repo = upload_repo
        self.folder_repo = folder_repo

    async def delete(self, name: str):
        if await self.folder_repo.get(name) is None:
            raise ApiError(404, f"unknown folder: {name}")
        keys = await self.upload_repo.delete_by_folder(name)
        for key in keys:
            try:
                await self.storage_service.delete(key)
            except OSError as exc:
                logger.warning("Removing stored object %s failed: %s", key, exc)
        await self.folder_repo.delete(name)
        self.write_json({"deleted": name, "uploads_removed": len(keys)})
