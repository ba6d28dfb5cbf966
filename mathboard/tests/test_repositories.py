import types
from datetime import datetime, timedelta, timezone

import pytest

from mathboard.db.context import DBContext
from mathboard.repositories import FolderRepository, UploadRepository


def matches(doc, query):
    for field, expected in query.items():
        if isinstance(expected, dict) and "$in" in expected:
            if doc.get(field) not in expected["$in"]:
                return False
        elif doc.get(field) != expected:
            return False
    return True


def project(doc, projection):
    included = [field for field, flag in (projection or {}).items() if flag and field != "_id"]
    if included:
        return {field: doc[field] for field in included if field in doc}
    return {field: value for field, value in doc.items() if field != "_id"}


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return list(self.docs)


class FakeCollection:
    def __init__(self):
        self.docs = []

    async def insert_one(self, doc):
        doc["_id"] = len(self.docs) + 1
        self.docs.append(doc)

    def find(self, query, projection=None):
        return FakeCursor([project(doc, projection) for doc in self.docs if matches(doc, query)])

    async def find_one(self, query, projection=None):
        return next((project(doc, projection) for doc in self.docs if matches(doc, query)), None)

    async def delete_one(self, query):
        for index, doc in enumerate(self.docs):
            if matches(doc, query):
                del self.docs[index]
                return types.SimpleNamespace(deleted_count=1)
        return types.SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        before = len(self.docs)
        self.docs = [doc for doc in self.docs if not matches(doc, query)]
        return types.SimpleNamespace(deleted_count=before - len(self.docs))


@pytest.fixture
def db_context():
    database = types.SimpleNamespace(uploads=FakeCollection(), folders=FakeCollection())
    return types.SimpleNamespace(database=database)


def upload_record(key, folder, minutes):
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes)
    return {"key": key, "filename": key, "folder": folder, "content_type": "image/png", "size": 1, "created_at": created}


@pytest.mark.asyncio
async def test_upload_list_filters_by_folder_newest_first(db_context):
    repo = UploadRepository(db_context)
    await repo.insert(upload_record("week1/a", "week1", 0))
    await repo.insert(upload_record("week1/b", "week1", 5))
    await repo.insert(upload_record("root/c", None, 10))

    assert [r["key"] for r in await repo.list()] == ["root/c", "week1/b", "week1/a"]
    assert [r["key"] for r in await repo.list("week1")] == ["week1/b", "week1/a"]
    assert all("_id" not in r for r in await repo.list())


@pytest.mark.asyncio
async def test_upload_insert_does_not_mutate_the_record(db_context):
    repo = UploadRepository(db_context)
    record = upload_record("root/a", None, 0)

    await repo.insert(record)

    assert "_id" not in record
    assert await repo.get("root/a") == record
    assert await repo.get("root/missing") is None


@pytest.mark.asyncio
async def test_upload_delete_and_delete_by_folder(db_context):
    repo = UploadRepository(db_context)
    await repo.insert(upload_record("week1/a", "week1", 0))
    await repo.insert(upload_record("week1/b", "week1", 1))
    await repo.insert(upload_record("week2/c", "week2", 2))

    assert await repo.delete("week2/c") is True
    assert await repo.delete("week2/c") is False
    assert sorted(await repo.delete_by_folder("week1")) == ["week1/a", "week1/b"]
    assert await repo.delete_by_folder("week1") == []
    assert db_context.database.uploads.docs == []


@pytest.mark.asyncio
async def test_folder_list_is_sorted_by_name(db_context):
    repo = FolderRepository(db_context)
    for name in ["week_2", "algebra", "week_1"]:
        doc = await repo.insert(name)
        assert "_id" not in doc

    assert [f["name"] for f in await repo.list()] == ["algebra", "week_1", "week_2"]
    assert (await repo.get("algebra"))["name"] == "algebra"
    assert await repo.delete("algebra") is True
    assert await repo.delete("algebra") is False
    assert await repo.get("algebra") is None


def test_app_starts_without_mongodb_url(monkeypatch):
    import mathboard.main as main

    monkeypatch.delenv("MONGODB_URL", raising=False)
    monkeypatch.setattr(DBContext, "_instance", None)

    app = main.make_app()

    assert app is not None
    with pytest.raises(RuntimeError):
        UploadRepository().collection
    with pytest.raises(RuntimeError):
        FolderRepository().collection
