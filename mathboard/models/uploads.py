import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


FOLDER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class Folder(BaseModel):
    name: str
    created_at: datetime


class CreateFolderRequest(BaseModel):
    name: str = Field(..., description="Folder name: letters, digits, '_' or '-', at most 64 chars.")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not FOLDER_NAME_PATTERN.match(value):
            raise ValueError("folder name must match [A-Za-z0-9_-]{1,64}")
        return value


class UploadRecord(BaseModel):
    key: str = Field(..., description="Object store key, '<folder or root>/<id>-<filename>'.")
    filename: str
    folder: Optional[str] = None
    content_type: str = "application/octet-stream"
    size: int = Field(..., ge=0)
    created_at: datetime
