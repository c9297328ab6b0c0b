# app/api/models/cloud_storage_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class BlobInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    content_type: Optional[str] = Field(default=None, alias="contentType")
    size: Optional[int] = None


class BlobRef(BaseModel):
    """A file inside a bucket, with its content when it has been read or is about to be written."""
    model_config = ConfigDict(populate_by_name=True)

    bucket_name: str = Field(..., alias="bucketName")
    file_name: str = Field(..., alias="fileName")
    content: bytes = b""
    content_type: Optional[str] = Field(default=None, alias="contentType")
