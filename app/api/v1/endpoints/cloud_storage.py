# app/api/v1/endpoints/cloud_storage.py
from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from fastapi.responses import PlainTextResponse
from typing import List
from urllib.parse import quote
from app.api.models.cloud_storage_models import BlobInfo, BlobRef
from app.core.dependencies import get_cloud_storage_service
from app.services.cloud_storage_service import CloudStorageService

router = APIRouter()


def _attachment_disposition(file_name: str) -> str:
    quoted = quote(file_name)
    if quoted != file_name:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{file_name}"'


@router.get("/bucket", response_model=List[str], summary="List buckets")
def list_buckets(service: CloudStorageService = Depends(get_cloud_storage_service)):
    return service.list_buckets().unwrap()


@router.get("/bucket/{bucket_name}", response_model=List[BlobInfo], summary="List the files in a bucket")
def list_objects_of_bucket(bucket_name: str, service: CloudStorageService = Depends(get_cloud_storage_service)):
    return service.list_objects_of_bucket(bucket_name).unwrap()


@router.post("/bucket", response_class=PlainTextResponse, summary="Create a bucket")
def create_bucket(
    bucket_name: str = Query(..., alias="bucketName"),
    service: CloudStorageService = Depends(get_cloud_storage_service),
):
    return service.create_bucket(bucket_name).unwrap()


@router.get("/bucketFile/{bucket_name}", summary="Download a file from a bucket")
def download_file_from_bucket(
    bucket_name: str,
    file_name: str = Query(..., alias="fileName"),
    service: CloudStorageService = Depends(get_cloud_storage_service),
):
    """
    Streams the file back as an attachment, whatever its stored content type.
    """
    blob = service.download_file_from_bucket(bucket_name, file_name).unwrap()
    return Response(
        content=blob.content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": _attachment_disposition(blob.file_name)},
    )


@router.post("/bucketFile/{bucket_name}", response_class=PlainTextResponse, summary="Upload a file to a bucket")
def upload_file_to_bucket(
    bucket_name: str,
    file: UploadFile = File(...),
    service: CloudStorageService = Depends(get_cloud_storage_service),
):
    blob_ref = BlobRef(
        bucket_name=bucket_name,
        file_name=file.filename or "",
        content=file.file.read(),
        content_type=file.content_type,
    )
    return service.upload_file_to_bucket(blob_ref).unwrap()


@router.delete("/bucketFile/{bucket_name}", response_class=PlainTextResponse, summary="Delete a file from a bucket")
def delete_file_from_bucket(
    bucket_name: str,
    file_name: str = Query(..., alias="fileName"),
    service: CloudStorageService = Depends(get_cloud_storage_service),
):
    return service.delete_file_from_bucket(bucket_name, file_name).unwrap()
