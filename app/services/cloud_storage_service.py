# app/services/cloud_storage_service.py
import logging
from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import storage
from app.api.models.cloud_storage_models import BlobInfo, BlobRef
from app.core.errors import ErrorKind
from app.core.result import OperationResult

logger = logging.getLogger(__name__)


class CloudStorageService:
    """
    Bucket and file operations against Google Cloud Storage.
    Every method makes a single client call and reports its outcome as an OperationResult.
    """

    def __init__(self, client: storage.Client):
        """
        Args:
            client (storage.Client): A long-lived Cloud Storage client.
        """
        self.client = client

    def list_buckets(self) -> OperationResult:
        """Lists the names of every bucket in the client's project."""
        logger.info("Listing buckets...")
        try:
            bucket_names = [bucket.name for bucket in self.client.list_buckets()]
            logger.info(f"Successfully listed {len(bucket_names)} buckets.")
            return OperationResult.success(bucket_names)
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error listing buckets: {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to list buckets. ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while listing buckets: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to list buckets. {e}")

    def list_objects_of_bucket(self, bucket_name: str) -> OperationResult:
        """
        Lists the files stored in a bucket.

        Args:
            bucket_name (str): The bucket to list.

        Returns:
            OperationResult: A list of BlobInfo on success, NOT_FOUND when the bucket is absent.
        """
        logger.info(f"Listing objects in bucket '{bucket_name}'...")
        try:
            blobs = [
                BlobInfo(name=blob.name, content_type=blob.content_type, size=blob.size)
                for blob in self.client.list_blobs(bucket_name)
            ]
            logger.info(f"Successfully listed {len(blobs)} objects in '{bucket_name}'.")
            return OperationResult.success(blobs)
        except NotFound:
            logger.warning(f"Bucket '{bucket_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: Bucket not found: {bucket_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error listing objects in '{bucket_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to list objects in bucket: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while listing objects: {e}")
            return OperationResult.failure(
                ErrorKind.GENERIC_ERROR, f"ERROR: Failed to list objects in bucket: {e}"
            )

    def create_bucket(self, bucket_name: str) -> OperationResult:
        """
        Creates a bucket. An existing bucket is reported as CONFLICT.
        """
        logger.info(f"Creating bucket '{bucket_name}'...")
        try:
            bucket = self.client.create_bucket(bucket_name)
            logger.info(f"Bucket {bucket.name} created.")
            return OperationResult.success("Bucket created successfully.")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error creating bucket '{bucket_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to create bucket: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while creating bucket: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to create bucket: {e}")

    def download_file_from_bucket(self, bucket_name: str, file_name: str) -> OperationResult:
        """
        Reads a file's content.

        Args:
            bucket_name (str): The bucket holding the file.
            file_name (str): The object name.

        Returns:
            OperationResult: A BlobRef carrying the bytes, or NOT_FOUND if the file does not exist.
        """
        logger.info(f"Downloading '{file_name}' from bucket '{bucket_name}'...")
        try:
            blob = self.client.bucket(bucket_name).get_blob(file_name)
            if blob is None:
                logger.warning(f"File '{file_name}' not found in bucket '{bucket_name}'.")
                return OperationResult.failure(ErrorKind.NOT_FOUND, "ERROR: File not found.")
            content = blob.download_as_bytes()
            logger.info(f"Downloaded {len(content)} bytes from '{bucket_name}/{file_name}'.")
            return OperationResult.success(
                BlobRef(
                    bucket_name=bucket_name,
                    file_name=file_name,
                    content=content,
                    content_type=blob.content_type,
                )
            )
        except NotFound:
            logger.warning(f"File '{file_name}' vanished from bucket '{bucket_name}' during download.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, "ERROR: File not found.")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error downloading '{bucket_name}/{file_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to download file from bucket: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred during download: {e}")
            return OperationResult.failure(
                ErrorKind.GENERIC_ERROR, f"ERROR: Failed to download file from bucket: {e}"
            )

    def upload_file_to_bucket(self, blob_ref: BlobRef) -> OperationResult:
        """
        Writes ``blob_ref.content`` to ``blob_ref.bucket_name/blob_ref.file_name``,
        replacing any existing object with that name.
        """
        if not blob_ref.file_name:
            return OperationResult.failure(ErrorKind.BAD_REQUEST, "ERROR: Uploaded file has no name.")
        logger.info(
            f"Uploading {len(blob_ref.content)} bytes to '{blob_ref.bucket_name}/{blob_ref.file_name}'..."
        )
        try:
            blob = self.client.bucket(blob_ref.bucket_name).blob(blob_ref.file_name)
            blob.upload_from_string(blob_ref.content, content_type=blob_ref.content_type)
            logger.info(f"Upload of '{blob_ref.file_name}' to '{blob_ref.bucket_name}' complete.")
            return OperationResult.success(
                f"File {blob_ref.file_name} uploaded successfully to bucket {blob_ref.bucket_name}"
            )
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error uploading '{blob_ref.file_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to upload file to bucket: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred during upload: {e}")
            return OperationResult.failure(
                ErrorKind.GENERIC_ERROR, f"ERROR: Failed to upload file to bucket: {e}"
            )

    def delete_file_from_bucket(self, bucket_name: str, file_name: str) -> OperationResult:
        logger.info(f"Deleting '{file_name}' from bucket '{bucket_name}'...")
        try:
            self.client.bucket(bucket_name).delete_blob(file_name)
            logger.info(f"Deleted '{bucket_name}/{file_name}'.")
            return OperationResult.success(f"File {file_name} deleted successfully from bucket {bucket_name}")
        except NotFound:
            logger.warning(f"File '{file_name}' not found in bucket '{bucket_name}'.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, "File not found")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error deleting '{bucket_name}/{file_name}': {e}")
            return OperationResult.from_google_error(e, "Error: Deleting file from bucket failed: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred during delete: {e}")
            return OperationResult.failure(
                ErrorKind.GENERIC_ERROR, f"ERROR: Failed to delete file from bucket: {e}"
            )
