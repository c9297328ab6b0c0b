# app/core/dependencies.py
from google.cloud import bigquery, storage
from app.core.config import settings
from app.services.cloud_storage_service import CloudStorageService
from app.services.bigquery_ai_service import BigQueryAIService
from app.services.data_warehousing_service import DataWarehousingService
import functools
import logging
import os

logger = logging.getLogger(__name__)


def _check_key_path():
    key_path = settings.SERVICE_ACCOUNT_KEY_PATH
    if key_path and not os.path.exists(key_path):
        logger.error(f"Service account key file not found at: {key_path}")
        raise FileNotFoundError(f"Service account key file not found at: {key_path}")
    return key_path


# Use functools.lru_cache so each SDK client is initialized only once
@functools.lru_cache()
def get_storage_client() -> storage.Client:
    """
    Provides the Cloud Storage client shared by every request.
    Falls back to Application Default Credentials when no key file is configured.
    """
    try:
        key_path = _check_key_path()
        if key_path:
            client = storage.Client.from_service_account_json(key_path, project=settings.GOOGLE_CLOUD_PROJECT_ID)
        else:
            client = storage.Client(project=settings.GOOGLE_CLOUD_PROJECT_ID)
        logger.info(f"Cloud Storage client successfully initialized for project: {client.project}")
        return client
    except FileNotFoundError as e:
        logger.critical(f"Failed to initialize Cloud Storage client: {e}")
        raise
    except Exception as e:
        logger.critical(f"An unexpected error occurred during Cloud Storage client initialization: {e}")
        raise ConnectionError(
            f"Could not connect to Cloud Storage. Check credentials and project ID. Error: {e}"
        ) from e


@functools.lru_cache()
def get_bigquery_client() -> bigquery.Client:
    """
    Provides the BigQuery client shared by every request.
    """
    try:
        key_path = _check_key_path()
        if key_path:
            client = bigquery.Client.from_service_account_json(key_path, project=settings.GOOGLE_CLOUD_PROJECT_ID)
        else:
            client = bigquery.Client(project=settings.GOOGLE_CLOUD_PROJECT_ID)
        logger.info(f"BigQuery client successfully initialized for project: {client.project}")
        return client
    except FileNotFoundError as e:
        logger.critical(f"Failed to initialize BigQuery client: {e}")
        raise
    except Exception as e:
        logger.critical(f"An unexpected error occurred during BigQuery client initialization: {e}")
        raise ConnectionError(
            f"Could not connect to BigQuery. Check credentials and project ID. Error: {e}"
        ) from e


def get_cloud_storage_service() -> CloudStorageService:
    return CloudStorageService(client=get_storage_client())


def get_bigquery_ai_service() -> BigQueryAIService:
    return BigQueryAIService(
        client=get_bigquery_client(),
        page_size=settings.BQ_PAGE_SIZE,
        job_timeout=settings.BQ_JOB_TIMEOUT_SECONDS,
    )


def get_data_warehousing_service() -> DataWarehousingService:
    return DataWarehousingService(
        client=get_bigquery_client(),
        dataset_location=settings.BQ_DATASET_LOCATION,
        job_location=settings.BQ_JOB_LOCATION,
        page_size=settings.BQ_PAGE_SIZE,
        job_timeout=settings.BQ_JOB_TIMEOUT_SECONDS,
    )
