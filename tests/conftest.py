from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import (
    get_bigquery_ai_service,
    get_cloud_storage_service,
    get_data_warehousing_service,
)
from app.main import app
from app.services.bigquery_ai_service import BigQueryAIService
from app.services.cloud_storage_service import CloudStorageService
from app.services.data_warehousing_service import DataWarehousingService
from fakes import FakeBigQueryClient, FakeStorageClient


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def bigquery_client() -> FakeBigQueryClient:
    return FakeBigQueryClient()


@pytest.fixture
def storage_service(storage_client) -> CloudStorageService:
    return CloudStorageService(client=storage_client)


@pytest.fixture
def ai_service(bigquery_client) -> BigQueryAIService:
    return BigQueryAIService(client=bigquery_client, page_size=100, job_timeout=30.0)


@pytest.fixture
def warehouse_service(bigquery_client) -> DataWarehousingService:
    return DataWarehousingService(client=bigquery_client, dataset_location="EU", job_location="eu", job_timeout=30.0)


@pytest.fixture
def api(storage_service, ai_service, warehouse_service):
    app.dependency_overrides[get_cloud_storage_service] = lambda: storage_service
    app.dependency_overrides[get_bigquery_ai_service] = lambda: ai_service
    app.dependency_overrides[get_data_warehousing_service] = lambda: warehouse_service
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
