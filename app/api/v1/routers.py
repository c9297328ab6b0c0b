# app/api/v1/routers.py
from fastapi import APIRouter
from app.api.v1.endpoints import bigquery_ai, cloud_storage, data_warehousing

api_router = APIRouter()
api_router.include_router(cloud_storage.router, prefix="/cloud-storage", tags=["Cloud Storage"])
api_router.include_router(bigquery_ai.router, prefix="/bigquery-ai", tags=["BigQuery AI"])
api_router.include_router(data_warehousing.router, prefix="/data-warehousing", tags=["Data Warehousing"])
