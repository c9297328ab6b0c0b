# app/api/v1/endpoints/data_warehousing.py
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from typing import Any, Dict, List
from app.core.dependencies import get_data_warehousing_service
from app.services.data_warehousing_service import DataWarehousingService

router = APIRouter()


@router.get("/dataset", response_model=List[str], summary="List datasets")
def list_datasets(service: DataWarehousingService = Depends(get_data_warehousing_service)):
    return service.list_datasets().unwrap()


@router.get("/dataset/{dataset_name}", response_model=List[str], summary="List the tables in a dataset")
def get_dataset_info(dataset_name: str, service: DataWarehousingService = Depends(get_data_warehousing_service)):
    return service.get_dataset_info(dataset_name).unwrap()


@router.post("/dataset/{dataset_name}", response_class=PlainTextResponse, summary="Create a dataset")
def create_dataset(dataset_name: str, service: DataWarehousingService = Depends(get_data_warehousing_service)):
    return service.create_dataset(dataset_name).unwrap()


@router.delete("/dataset/{dataset_name}", response_class=PlainTextResponse, summary="Delete a dataset")
def delete_dataset(
    dataset_name: str,
    delete_contents: bool = Query(False, alias="deleteContents"),
    service: DataWarehousingService = Depends(get_data_warehousing_service),
):
    return service.delete_dataset(dataset_name, delete_contents=delete_contents).unwrap()


@router.get("/data/{dataset_name}", response_model=List[Dict[str, Any]], summary="Read every row of a table")
def get_data(
    dataset_name: str,
    table_name: str = Query(..., alias="tableName"),
    service: DataWarehousingService = Depends(get_data_warehousing_service),
):
    return service.get_data(dataset_name, table_name).unwrap()


@router.post("/data/{dataset_name}", response_class=PlainTextResponse, summary="Create a table from a JSON schema")
async def create_table(
    dataset_name: str,
    request: Request,
    table_name: str = Query(..., alias="tableName"),
    service: DataWarehousingService = Depends(get_data_warehousing_service),
):
    """
    The body is read raw so that malformed JSON is reported by the schema parser
    with the same message as an unknown field type.
    """
    schema_json = await request.body()
    result = await run_in_threadpool(service.create_table, dataset_name, table_name, schema_json)
    return result.unwrap()


@router.post("/data/{dataset_name}/upload", response_class=PlainTextResponse, summary="Append CSV data to a table")
async def upload_data_to_table(
    dataset_name: str,
    table_name: str = Query(..., alias="tableName"),
    skip_leading_rows: int = Query(0, alias="skipLeadingRows", ge=0),
    file: UploadFile = File(...),
    service: DataWarehousingService = Depends(get_data_warehousing_service),
):
    csv_data = await file.read()
    result = await run_in_threadpool(
        service.upload_data_to_table, dataset_name, table_name, csv_data, skip_leading_rows
    )
    return result.unwrap()


@router.delete("/data/{dataset_name}", response_class=PlainTextResponse, summary="Delete a table")
def delete_data(
    dataset_name: str,
    table_name: str = Query(..., alias="tableName"),
    service: DataWarehousingService = Depends(get_data_warehousing_service),
):
    return service.delete_data(dataset_name, table_name).unwrap()
