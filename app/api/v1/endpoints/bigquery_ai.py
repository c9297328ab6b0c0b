# app/api/v1/endpoints/bigquery_ai.py
from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, List, Optional, Type
from app.api.models.bigquery_ai_models import EvaluationQuery, JobHandle, ModelDefinition, ModelSummary
from app.core.dependencies import get_bigquery_ai_service
from app.core.errors import ErrorKind, ServiceError
from app.services.bigquery_ai_service import BigQueryAIService

router = APIRouter()


def _parse_request(body: Dict[str, Any], model: Type[BaseModel], required: List[str]):
    """
    Validates a JSON request body before any BigQuery call is made.
    Missing fields and mistyped values are both rejected as BAD_REQUEST.
    """
    if any(body.get(name) is None for name in required):
        raise ServiceError(
            ErrorKind.BAD_REQUEST, f"Bad Request: Missing required fields in request: {' or '.join(required)}"
        )
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise ServiceError(ErrorKind.BAD_REQUEST, f"Bad Request: {e}")


@router.get("/model/{dataset_name}", response_model=List[ModelSummary], summary="List the models in a dataset")
def list_models(dataset_name: str, service: BigQueryAIService = Depends(get_bigquery_ai_service)):
    return service.list_models(dataset_name).unwrap()


@router.post("/model/{dataset_name}", response_class=PlainTextResponse, summary="Create and train a model")
def create_model(
    dataset_name: str,
    model_definition: Dict[str, Any] = Body(..., examples=[{"modelName": "my_model", "sql": "CREATE MODEL ..."}]),
    service: BigQueryAIService = Depends(get_bigquery_ai_service),
):
    """
    Expects ``{"modelName": ..., "sql": ...}``. Blocks until the training job finishes.
    """
    definition = _parse_request(model_definition, ModelDefinition, ["modelName", "sql"])
    return service.create_model(dataset_name, definition).unwrap()


@router.delete("/model/{dataset_name}", response_class=PlainTextResponse, summary="Delete a model")
def delete_model(
    dataset_name: str,
    model_name: str = Query(..., alias="modelName"),
    service: BigQueryAIService = Depends(get_bigquery_ai_service),
):
    return service.delete_model(dataset_name, model_name).unwrap()


@router.get("/checkTraining/{job_id}", summary="Check the status of a training job")
def check_training_status(
    job_id: str,
    location: Optional[str] = None,
    service: BigQueryAIService = Depends(get_bigquery_ai_service),
) -> Dict[str, str]:
    return service.check_training_status(JobHandle(job_id=job_id, location=location)).unwrap()


@router.get("/model/{dataset_name}/{model_name}", response_class=PlainTextResponse, summary="Evaluate a model")
def evaluate_model(
    dataset_name: str,
    model_name: str,
    evaluation_query: Dict[str, Any] = Body(..., examples=[{"sql": "SELECT * FROM ML.EVALUATE(...)"}]),
    service: BigQueryAIService = Depends(get_bigquery_ai_service),
):
    query = _parse_request(evaluation_query, EvaluationQuery, ["sql"])
    return service.evaluate_model(dataset_name, model_name, query).unwrap()
