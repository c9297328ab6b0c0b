# app/api/models/bigquery_ai_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ModelDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="modelName", examples=["my_linear_model"])
    sql: str = Field(..., examples=["CREATE OR REPLACE MODEL `mydataset.my_linear_model` OPTIONS(model_type='linear_reg') AS SELECT ..."])


class EvaluationQuery(BaseModel):
    sql: str = Field(..., examples=["SELECT * FROM ML.EVALUATE(MODEL `mydataset.my_linear_model`)"])


class ModelSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="modelId")
    description: Optional[str] = Field(default=None, alias="modelDescription")
    type: Optional[str] = Field(default=None, alias="modelType")


class JobHandle(BaseModel):
    job_id: str
    location: Optional[str] = None
