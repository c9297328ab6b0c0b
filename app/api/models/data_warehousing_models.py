# app/api/models/data_warehousing_models.py
from google.cloud.bigquery import SchemaField
from google.cloud.bigquery.enums import SqlTypeNames
from pydantic import BaseModel, Field, field_validator
from typing import List


class FieldDefinition(BaseModel):
    name: str
    type: str

    @field_validator("type")
    @classmethod
    def known_sql_type(cls, value: str) -> str:
        # Accepts legacy (INTEGER) and standard (INT64) names, any case
        try:
            return SqlTypeNames[value.strip().upper()].value
        except KeyError:
            raise ValueError(f"Unknown SQL type: {value}")


class TableSchemaDefinition(BaseModel):
    fields: List[FieldDefinition] = Field(..., examples=[[{"name": "id", "type": "INTEGER"}]])

    def to_schema(self) -> List[SchemaField]:
        return [SchemaField(field.name, field.type) for field in self.fields]
