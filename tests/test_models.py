import pytest
from pydantic import ValidationError

from app.api.models.data_warehousing_models import FieldDefinition, TableSchemaDefinition


@pytest.mark.parametrize(
    "given, stored",
    [("INTEGER", "INTEGER"), ("int64", "INTEGER"), ("Float64", "FLOAT"), ("bool", "BOOLEAN"), ("STRING", "STRING")],
)
def test_field_types_are_normalized(given, stored):
    assert FieldDefinition(name="x", type=given).type == stored


def test_unknown_field_type_is_rejected():
    with pytest.raises(ValidationError, match="Unknown SQL type: TEXT"):
        FieldDefinition(name="x", type="TEXT")


def test_schema_requires_fields():
    with pytest.raises(ValidationError):
        TableSchemaDefinition.model_validate_json(b'{"columns": []}')


def test_to_schema_builds_schema_fields():
    definition = TableSchemaDefinition.model_validate_json(b'{"fields":[{"name":"id","type":"integer"}]}')
    [field] = definition.to_schema()
    assert (field.name, field.field_type) == ("id", "INTEGER")
