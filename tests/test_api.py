from unittest.mock import MagicMock

from google.cloud.bigquery import SchemaField

from app.core.dependencies import get_cloud_storage_service
from app.main import app


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


# cloud storage

def test_bucket_lifecycle(api):
    response = api.post("/cloud-storage/bucket", params={"bucketName": "reports"})
    assert response.status_code == 200
    assert response.text == "Bucket created successfully."
    assert response.headers["content-type"].startswith("text/plain")

    assert api.get("/cloud-storage/bucket").json() == ["reports"]

    response = api.post("/cloud-storage/bucket", params={"bucketName": "reports"})
    assert response.status_code == 409


def test_create_bucket_without_name_is_400(api):
    response = api.post("/cloud-storage/bucket")
    assert response.status_code == 400
    assert response.text.startswith("Bad Request:")
    assert "bucketName" in response.text


def test_file_upload_download_delete(api):
    api.post("/cloud-storage/bucket", params={"bucketName": "reports"})

    response = api.post(
        "/cloud-storage/bucketFile/reports", files={"file": ("q1.csv", b"a,b\n1,2\n", "text/csv")}
    )
    assert response.status_code == 200
    assert response.text == "File q1.csv uploaded successfully to bucket reports"

    assert api.get("/cloud-storage/bucket/reports").json() == [
        {"name": "q1.csv", "contentType": "text/csv", "size": 8}
    ]

    response = api.get("/cloud-storage/bucketFile/reports", params={"fileName": "q1.csv"})
    assert response.status_code == 200
    assert response.content == b"a,b\n1,2\n"
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.headers["content-disposition"] == 'attachment; filename="q1.csv"'

    response = api.delete("/cloud-storage/bucketFile/reports", params={"fileName": "q1.csv"})
    assert response.text == "File q1.csv deleted successfully from bucket reports"

    response = api.get("/cloud-storage/bucketFile/reports", params={"fileName": "q1.csv"})
    assert response.status_code == 404
    assert response.text == "ERROR: File not found."


def test_unhandled_error_hides_details(api):
    service = MagicMock()
    service.list_buckets.side_effect = RuntimeError("secret stack detail")
    app.dependency_overrides[get_cloud_storage_service] = lambda: service

    response = api.get("/cloud-storage/bucket")

    assert response.status_code == 500
    assert response.text == "Internal server error"


# bigquery ai

def test_create_model_missing_fields_is_400_without_calling_bigquery(api, bigquery_client):
    for body in ({"sql": "CREATE MODEL ..."}, {"modelName": "churn"}, {}):
        response = api.post("/bigquery-ai/model/ml", json=body)
        assert response.status_code == 400
        assert "Missing required fields in request: modelName or sql" in response.text
    assert bigquery_client.calls == []


def test_create_model(api):
    response = api.post("/bigquery-ai/model/ml", json={"modelName": "churn", "sql": "CREATE MODEL ..."})
    assert response.status_code == 200
    assert response.text == "Model created successfully: churn in dataset: ml\nJobID: job_1"


def test_create_model_job_failure_is_500(api, bigquery_client):
    bigquery_client.query_error = {"reason": "invalidQuery", "message": "Syntax error"}
    response = api.post("/bigquery-ai/model/ml", json={"modelName": "churn", "sql": "CREATE MODL"})
    assert response.status_code == 500
    assert "Syntax error" in response.text


def test_list_and_delete_models(api, bigquery_client):
    bigquery_client.add_model("ml", "churn", description="d")

    assert api.get("/bigquery-ai/model/ml").json() == [
        {"modelId": "churn", "modelDescription": "d", "modelType": "LINEAR_REGRESSION"}
    ]
    assert api.delete("/bigquery-ai/model/ml", params={"modelName": "churn"}).status_code == 200

    response = api.get("/bigquery-ai/model/ml")
    assert response.status_code == 404
    assert response.text == "Dataset does not contain any models."


def test_evaluate_model_requires_sql(api, bigquery_client):
    response = api.request("GET", "/bigquery-ai/model/ml/churn", json={"query": "SELECT 1"})
    assert response.status_code == 400
    assert "Missing required fields in request: sql" in response.text

    response = api.request("GET", "/bigquery-ai/model/ml/churn", json={"sql": "SELECT 1"})
    assert response.status_code == 200
    assert response.text.startswith("Model evaluation successfully: churn in dataset: ml")


def test_check_training_for_unknown_job_is_404(api):
    response = api.get("/bigquery-ai/checkTraining/abc123")
    assert response.status_code == 404
    assert "Job not found" in response.text


def test_check_training(api):
    api.post("/bigquery-ai/model/ml", json={"modelName": "churn", "sql": "CREATE MODEL ..."})
    assert api.get("/bigquery-ai/checkTraining/job_1").json() == {"Status": "DONE"}


# data warehousing

def test_dataset_lifecycle(api):
    assert api.post("/data-warehousing/dataset/sales").text == "Successfully created dataset: sales"
    assert api.get("/data-warehousing/dataset").json() == ["sales"]

    response = api.post(
        "/data-warehousing/data/sales",
        params={"tableName": "orders"},
        content=b'{"fields":[{"name":"id","type":"INTEGER"},{"name":"item","type":"string"}]}',
    )
    assert response.status_code == 200
    assert api.get("/data-warehousing/dataset/sales").json() == ["orders"]

    response = api.delete("/data-warehousing/dataset/sales")
    assert response.status_code == 500

    response = api.delete("/data-warehousing/dataset/sales", params={"deleteContents": "true"})
    assert response.text == "Successfully deleted dataset: sales"


def test_delete_unknown_dataset_is_404(api):
    response = api.delete("/data-warehousing/dataset/ghost")
    assert response.status_code == 404
    assert response.text == "ERROR: dataset not found: ghost"


def test_create_table_with_bad_type_is_400(api, bigquery_client):
    bigquery_client.add_dataset("sales")
    response = api.post(
        "/data-warehousing/data/sales",
        params={"tableName": "orders"},
        content=b'{"fields":[{"name":"id","type":"WHOLE"}]}',
    )
    assert response.status_code == 400


def test_upload_empty_csv_is_400(api, bigquery_client):
    bigquery_client.add_table("ds", "t", [SchemaField("id", "INTEGER")])
    response = api.post(
        "/data-warehousing/data/ds/upload", params={"tableName": "t"}, files={"file": ("t.csv", b"", "text/csv")}
    )
    assert response.status_code == 400
    assert "Empty CSV file uploaded" in response.text


def test_upload_then_read_rows(api, bigquery_client):
    bigquery_client.add_table("ds", "t", [SchemaField("id", "STRING"), SchemaField("item", "STRING")])

    response = api.post(
        "/data-warehousing/data/ds/upload",
        params={"tableName": "t", "skipLeadingRows": 1},
        files={"file": ("t.csv", b"id,item\n1,pen\n", "text/csv")},
    )
    assert response.status_code == 200

    assert api.get("/data-warehousing/data/ds", params={"tableName": "t"}).json() == [{"id": "1", "item": "pen"}]


def test_read_empty_table_is_404(api, bigquery_client):
    bigquery_client.add_table("ds", "t", [SchemaField("id", "INTEGER")])
    response = api.get("/data-warehousing/data/ds", params={"tableName": "t"})
    assert response.status_code == 404
    assert "no data" in response.text


def test_delete_table_endpoint(api, bigquery_client):
    bigquery_client.add_table("ds", "t", [SchemaField("id", "INTEGER")])
    assert api.delete("/data-warehousing/data/ds", params={"tableName": "t"}).text == "Table deleted successfully: t"
    assert api.delete("/data-warehousing/data/ds", params={"tableName": "t"}).status_code == 404


def test_read_rows_with_bytes_column(api, bigquery_client):
    bigquery_client.add_table(
        "ds", "t", [SchemaField("id", "INTEGER"), SchemaField("blob", "BYTES")], rows=[(1, b"\xff\xfe\x00")]
    )

    response = api.get("/data-warehousing/data/ds", params={"tableName": "t"})

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "blob": "//4A"}]
