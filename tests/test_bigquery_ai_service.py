from app.api.models.bigquery_ai_models import EvaluationQuery, JobHandle, ModelDefinition
from app.core.errors import ErrorKind


def test_list_models_projects_each_model(ai_service, bigquery_client):
    bigquery_client.add_model("ml", "churn", description="churn model", model_type="LOGISTIC_REGRESSION")
    bigquery_client.add_model("ml", "price")

    models = ai_service.list_models("ml").payload

    assert [m.model_dump(by_alias=True) for m in models] == [
        {"modelId": "churn", "modelDescription": "churn model", "modelType": "LOGISTIC_REGRESSION"},
        {"modelId": "price", "modelDescription": None, "modelType": "LINEAR_REGRESSION"},
    ]
    assert ("list_models", "ml", 100) in bigquery_client.calls


def test_list_models_walks_every_page(ai_service, bigquery_client):
    for index in range(250):
        bigquery_client.add_model("ml", f"model_{index:03d}")

    models = ai_service.list_models("ml").payload

    assert [m.id for m in models] == [f"model_{index:03d}" for index in range(250)]
    pages = [call for call in bigquery_client.calls if call[0] == "list_models_page"]
    assert pages == [("list_models_page", "ml", 0), ("list_models_page", "ml", 1), ("list_models_page", "ml", 2)]


def test_list_models_of_empty_dataset_is_not_found(ai_service, bigquery_client):
    bigquery_client.add_dataset("ml")
    result = ai_service.list_models("ml")
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.message == "Dataset does not contain any models."


def test_list_models_of_missing_dataset_is_not_found(ai_service):
    assert ai_service.list_models("ghost").kind is ErrorKind.NOT_FOUND


def test_create_model_waits_for_job_and_reports_its_id(ai_service, bigquery_client):
    definition = ModelDefinition(modelName="churn", sql="CREATE MODEL ml.churn AS SELECT 1")

    result = ai_service.create_model("ml", definition)

    assert result.payload == "Model created successfully: churn in dataset: ml\nJobID: job_1"
    assert bigquery_client.jobs["job_1"].waited_with == [30.0]


def test_create_model_job_error_is_upstream_error(ai_service, bigquery_client):
    bigquery_client.query_error = {"reason": "invalidQuery", "message": "Unrecognized name: label"}

    result = ai_service.create_model("ml", ModelDefinition(modelName="churn", sql="CREATE MODEL ..."))

    assert result.kind is ErrorKind.UPSTREAM_ERROR
    assert result.message.startswith("Model creation failed for dataset: ml")
    assert "Unrecognized name: label" in result.message


def test_create_model_timeout_is_upstream_error(ai_service, bigquery_client):
    bigquery_client.hang_jobs = True
    result = ai_service.create_model("ml", ModelDefinition(modelName="churn", sql="CREATE MODEL ..."))
    assert result.kind is ErrorKind.UPSTREAM_ERROR
    assert "did not complete within 30.0 seconds" in result.message


def test_delete_model(ai_service, bigquery_client):
    bigquery_client.add_model("ml", "churn")

    assert ai_service.delete_model("ml", "churn").payload == "Model deleted successfully: churn in dataset: ml"
    result = ai_service.delete_model("ml", "churn")
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.message == "Model not found: churn in dataset: ml"


def test_check_training_status(ai_service, bigquery_client):
    ai_service.create_model("ml", ModelDefinition(modelName="churn", sql="CREATE MODEL ..."))

    status = ai_service.check_training_status(JobHandle(job_id="job_1", location="EU")).payload

    assert status == {"Status": "DONE"}
    assert ("get_job", "job_1", "EU") in bigquery_client.calls


def test_check_training_status_includes_job_error(ai_service, bigquery_client):
    bigquery_client.query_error = {"reason": "invalid", "message": "bad label"}
    ai_service.create_model("ml", ModelDefinition(modelName="churn", sql="CREATE MODEL ..."))

    status = ai_service.check_training_status(JobHandle(job_id="job_1")).payload

    assert status["Status"] == "DONE"
    assert "bad label" in status["Error"]


def test_check_training_status_of_unknown_job(ai_service):
    result = ai_service.check_training_status(JobHandle(job_id="nope"))
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.message == "Job not found: nope"


def test_evaluate_model(ai_service):
    result = ai_service.evaluate_model("ml", "churn", EvaluationQuery(sql="SELECT * FROM ML.EVALUATE(...)"))
    assert result.payload == "Model evaluation successfully: churn in dataset: ml\nJobID: job_1"
