# app/services/bigquery_ai_service.py
import logging
from typing import Optional
from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import bigquery
from app.api.models.bigquery_ai_models import EvaluationQuery, JobHandle, ModelDefinition, ModelSummary
from app.core.errors import ErrorKind
from app.core.result import OperationResult
from app.services.jobs import JobTimeoutError, wait_for_job

logger = logging.getLogger(__name__)


class BigQueryAIService:
    """
    BigQuery ML model lifecycle: listing, training, evaluation, deletion and job tracking.
    """

    def __init__(self, client: bigquery.Client, page_size: int = 100, job_timeout: Optional[float] = 600.0):
        """
        Args:
            client (bigquery.Client): A long-lived BigQuery client.
            page_size (int): Models fetched per listing request.
            job_timeout (float): Seconds to block on a training or evaluation job.
        """
        self.client = client
        self.page_size = page_size
        self.job_timeout = job_timeout

    def list_models(self, dataset_name: str) -> OperationResult:
        """
        Lists every model in a dataset, walking all pages.

        Returns:
            OperationResult: A list of ModelSummary. NOT_FOUND when the dataset is
            absent or holds no models; the two cases are not told apart.
        """
        logger.info(f"Listing models in dataset '{dataset_name}'...")
        try:
            models = [
                ModelSummary(id=model.model_id, description=model.description, type=model.model_type)
                for model in self.client.list_models(dataset_name, page_size=self.page_size)
            ]
        except NotFound:
            logger.warning(f"Dataset '{dataset_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Dataset not found: {dataset_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error listing models in '{dataset_name}': {e}")
            return OperationResult.from_google_error(e)
        except Exception as e:
            logger.error(f"An unexpected error occurred while listing models: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to list models: {e}")

        if not models:
            logger.warning(f"Dataset '{dataset_name}' contains no models.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Dataset does not contain any models.")
        logger.info(f"Successfully listed {len(models)} models in '{dataset_name}'.")
        return OperationResult.success(models)

    def create_model(self, dataset_name: str, definition: ModelDefinition) -> OperationResult:
        """
        Runs a CREATE MODEL statement and waits for training to finish.

        Args:
            dataset_name (str): Dataset the model belongs to.
            definition (ModelDefinition): Model name and the SQL that trains it.

        Returns:
            OperationResult: A confirmation carrying the job id, or UPSTREAM_ERROR with the job's error.
        """
        logger.info(f"Creating model '{definition.name}' in dataset '{dataset_name}'...")
        result = self._run_query_job(definition.sql, "Model creation")
        if not result.ok:
            return result
        job = result.payload
        if job.error_result is not None:
            logger.error(f"Model creation job {job.job_id} failed: {job.error_result}")
            return OperationResult.failure(
                ErrorKind.UPSTREAM_ERROR,
                f"Model creation failed for dataset: {dataset_name}, "
                f"definition: {definition.model_dump(by_alias=True)}.\nError: {job.error_result}",
            )
        logger.info(f"Model '{definition.name}' created by job {job.job_id}.")
        return OperationResult.success(
            f"Model created successfully: {definition.name} in dataset: {dataset_name}\nJobID: {job.job_id}"
        )

    def delete_model(self, dataset_name: str, model_name: str) -> OperationResult:
        logger.info(f"Deleting model '{model_name}' from dataset '{dataset_name}'...")
        try:
            self.client.delete_model(f"{dataset_name}.{model_name}")
            logger.info(f"Model '{dataset_name}.{model_name}' deleted.")
            return OperationResult.success(f"Model deleted successfully: {model_name} in dataset: {dataset_name}")
        except NotFound:
            logger.warning(f"Model '{dataset_name}.{model_name}' not found.")
            return OperationResult.failure(
                ErrorKind.NOT_FOUND, f"Model not found: {model_name} in dataset: {dataset_name}"
            )
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error deleting model '{model_name}': {e}")
            return OperationResult.from_google_error(e)
        except Exception as e:
            logger.error(f"An unexpected error occurred while deleting model: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to delete model: {e}")

    def check_training_status(self, handle: JobHandle) -> OperationResult:
        """
        Reports the state of a job, with its error detail when the job failed.
        """
        logger.info(f"Checking status of job '{handle.job_id}'...")
        try:
            job = self.client.get_job(handle.job_id, location=handle.location)
        except NotFound:
            logger.warning(f"Job '{handle.job_id}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Job not found: {handle.job_id}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error checking job '{handle.job_id}': {e}")
            return OperationResult.from_google_error(e, "Error checking training status: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while checking job status: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"Error checking training status: {e}")

        if job is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Job not found: {handle.job_id}")
        status = {"Status": job.state}
        if job.error_result is not None:
            status["Error"] = str(job.error_result)
        return OperationResult.success(status)

    def evaluate_model(self, dataset_name: str, model_name: str, query: EvaluationQuery) -> OperationResult:
        logger.info(f"Evaluating model '{model_name}' in dataset '{dataset_name}'...")
        result = self._run_query_job(query.sql, "Model evaluation")
        if not result.ok:
            return result
        job = result.payload
        if job.error_result is not None:
            logger.error(f"Model evaluation job {job.job_id} failed: {job.error_result}")
            return OperationResult.failure(
                ErrorKind.UPSTREAM_ERROR,
                f"Model evaluation failed for dataset: {dataset_name}, "
                f"definition: {query.model_dump()}.\nError: {job.error_result}",
            )
        return OperationResult.success(
            f"Model evaluation successfully: {model_name} in dataset: {dataset_name}\nJobID: {job.job_id}"
        )

    def _run_query_job(self, sql: str, action: str) -> OperationResult:
        """Submits ``sql`` as a query job and blocks until it is done; the payload is the finished job."""
        try:
            job = self.client.query(sql)
            return OperationResult.success(wait_for_job(job, self.job_timeout))
        except JobTimeoutError as e:
            return OperationResult.failure(ErrorKind.UPSTREAM_ERROR, f"{action} failed: {e}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error during {action.lower()}: {e}")
            return OperationResult.from_google_error(e, f"{action} failed: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred during {action.lower()}: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"{action} failed: {e}")
