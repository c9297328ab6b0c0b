# app/services/data_warehousing_service.py
import base64
import io
import logging
import uuid
from typing import Optional
from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import bigquery
from pydantic import ValidationError
from app.api.models.data_warehousing_models import TableSchemaDefinition
from app.core.errors import ErrorKind
from app.core.result import OperationResult
from app.services.jobs import JobTimeoutError, wait_for_job

logger = logging.getLogger(__name__)


def _json_cell(value):
    # BYTES columns come back as raw bytes; render them as base64 text
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


class DataWarehousingService:
    """
    Dataset and table management on BigQuery, including row reads and CSV loads.
    """

    def __init__(
        self,
        client: bigquery.Client,
        dataset_location: str = "US",
        job_location: str = "us",
        page_size: int = 100,
        job_timeout: Optional[float] = 600.0,
    ):
        """
        Args:
            client (bigquery.Client): A long-lived BigQuery client.
            dataset_location (str): Region every new dataset is created in.
            job_location (str): Location CSV load jobs run in.
            page_size (int): Tables fetched per listing request.
            job_timeout (float): Seconds to block on a load job.
        """
        self.client = client
        self.dataset_location = dataset_location
        self.job_location = job_location
        self.page_size = page_size
        self.job_timeout = job_timeout

    def _table_ref(self, dataset_name: str, table_name: str) -> bigquery.TableReference:
        return bigquery.TableReference(bigquery.DatasetReference(self.client.project, dataset_name), table_name)

    def list_datasets(self) -> OperationResult:
        logger.info("Listing datasets...")
        try:
            dataset_names = [dataset.dataset_id for dataset in self.client.list_datasets()]
            logger.info(f"Successfully listed {len(dataset_names)} datasets.")
            return OperationResult.success(dataset_names)
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error listing datasets: {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to list datasets. ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while listing datasets: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to list datasets. {e}")

    def get_dataset_info(self, dataset_name: str) -> OperationResult:
        """
        Lists the tables of a dataset.

        Returns:
            OperationResult: Table names, or NOT_FOUND when the dataset does not exist.
        """
        logger.info(f"Listing tables in dataset '{dataset_name}'...")
        try:
            table_names = [
                table.table_id for table in self.client.list_tables(dataset_name, page_size=self.page_size)
            ]
            logger.info(f"Successfully listed {len(table_names)} tables in '{dataset_name}'.")
            return OperationResult.success(table_names)
        except NotFound:
            logger.warning(f"Dataset '{dataset_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: dataset not found: {dataset_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error getting dataset info for '{dataset_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to get dataset info: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while getting dataset info: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to get dataset info: {e}")

    def create_dataset(self, dataset_name: str) -> OperationResult:
        logger.info(f"Creating dataset '{dataset_name}' in {self.dataset_location}...")
        try:
            dataset = bigquery.Dataset(bigquery.DatasetReference(self.client.project, dataset_name))
            dataset.location = self.dataset_location
            self.client.create_dataset(dataset)
            logger.info(f"Dataset '{dataset_name}' created.")
            return OperationResult.success(f"Successfully created dataset: {dataset_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error creating dataset '{dataset_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to create dataset: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while creating dataset: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to create dataset: {e}")

    def delete_dataset(self, dataset_name: str, delete_contents: bool = False) -> OperationResult:
        """
        Deletes a dataset after confirming it exists; an absent dataset is never passed to delete.

        Args:
            dataset_name (str): Dataset to remove.
            delete_contents (bool): Also drop the tables it still holds.
        """
        logger.info(f"Deleting dataset '{dataset_name}'...")
        try:
            self.client.get_dataset(dataset_name)
        except NotFound:
            logger.warning(f"Dataset '{dataset_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: dataset not found: {dataset_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error looking up dataset '{dataset_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to delete dataset: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while looking up dataset: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to delete dataset: {e}")

        try:
            self.client.delete_dataset(dataset_name, delete_contents=delete_contents)
            logger.info(f"Dataset '{dataset_name}' deleted.")
            return OperationResult.success(f"Successfully deleted dataset: {dataset_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error deleting dataset '{dataset_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to delete dataset: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while deleting dataset: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to delete dataset: {e}")

    def get_data(self, dataset_name: str, table_name: str) -> OperationResult:
        """
        Reads every row of a table as a mapping of field name to value.

        Returns:
            OperationResult: The rows, NOT_FOUND when the table is absent, and also
            NOT_FOUND when it holds no rows.
        """
        logger.info(f"Reading rows of '{dataset_name}.{table_name}'...")
        try:
            table = self.client.get_table(self._table_ref(dataset_name, table_name))
        except NotFound:
            logger.warning(f"Table '{dataset_name}.{table_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: Table not found: {table_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error looking up table '{table_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to get data from table: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while looking up table: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to get data from table: {e}")

        try:
            field_names = [field.name for field in table.schema]
            rows = [
                {name: _json_cell(value) for name, value in zip(field_names, row.values())}
                for row in self.client.list_rows(table)
            ]
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error reading rows of '{table_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to get data from table: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while reading rows: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to get data from table: {e}")

        if not rows:
            logger.warning(f"Table '{dataset_name}.{table_name}' is empty.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: no data found in table: {table_name}")
        logger.info(f"Fetched {len(rows)} rows from '{dataset_name}.{table_name}'.")
        return OperationResult.success(rows)

    def create_table(self, dataset_name: str, table_name: str, schema_json: bytes) -> OperationResult:
        """
        Creates a table from a JSON schema description.

        Args:
            dataset_name (str): Dataset to create the table in.
            table_name (str): New table name.
            schema_json (bytes): ``{"fields": [{"name": ..., "type": ...}]}`` where each type
                is a BigQuery SQL type name in any case.
        """
        try:
            definition = TableSchemaDefinition.model_validate_json(schema_json)
        except ValidationError as e:
            logger.warning(f"Rejected table schema for '{dataset_name}.{table_name}': {e}")
            return OperationResult.failure(ErrorKind.BAD_REQUEST, f"ERROR: Failed to parse table schema: {e}")

        logger.info(f"Creating table '{dataset_name}.{table_name}' with {len(definition.fields)} fields...")
        try:
            table = bigquery.Table(self._table_ref(dataset_name, table_name), schema=definition.to_schema())
            self.client.create_table(table)
            logger.info(f"Table '{dataset_name}.{table_name}' created.")
            return OperationResult.success(f"Successfully created table: {dataset_name}.{table_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error creating table '{table_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to create table: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while creating table: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to create table: {e}")

    def upload_data_to_table(
        self, dataset_name: str, table_name: str, csv_data: bytes, skip_leading_rows: int = 0
    ) -> OperationResult:
        """
        Appends CSV rows to an existing table through a load job and waits for it to finish.

        Args:
            dataset_name (str): Dataset of the target table.
            table_name (str): Target table; it must already exist.
            csv_data (bytes): The whole CSV payload.
            skip_leading_rows (int): Header rows to ignore.

        Returns:
            OperationResult: A confirmation, BAD_REQUEST for an empty payload, NOT_FOUND for an
            absent table, UPSTREAM_ERROR when BigQuery rejects the data.
        """
        if not csv_data:
            logger.warning(f"Empty CSV upload for '{dataset_name}.{table_name}'.")
            return OperationResult.failure(ErrorKind.BAD_REQUEST, "ERROR: Empty CSV file uploaded")

        failure_prefix = "ERROR: Failed to upload data to table: "
        table_ref = self._table_ref(dataset_name, table_name)
        try:
            self.client.get_table(table_ref)
        except NotFound:
            logger.warning(f"Table '{dataset_name}.{table_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: Table not found: {table_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error looking up table '{table_name}': {e}")
            return OperationResult.from_google_error(e, failure_prefix)
        except Exception as e:
            logger.error(f"An unexpected error occurred while looking up table: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"{failure_prefix}{e}")

        job_id = f"jobId_{uuid.uuid4()}"
        job_config = bigquery.LoadJobConfig(
            source_format=bigquery.SourceFormat.CSV,
            write_disposition=bigquery.WriteDisposition.WRITE_APPEND,
            skip_leading_rows=skip_leading_rows,
        )
        logger.info(f"Loading {len(csv_data)} bytes into '{dataset_name}.{table_name}' as job {job_id}...")
        try:
            with io.BytesIO(csv_data) as stream:
                self.client.load_table_from_file(
                    stream, table_ref, job_id=job_id, location=self.job_location, job_config=job_config
                )
            try:
                job = self.client.get_job(job_id, location=self.job_location)
            except NotFound:
                job = None
            if job is None:
                logger.error(f"Load job {job_id} no longer exists.")
                return OperationResult.failure(
                    ErrorKind.GENERIC_ERROR, f"{failure_prefix}Job not executed since it no longer exists."
                )
            job = wait_for_job(job, self.job_timeout)
        except JobTimeoutError as e:
            return OperationResult.failure(ErrorKind.UPSTREAM_ERROR, f"{failure_prefix}{e}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error loading data into '{table_name}': {e}")
            return OperationResult.from_google_error(e, failure_prefix)
        except Exception as e:
            logger.error(f"An unexpected error occurred while loading data: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"{failure_prefix}{e}")

        if job.error_result is not None:
            logger.error(f"Load job {job_id} failed: {job.error_result}")
            return OperationResult.failure(
                ErrorKind.UPSTREAM_ERROR,
                f"{failure_prefix}BigQuery was unable to load data: \n{job.error_result}",
            )
        logger.info(f"Load job {job_id} appended data to '{dataset_name}.{table_name}'.")
        return OperationResult.success(f"Successfully appended data from CSV to table: {dataset_name}.{table_name}")

    def delete_data(self, dataset_name: str, table_name: str) -> OperationResult:
        """Drops a table; an absent table is NOT_FOUND."""
        logger.info(f"Deleting table '{dataset_name}.{table_name}'...")
        table_ref = self._table_ref(dataset_name, table_name)
        try:
            self.client.get_table(table_ref)
            self.client.delete_table(table_ref)
            logger.info(f"Table '{dataset_name}.{table_name}' deleted.")
            return OperationResult.success(f"Table deleted successfully: {table_name}")
        except NotFound:
            logger.warning(f"Table '{dataset_name}.{table_name}' not found.")
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"ERROR: Table not found: {table_name}")
        except GoogleAPICallError as e:
            logger.error(f"Google Cloud Error deleting table '{table_name}': {e}")
            return OperationResult.from_google_error(e, "ERROR: Failed to delete table: ")
        except Exception as e:
            logger.error(f"An unexpected error occurred while deleting table: {e}")
            return OperationResult.failure(ErrorKind.GENERIC_ERROR, f"ERROR: Failed to delete table: {e}")
