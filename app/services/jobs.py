# app/services/jobs.py
import concurrent.futures
import logging
from typing import Optional
from google.api_core.exceptions import GoogleAPICallError

logger = logging.getLogger(__name__)


class JobTimeoutError(Exception):
    def __init__(self, job_id: str, timeout: Optional[float]):
        super().__init__(f"Job {job_id} did not complete within {timeout} seconds")
        self.job_id = job_id
        self.timeout = timeout


def wait_for_job(job, timeout: Optional[float]):
    """
    Blocks the calling thread until a BigQuery job finishes.

    A failed job is returned, not raised: its failure stays on ``job.error_result``
    for the caller to report. Client errors unrelated to the job's own outcome
    propagate. The remote job is not cancelled on timeout.

    Args:
        job: A ``QueryJob`` or ``LoadJob``.
        timeout (float): Seconds to wait before giving up, ``None`` to wait forever.

    Returns:
        The finished job.
    """
    logger.info(f"Waiting for job {job.job_id} (timeout: {timeout}s)...")
    try:
        job.result(timeout=timeout)
    except concurrent.futures.TimeoutError as e:
        logger.error(f"Job {job.job_id} still running after {timeout}s.")
        raise JobTimeoutError(job.job_id, timeout) from e
    except GoogleAPICallError:
        if job.error_result is None:
            raise
    logger.info(f"Job {job.job_id} finished with state {job.state}.")
    return job
