"""Job queue status of the catalog service."""

from typing import Literal, Union

from pydantic import BaseModel, Field


class JobIdle(BaseModel):
    state: Literal["idle"] = "idle"


class JobBusy(BaseModel):
    """
    The job queue is working.

    Attributes:
        queue_length (int): Number of documents left, including the one in progress. Always positive.
        current (str): Description of the job currently processing.
        progress (int): Progress of the current job as reported by the backend.
    """
    state: Literal["busy"] = "busy"
    queue_length: int = Field(gt=0)
    current: str = ""
    progress: int = 0


JobStatus = Union[JobIdle, JobBusy]
