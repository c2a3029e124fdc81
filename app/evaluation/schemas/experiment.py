from datetime import datetime
from typing import List

from pydantic import BaseModel

from .metrics import QualityMetrics


class Experiment(BaseModel):
    """One user submission; the parent of its response records."""
    id: str
    prompt: str
    created_at: datetime

    class Config:
        from_attributes = True


class ResponseRecordCreate(BaseModel):
    """Payload to persist one generated (or failed) variation."""
    id: str
    experiment_id: str
    temperature: float
    top_p: float
    content: str
    metrics: QualityMetrics


class ResponseRecord(ResponseRecordCreate):
    """Response row shape returned by the API."""
    created_at: datetime

    class Config:
        from_attributes = True


class ExperimentWithResponses(Experiment):
    responses: List[ResponseRecord] = []


class GenerateResponse(BaseModel):
    experiment: Experiment
    responses: List[ResponseRecord]


class ExperimentPage(BaseModel):
    experiments: List[Experiment]
    limit: int
    offset: int
