import threading
from typing import Dict, List, Optional

from app.database import utcnow
from app.evaluation.schemas import (
    Experiment,
    ExperimentWithResponses,
    ResponseRecord,
    ResponseRecordCreate,
)
from app.storage.base import ExperimentStore


class InMemoryExperimentStore(ExperimentStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self):
        self._lock = threading.Lock()
        self._experiments: Dict[str, Experiment] = {}
        self._responses: Dict[str, List[ResponseRecord]] = {}

    def create_experiment(self, experiment_id: str, prompt: str) -> Experiment:
        experiment = Experiment(id=experiment_id, prompt=prompt, created_at=utcnow())
        with self._lock:
            if experiment_id in self._experiments:
                raise ValueError(f"Experiment {experiment_id} already exists")
            self._experiments[experiment_id] = experiment
            self._responses[experiment_id] = []
        return experiment

    def create_response(self, record: ResponseRecordCreate) -> ResponseRecord:
        if isinstance(record, ResponseRecord):
            stored = record
        else:
            stored = ResponseRecord(**record.model_dump(), created_at=utcnow())
        with self._lock:
            if record.experiment_id not in self._experiments:
                raise KeyError(f"Experiment {record.experiment_id} not found")
            self._responses[record.experiment_id].append(stored)
        return stored

    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        with self._lock:
            return self._experiments.get(experiment_id)

    def get_experiment_with_responses(self, experiment_id: str) -> Optional[ExperimentWithResponses]:
        with self._lock:
            experiment = self._experiments.get(experiment_id)
            if experiment is None:
                return None
            responses = list(self._responses[experiment_id])
        return ExperimentWithResponses(**experiment.model_dump(), responses=responses)

    def list_experiments(self, limit: int = 50, offset: int = 0) -> List[Experiment]:
        with self._lock:
            ordered = list(self._experiments.values())
        # Same ordering as the SQL store: id breaks created_at ties
        ordered.sort(key=lambda e: (e.created_at, e.id), reverse=True)
        return ordered[offset:offset + limit]

    def delete_experiment(self, experiment_id: str) -> bool:
        with self._lock:
            if self._experiments.pop(experiment_id, None) is None:
                return False
            self._responses.pop(experiment_id, None)
            return True
