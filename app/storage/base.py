from abc import ABC, abstractmethod
from typing import List, Optional

from app.evaluation.schemas import (
    Experiment,
    ExperimentWithResponses,
    ResponseRecord,
    ResponseRecordCreate,
)


class ExperimentStore(ABC):
    """Persistence strategy for experiments and their response records."""

    @abstractmethod
    def create_experiment(self, experiment_id: str, prompt: str) -> Experiment:
        pass

    @abstractmethod
    def create_response(self, record: ResponseRecordCreate) -> ResponseRecord:
        """Store a response after any existing siblings of the same experiment."""
        pass

    @abstractmethod
    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        pass

    @abstractmethod
    def get_experiment_with_responses(self, experiment_id: str) -> Optional[ExperimentWithResponses]:
        """Experiment plus its responses in the order they were stored."""
        pass

    @abstractmethod
    def list_experiments(self, limit: int = 50, offset: int = 0) -> List[Experiment]:
        """Experiments newest first."""
        pass

    @abstractmethod
    def delete_experiment(self, experiment_id: str) -> bool:
        """Delete an experiment and, with it, all of its responses."""
        pass

    def close(self) -> None:
        """Release held resources."""
