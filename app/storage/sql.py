import logging
from typing import List, Optional

from app.database import Base, create_db_engine, create_session_factory, utcnow
from app.evaluation.cruds import experiment as crud
from app.evaluation.schemas import (
    Experiment,
    ExperimentWithResponses,
    ResponseRecord,
    ResponseRecordCreate,
)
from app.storage.base import ExperimentStore

logger = logging.getLogger(__name__)


class SqlExperimentStore(ExperimentStore):
    """SQLAlchemy-backed store; SQLite or PostgreSQL depending on the URL."""

    def __init__(self, database_url: str):
        self.engine = create_db_engine(database_url)
        self.session_factory = create_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("SQL store ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def create_experiment(self, experiment_id: str, prompt: str) -> Experiment:
        with self.session_factory() as db:
            row = crud.create_experiment(db, experiment_id, prompt, created_at=utcnow())
            return Experiment.model_validate(row)

    def create_response(self, record: ResponseRecordCreate) -> ResponseRecord:
        with self.session_factory() as db:
            return ResponseRecord.model_validate(crud.create_response(db, record))

    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        with self.session_factory() as db:
            row = crud.get_experiment(db, experiment_id)
            return Experiment.model_validate(row) if row is not None else None

    def get_experiment_with_responses(self, experiment_id: str) -> Optional[ExperimentWithResponses]:
        with self.session_factory() as db:
            row = crud.get_experiment(db, experiment_id)
            if row is None:
                return None
            responses = [ResponseRecord.model_validate(r) for r in crud.get_responses(db, experiment_id)]
            return ExperimentWithResponses(
                id=row.id, prompt=row.prompt, created_at=row.created_at, responses=responses
            )

    def list_experiments(self, limit: int = 50, offset: int = 0) -> List[Experiment]:
        with self.session_factory() as db:
            return [Experiment.model_validate(row) for row in crud.get_experiments(db, skip=offset, limit=limit)]

    def delete_experiment(self, experiment_id: str) -> bool:
        with self.session_factory() as db:
            return crud.delete_experiment(db, experiment_id)

    def close(self) -> None:
        self.engine.dispose()
