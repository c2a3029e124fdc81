from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.evaluation.models.experiment import ExperimentRow, ResponseRow
from app.evaluation.schemas.experiment import ResponseRecordCreate


def create_experiment(
    db: Session, experiment_id: str, prompt: str, created_at: Optional[datetime] = None
) -> ExperimentRow:
    """Persist an experiment row and return it; created_at defaults to now (UTC)."""
    db_row = ExperimentRow(id=experiment_id, prompt=prompt)
    if created_at is not None:
        db_row.created_at = created_at
    db.add(db_row)
    db.commit()
    db.refresh(db_row)
    return db_row


def get_experiment(db: Session, experiment_id: str) -> Optional[ExperimentRow]:
    return db.get(ExperimentRow, experiment_id)


def get_experiments(db: Session, skip: int = 0, limit: int = 50) -> List[ExperimentRow]:
    """Return paginated experiments, newest first; id breaks timestamp ties."""
    return (
        db.query(ExperimentRow)
        .order_by(ExperimentRow.created_at.desc(), ExperimentRow.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def delete_experiment(db: Session, experiment_id: str) -> bool:
    """Delete an experiment and its responses; False when it does not exist."""
    db_row = db.get(ExperimentRow, experiment_id)
    if db_row is None:
        return False
    db.delete(db_row)
    db.commit()
    return True


def create_response(db: Session, response: ResponseRecordCreate) -> ResponseRow:
    """Persist a response row after its siblings and return it."""
    position = (
        db.query(func.count(ResponseRow.id))
        .filter(ResponseRow.experiment_id == response.experiment_id)
        .scalar()
    )
    payload = response.model_dump(exclude={"metrics"})
    db_row = ResponseRow(
        **payload,
        position=position,
        metrics=response.metrics.model_dump(by_alias=True),
    )
    db.add(db_row)
    db.commit()
    db.refresh(db_row)
    return db_row


def get_responses(db: Session, experiment_id: str) -> List[ResponseRow]:
    return (
        db.query(ResponseRow)
        .filter(ResponseRow.experiment_id == experiment_id)
        .order_by(ResponseRow.position)
        .all()
    )
