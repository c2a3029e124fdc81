from fastapi import APIRouter, Depends, HTTPException

from app.analytics.comparison import summarize_experiment
from app.dependencies import get_store
from app.storage.base import ExperimentStore


router = APIRouter()


@router.get("/analytics/{experiment_id}")
def get_analytics(experiment_id: str, store: ExperimentStore = Depends(get_store)):
    """Return the grid comparison payload for one experiment."""
    experiment = store.get_experiment_with_responses(experiment_id)
    if experiment is None:
        raise HTTPException(status_code=404, detail="Experiment not found")
    return summarize_experiment(experiment)
