from fastapi import APIRouter, Depends, HTTPException

from app.config import Settings
from app.dependencies import get_completion, get_settings, get_store
from app.evaluation.completion import CompletionService
from app.evaluation.orchestrator import run_experiment
from app.evaluation.schemas import (
    ExperimentPage,
    ExperimentWithResponses,
    GenerateRequest,
    GenerateResponse,
)
from app.storage.base import ExperimentStore


router = APIRouter()

MAX_PAGE_SIZE = 100


@router.post("/generate", response_model=GenerateResponse, status_code=201)
async def generate(
    payload: GenerateRequest,
    store: ExperimentStore = Depends(get_store),
    completion: CompletionService = Depends(get_completion),
    settings: Settings = Depends(get_settings),
):
    """Sweep the requested parameter grid, score every completion, persist and return the results."""
    return await run_experiment(
        store,
        completion,
        payload.prompt,
        (payload.temperature_min, payload.temperature_max),
        (payload.top_p_min, payload.top_p_max),
        payload.variations,
        max_tokens=settings.max_output_tokens,
    )


@router.get("/experiments", response_model=ExperimentPage)
def list_experiments(limit: int = 50, offset: int = 0, store: ExperimentStore = Depends(get_store)):
    """Paginated experiment history, newest first."""
    limit = max(0, min(limit, MAX_PAGE_SIZE))
    offset = max(offset, 0)
    return ExperimentPage(experiments=store.list_experiments(limit=limit, offset=offset), limit=limit, offset=offset)


@router.get("/experiments/{experiment_id}", response_model=ExperimentWithResponses)
def get_experiment(experiment_id: str, store: ExperimentStore = Depends(get_store)):
    experiment = store.get_experiment_with_responses(experiment_id)
    if experiment is None:
        raise HTTPException(status_code=404, detail="Experiment not found")
    return experiment


@router.delete("/experiments/{experiment_id}")
def delete_experiment(experiment_id: str, store: ExperimentStore = Depends(get_store)):
    """Delete an experiment together with its responses."""
    if not store.delete_experiment(experiment_id):
        raise HTTPException(status_code=404, detail="Experiment not found")
    return {"success": True}
