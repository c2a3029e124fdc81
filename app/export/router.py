from enum import Enum

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app.dependencies import get_store
from app.export.formats import to_csv, to_json
from app.storage.base import ExperimentStore


router = APIRouter()


class ExportFormat(str, Enum):
    json = "json"
    csv = "csv"


@router.get("/export/{experiment_id}")
def export_experiment(
    experiment_id: str,
    format: ExportFormat = ExportFormat.json,
    store: ExperimentStore = Depends(get_store),
):
    """Download an experiment with its responses as a JSON or CSV attachment."""
    experiment = store.get_experiment_with_responses(experiment_id)
    if experiment is None:
        raise HTTPException(status_code=404, detail="Experiment not found")

    if format == ExportFormat.csv:
        body, media_type = to_csv(experiment), "text/csv"
    else:
        body, media_type = to_json(experiment), "application/json"
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="experiment-{experiment_id}.{format.value}"'},
    )
