import asyncio
import logging
import uuid
from typing import List, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from app.database import utcnow
from app.evaluation.completion import DEFAULT_MAX_TOKENS, CompletionService
from app.evaluation.metrics import calculate_quality_metrics
from app.evaluation.schemas import (
    Experiment,
    GenerateResponse,
    ParameterPoint,
    QualityMetrics,
    ResponseRecord,
)
from app.evaluation.grid import generate_parameter_combinations
from app.storage.base import ExperimentStore

logger = logging.getLogger(__name__)


def failed_record(experiment_id: str, point: ParameterPoint, error: Exception) -> ResponseRecord:
    """Placeholder for a grid point whose completion could not be produced."""
    return ResponseRecord(
        id=str(uuid.uuid4()),
        experiment_id=experiment_id,
        temperature=point.temperature,
        top_p=point.top_p,
        content=f"Error: {str(error) or 'Unknown error'}",
        metrics=QualityMetrics.failed(),
        created_at=utcnow(),
    )


async def _generate_variation(
    completion: CompletionService,
    experiment_id: str,
    prompt: str,
    point: ParameterPoint,
    max_tokens: int,
) -> ResponseRecord:
    """Generate and score one grid point; failures become a placeholder record."""
    try:
        content = await completion.complete(prompt, point.temperature, point.top_p, max_tokens)
        metrics = calculate_quality_metrics(content, prompt)
    except Exception as e:
        logger.warning(
            "Generation failed for temperature=%s top_p=%s: %s", point.temperature, point.top_p, e
        )
        return failed_record(experiment_id, point, e)

    return ResponseRecord(
        id=str(uuid.uuid4()),
        experiment_id=experiment_id,
        temperature=point.temperature,
        top_p=point.top_p,
        content=content,
        metrics=metrics,
        created_at=utcnow(),
    )


async def generate_variations(
    completion: CompletionService,
    experiment_id: str,
    prompt: str,
    points: Sequence[ParameterPoint],
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> List[ResponseRecord]:
    """Fan out one completion per grid point; results come back in grid order."""
    tasks = [
        _generate_variation(completion, experiment_id, prompt, point, max_tokens)
        for point in points
    ]
    return list(await asyncio.gather(*tasks))


def _persist(store: ExperimentStore, record: ResponseRecord) -> ResponseRecord:
    try:
        return store.create_response(record)
    except Exception:
        logger.exception("Failed to persist response %s of experiment %s", record.id, record.experiment_id)
        return record


async def run_experiment(
    store: ExperimentStore,
    completion: CompletionService,
    prompt: str,
    temperature_range: Tuple[float, float],
    top_p_range: Tuple[float, float],
    variations: int,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> GenerateResponse:
    """Create an experiment, sweep the parameter grid and persist every variation.

    Raises ParameterRangeError for invalid ranges before anything is stored.
    """
    points = generate_parameter_combinations(
        temperature_range[0], temperature_range[1], top_p_range[0], top_p_range[1], variations
    )
    # Store calls are blocking; keep them off the event loop
    experiment: Experiment = await run_in_threadpool(store.create_experiment, str(uuid.uuid4()), prompt)
    logger.info("Experiment %s: generating %d variations", experiment.id, len(points))

    records = await generate_variations(completion, experiment.id, prompt, points, max_tokens)
    responses = [await run_in_threadpool(_persist, store, record) for record in records]

    failed = sum(1 for r in responses if r.metrics.generation_failed)
    if failed:
        logger.warning("Experiment %s: %d of %d variations failed", experiment.id, failed, len(responses))
    return GenerateResponse(experiment=experiment, responses=responses)
