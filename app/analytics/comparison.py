from collections import defaultdict
from typing import Dict, List, Optional

from app.evaluation.schemas import ExperimentWithResponses, ResponseRecord

METRIC_FIELDS = ("coherence", "lexical_diversity", "completeness", "readability", "length_appropriate")


def _min_max(vals):
    vals = [v for v in vals if v is not None]
    if not vals:
        return (0.0, 0.0)
    return (min(vals), max(vals))


def _norm_high_is_better(x, vmin, vmax):
    rng = (vmax - vmin) if (vmax - vmin) != 0 else 1e-9
    return 100.0 * (x - vmin) / rng


def _mean(vals: List[float]) -> Optional[float]:
    return round(sum(vals) / len(vals), 2) if vals else None


def _average_by(responses: List[ResponseRecord], key: str) -> List[dict]:
    buckets: Dict[float, List[int]] = defaultdict(list)
    for r in responses:
        buckets[getattr(r, key)].append(r.metrics.overall_score)
    return [
        {key: value, "avg_overall_score": _mean(scores), "count": len(scores)}
        for value, scores in sorted(buckets.items())
    ]


def summarize_experiment(experiment: ExperimentWithResponses) -> dict:
    """Chart-friendly comparison of an experiment's grid points.

    Failed generations are listed in the grid but left out of averages,
    normalisation and the best-response pick.
    """
    succeeded = [r for r in experiment.responses if not r.metrics.generation_failed]
    vmin, vmax = _min_max([r.metrics.overall_score for r in succeeded])

    grid = []
    for r in experiment.responses:
        row = {
            "response_id": r.id,
            "temperature": r.temperature,
            "top_p": r.top_p,
            "overall_score": r.metrics.overall_score,
            "failed": r.metrics.generation_failed,
            "norm_overall_score": None,
        }
        for field in METRIC_FIELDS:
            row[field] = getattr(r.metrics, field).score
        if not row["failed"]:
            row["norm_overall_score"] = round(_norm_high_is_better(r.metrics.overall_score, vmin, vmax), 2)
        grid.append(row)

    best = None
    for r in succeeded:
        # Earliest wins ties
        if best is None or r.metrics.overall_score > best.metrics.overall_score:
            best = r

    return {
        "experiment_id": experiment.id,
        "grid": grid,
        "best_response": (
            {
                "response_id": best.id,
                "temperature": best.temperature,
                "top_p": best.top_p,
                "overall_score": best.metrics.overall_score,
            }
            if best is not None
            else None
        ),
        "metric_averages": {
            field: _mean([getattr(r.metrics, field).score for r in succeeded]) for field in METRIC_FIELDS
        },
        "by_temperature": _average_by(succeeded, "temperature"),
        "by_top_p": _average_by(succeeded, "top_p"),
        "kpi": {
            "total_responses": len(experiment.responses),
            "failed_responses": len(experiment.responses) - len(succeeded),
            "avg_overall_score": _mean([r.metrics.overall_score for r in succeeded]),
        },
    }
