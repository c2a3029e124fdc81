"""JSON and CSV renderings of an experiment, plus the parsers that read them back."""
import csv
import io
import json
from datetime import datetime
from typing import List

from app.evaluation.schemas import ExperimentWithResponses, MetricDetail, QualityMetrics, ResponseRecord

# (QualityMetrics field, column label)
METRIC_COLUMNS = [
    ("coherence", "Coherence"),
    ("lexical_diversity", "Lexical Diversity"),
    ("completeness", "Completeness"),
    ("readability", "Readability"),
    ("length_appropriate", "Length Appropriateness"),
]

CSV_HEADERS = (
    ["Response ID", "Temperature", "Top P", "Content", "Overall Score"]
    + [f"{label} {part}" for _, label in METRIC_COLUMNS for part in ("Score", "Explanation")]
    + ["Created At"]
)

_ID_PREFIX = "Experiment ID: "
_PROMPT_PREFIX = "Experiment: "
_CREATED_PREFIX = "Created: "


class ExportFormatError(ValueError):
    """Raised when an export document cannot be parsed back."""


def to_json(experiment: ExperimentWithResponses) -> str:
    return json.dumps(experiment.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


def parse_json_export(document: str) -> ExperimentWithResponses:
    try:
        return ExperimentWithResponses.model_validate(json.loads(document))
    except ValueError as e:
        raise ExportFormatError(f"Invalid JSON export: {e}") from e


def to_csv(experiment: ExperimentWithResponses) -> str:
    """Preamble rows (id, prompt, creation time), a blank row, then one row per response."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([f"{_ID_PREFIX}{experiment.id}"])
    writer.writerow([f"{_PROMPT_PREFIX}{experiment.prompt}"])
    writer.writerow([f"{_CREATED_PREFIX}{experiment.created_at.isoformat()}"])
    writer.writerow([])
    writer.writerow(CSV_HEADERS)
    for response in experiment.responses:
        row = [
            response.id,
            response.temperature,
            response.top_p,
            response.content,
            response.metrics.overall_score,
        ]
        for field, _ in METRIC_COLUMNS:
            detail = getattr(response.metrics, field)
            row.extend([detail.score, detail.explanation])
        row.append(response.created_at.isoformat())
        writer.writerow(row)
    return buffer.getvalue()


def _preamble_value(row: List[str], prefix: str) -> str:
    if len(row) != 1 or not row[0].startswith(prefix):
        raise ExportFormatError(f"Expected a '{prefix.strip()}' line, got {row!r}")
    return row[0][len(prefix):]


def parse_csv_export(document: str) -> ExperimentWithResponses:
    reader = csv.reader(io.StringIO(document, newline=""))
    try:
        experiment_id = _preamble_value(next(reader), _ID_PREFIX)
        prompt = _preamble_value(next(reader), _PROMPT_PREFIX)
        created_at = datetime.fromisoformat(_preamble_value(next(reader), _CREATED_PREFIX))
        next(reader)
        header = next(reader)
    except StopIteration:
        raise ExportFormatError("CSV export is truncated")
    if header != CSV_HEADERS:
        raise ExportFormatError(f"Unexpected CSV header: {header!r}")

    responses = []
    for row in reader:
        if len(row) != len(CSV_HEADERS):
            raise ExportFormatError(f"Expected {len(CSV_HEADERS)} columns, got {len(row)}")
        values = dict(zip(CSV_HEADERS, row))
        details = {
            field: MetricDetail(score=int(values[f"{label} Score"]), explanation=values[f"{label} Explanation"])
            for field, label in METRIC_COLUMNS
        }
        responses.append(
            ResponseRecord(
                id=values["Response ID"],
                experiment_id=experiment_id,
                temperature=float(values["Temperature"]),
                top_p=float(values["Top P"]),
                content=values["Content"],
                metrics=QualityMetrics(overall_score=int(values["Overall Score"]), **details),
                created_at=datetime.fromisoformat(values["Created At"]),
            )
        )
    return ExperimentWithResponses(id=experiment_id, prompt=prompt, created_at=created_at, responses=responses)
