import asyncio
from datetime import datetime, timezone

import pytest

from app.evaluation.completion import RateLimited
from app.evaluation.metrics import calculate_quality_metrics
from app.evaluation.schemas import ExperimentWithResponses, QualityMetrics, ResponseRecord
from app.storage import InMemoryExperimentStore, SqlExperimentStore


SAMPLE_TEXT = (
    "First, photosynthesis turns light into chemical energy. "
    "Plants capture sunlight with chlorophyll inside their leaves. "
    "However, the process also needs water and carbon dioxide from the air. "
    "In summary, sugar and oxygen are produced."
)


class FakeCompletion:
    """Completion service double: fixed text, optional failing grid points and delays."""

    def __init__(self, text=SAMPLE_TEXT, fail_on=(), delays=None, error=None):
        self.text = text
        self.fail_on = set(fail_on)
        self.delays = delays or {}
        self.error = error or RateLimited("Rate limit exceeded. Please try again later.")
        self.calls = []

    async def complete(self, prompt, temperature, top_p, max_tokens=500):
        self.calls.append((prompt, temperature, top_p, max_tokens))
        delay = self.delays.get((temperature, top_p))
        if delay:
            await asyncio.sleep(delay)
        if (temperature, top_p) in self.fail_on:
            raise self.error
        return self.text


@pytest.fixture
def fake_completion():
    return FakeCompletion()


@pytest.fixture
def make_completion():
    return FakeCompletion


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryExperimentStore()
    else:
        backend = SqlExperimentStore(f"sqlite:///{tmp_path / 'nested' / 'experiments.db'}")
    yield backend
    backend.close()


@pytest.fixture
def sample_experiment():
    created = datetime(2026, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc)
    prompt = 'Explain "photosynthesis", briefly'
    return ExperimentWithResponses(
        id="exp-1",
        prompt=prompt,
        created_at=created,
        responses=[
            ResponseRecord(
                id="resp-1",
                experiment_id="exp-1",
                temperature=0.55,
                top_p=0.9,
                content=SAMPLE_TEXT + '\n\nSecond paragraph, with "quotes", commas\nand a line break.',
                metrics=calculate_quality_metrics(SAMPLE_TEXT, prompt),
                created_at=created,
            ),
            ResponseRecord(
                id="resp-2",
                experiment_id="exp-1",
                temperature=1.2,
                top_p=0.3,
                content="Error: Rate limit exceeded. Please try again later.",
                metrics=QualityMetrics.failed(),
                created_at=created,
            ),
        ],
    )
