"""
Pytest configuration and fixtures for Spamgate tests.
"""

import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from spamgate.datatypes.vocabulary import Vocabulary  # noqa: E402


class FakeModel:
    """Scoring model returning fixed probabilities and recording its inputs."""

    def __init__(self, probabilities: Sequence[float] = (0.8, 0.2)) -> None:
        self.probabilities = list(probabilities)
        self.batches: List[List[List[int]]] = []

    def predict(self, batch):
        self.batches.append([list(row) for row in batch])
        return [list(self.probabilities)]


class CountingLoader:
    """Model loader that counts how often it is called."""

    def __init__(self, model: FakeModel | None = None, error: Exception | None = None) -> None:
        self.model = model or FakeModel()
        self.error = error
        self.calls: List[str] = []

    def __call__(self, location: str) -> FakeModel:
        self.calls.append(location)
        if self.error is not None:
            raise self.error
        return self.model


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary(
        lookup={"great": 4, "post": 5, "thanks": 6, "check": 7, "my": 8, "channel": 9},
        start=1,
        unknown=2,
        pad=0,
    )


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def counting_loader(fake_model: FakeModel) -> CountingLoader:
    return CountingLoader(fake_model)
