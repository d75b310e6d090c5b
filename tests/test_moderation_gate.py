import pytest

from spamgate.datatypes.classification_datatypes import ClassificationResult, Decision
from spamgate.moderation.moderation_gate import ModerationGate, decide


@pytest.mark.parametrize(
    "spam, threshold, expected",
    [
        (0.9, 0.5, Decision.REJECT),
        (0.2, 0.5, Decision.ACCEPT),
        (0.5, 0.5, Decision.ACCEPT),
        (0.5000001, 0.5, Decision.REJECT),
        (0.8, 0.75, Decision.REJECT),
        (0.7, 0.75, Decision.ACCEPT),
        (0.0, 0.0, Decision.ACCEPT),
        (1.0, 1.0, Decision.ACCEPT),
    ],
)
def test_decide(spam, threshold, expected):
    result = ClassificationResult(not_spam=1.0 - spam, spam=spam)
    assert decide(result, threshold) is expected


@pytest.mark.parametrize("threshold", [-0.1, 1.01])
def test_decide_rejects_out_of_range_threshold(threshold):
    with pytest.raises(ValueError):
        decide(ClassificationResult(0.5, 0.5), threshold)


def test_gate_uses_configured_threshold():
    gate = ModerationGate(0.75)
    assert gate.decide(ClassificationResult(0.3, 0.7)) is Decision.ACCEPT
    assert gate.decide(ClassificationResult(0.1, 0.9)) is Decision.REJECT


def test_gate_default_threshold():
    assert ModerationGate().threshold == 0.5


def test_gate_validates_threshold():
    with pytest.raises(ValueError):
        ModerationGate(2.0)
