"""Threshold policy turning a spam score into an accept/reject decision."""

from __future__ import annotations

from spamgate.datatypes.classification_datatypes import ClassificationResult, Decision


def decide(result: ClassificationResult, threshold: float) -> Decision:
    """Reject when the spam probability is strictly above ``threshold``.

    A score equal to the threshold is accepted.

    Raises:
        ValueError: If ``threshold`` is outside ``[0, 1]``.
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Spam threshold must be within [0, 1], got {threshold}")
    return Decision.REJECT if result.spam > threshold else Decision.ACCEPT


class ModerationGate:
    """Holds the configured threshold so callers do not pass it around."""

    def __init__(self, threshold: float = 0.5) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Spam threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold

    def decide(self, result: ClassificationResult) -> Decision:
        return decide(result, self.threshold)
