"""
Comment types exchanged between the submission pipeline, the broadcast
channel and the rendering side.

Key Features:
- `Message`: Immutable comment with author, display timestamp and text.
- `SubmissionState`: Idle/processing flag of a submission surface.
- `SubmissionOutcome`: Event emitted once per processed submission.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping

from spamgate.datatypes.classification_datatypes import ClassificationResult, Decision

TIMESTAMP_FORMAT = "%x, %X"

PAYLOAD_FIELDS = ("username", "timestamp", "comment")


def format_timestamp(moment: datetime | None = None) -> str:
    """Render a local, locale-style display timestamp (defaults to now)."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True, slots=True)
class Message:
    """A comment as shown to every participant.

    Attributes:
        author (str): Display name of the participant who wrote it.
        timestamp (str): Display timestamp. Set at acceptance time for local
            comments and passed through untouched for remote ones.
        text (str): Raw comment text as typed.
    """

    author: str
    timestamp: str
    text: str

    @classmethod
    def create(cls, author: str, text: str, moment: datetime | None = None) -> "Message":
        """Build a locally originated message stamped with the current time."""
        return cls(author=author, timestamp=format_timestamp(moment), text=text)

    def to_payload(self) -> Dict[str, str]:
        """Return the broadcast wire payload for this message."""
        return {"username": self.author, "timestamp": self.timestamp, "comment": self.text}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Message":
        """Parse a broadcast wire payload. Fields outside the contract are ignored.

        Raises:
            ValueError: If a required field is missing or not a string.
        """
        values = []
        for name in PAYLOAD_FIELDS:
            value = payload.get(name)
            if not isinstance(value, str):
                raise ValueError(f"Broadcast payload field '{name}' must be a string, got {value!r}")
            values.append(value)
        author, timestamp, text = values
        return cls(author=author, timestamp=timestamp, text=text)


class SubmissionState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Result of one pass through the submission pipeline.

    Attributes:
        text (str): The raw submitted text.
        decision (Decision): ACCEPT or REJECT. Inference failures are REJECT.
        message (Message | None): The published message, only set on ACCEPT.
        result (ClassificationResult | None): Scores, absent when inference failed.
        error (Exception | None): The inference failure, if any.
    """

    text: str
    decision: Decision
    message: Message | None = None
    result: ClassificationResult | None = None
    error: Exception | None = None

    @property
    def accepted(self) -> bool:
        return self.decision is Decision.ACCEPT

    @property
    def failed(self) -> bool:
        return self.error is not None
