from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

# Fixed-length list of vocabulary ids produced by the tokenizer
EncodedSequence = List[int]


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Two-class probability output of the spam model.

    Attributes:
        not_spam (float): Probability the comment is legitimate.
        spam (float): Probability the comment is spam.
    """

    not_spam: float
    spam: float

    @classmethod
    def from_probabilities(cls, probabilities: Sequence[float]) -> "ClassificationResult":
        """Build a result from a ``[not_spam, spam]`` vector.

        Raises:
            ValueError: If the vector does not hold exactly two values.
        """
        values = list(probabilities)
        if len(values) != 2:
            raise ValueError(f"Expected 2 class probabilities, got {len(values)}")
        return cls(not_spam=float(values[0]), spam=float(values[1]))

    def as_tuple(self) -> tuple[float, float]:
        return (self.not_spam, self.spam)


class Decision(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
