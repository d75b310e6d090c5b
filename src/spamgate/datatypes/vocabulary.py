"""
Immutable word-to-token lookup consumed by the tokenizer.

The vocabulary is a pre-built resource. Spamgate only reads it: a JSON document
with the three reserved control ids and the word lookup table::

    {"pad": 0, "start": 1, "unknown": 2, "lookup": {"great": 4, "post": 9}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from collections.abc import Mapping

DEFAULT_PAD = 0
DEFAULT_START = 1
DEFAULT_UNKNOWN = 2


@dataclass(frozen=True, slots=True)
class Vocabulary:
    """Read-only word→id table plus the reserved START, UNKNOWN and PAD ids.

    Attributes:
        lookup (Mapping[str, int]): Lower-cased word to token id.
        start (int): Id emitted at position 0 of every encoding.
        unknown (int): Id emitted for words missing from ``lookup``.
        pad (int): Id used to fill encodings up to the fixed length.

    Raises:
        ValueError: If the reserved ids are not distinct or collide with a word id.
    """

    lookup: Mapping[str, int] = field(default_factory=dict)
    start: int = DEFAULT_START
    unknown: int = DEFAULT_UNKNOWN
    pad: int = DEFAULT_PAD

    def __post_init__(self) -> None:
        reserved = {self.start, self.unknown, self.pad}
        if len(reserved) != 3:
            raise ValueError(
                f"Reserved ids must be distinct (start={self.start}, unknown={self.unknown}, pad={self.pad})"
            )
        clashes = sorted(word for word, token in self.lookup.items() if token in reserved)
        if clashes:
            raise ValueError(f"Word ids collide with reserved ids: {', '.join(clashes[:5])}")
        object.__setattr__(self, "lookup", MappingProxyType(dict(self.lookup)))

    def __len__(self) -> int:
        return len(self.lookup)

    def __contains__(self, word: object) -> bool:
        return word in self.lookup

    def token_for(self, word: str) -> int:
        """Return the id for ``word``, or the UNKNOWN id when it is not in the table."""
        return self.lookup.get(word, self.unknown)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Vocabulary":
        """Build a vocabulary from the parsed JSON document."""
        lookup = data.get("lookup")
        if not isinstance(lookup, Mapping):
            raise ValueError("Vocabulary document is missing the 'lookup' mapping")

        def reserved(key: str, default: int) -> int:
            value = data.get(key, default)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Reserved id '{key}' must be an integer, got {value!r}")
            return value

        words: dict[str, int] = {}
        for word, token in lookup.items():
            if isinstance(token, bool) or not isinstance(token, int):
                raise ValueError(f"Token id for {word!r} must be an integer, got {token!r}")
            words[str(word)] = token

        return cls(
            lookup=words,
            start=reserved("start", DEFAULT_START),
            unknown=reserved("unknown", DEFAULT_UNKNOWN),
            pad=reserved("pad", DEFAULT_PAD),
        )

    @classmethod
    def load(cls, path: Path) -> "Vocabulary":
        """Load a vocabulary JSON file.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ValueError: If the document is not valid JSON or not a valid vocabulary.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Vocabulary file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Vocabulary file {path} must contain a JSON object")
        return cls.from_dict(data)
