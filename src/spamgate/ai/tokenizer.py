"""
Comment text normalization and fixed-length encoding.

The model expects lower-cased, punctuation-free words encoded as vocabulary ids:
a START id, one id per word (UNKNOWN for words outside the vocabulary), then PAD
ids up to the encoding length. Comments with more words than fit are not cut
here; the inference engine applies its overflow policy.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from spamgate.datatypes.classification_datatypes import EncodedSequence
from spamgate.datatypes.vocabulary import Vocabulary

DEFAULT_ENCODING_LENGTH = 20

# Anything that is neither a word character nor whitespace becomes a space
_STRIP_PATTERN = re.compile(r"[^\w\s]", re.ASCII)


def normalize_text(text: str) -> List[str]:
    """
    Lower-case ``text``, blank out punctuation and split it on single spaces.

    Runs of spaces and trailing punctuation leave empty words behind; they are
    kept and encode as UNKNOWN.
    """
    return _STRIP_PATTERN.sub(" ", text.lower()).split(" ")


class Tokenizer:
    """
    Encodes word lists into the fixed-length id sequences the model consumes.

    Usage:
        >>> tokenizer = Tokenizer(vocabulary, encoding_length=20)
        >>> tokenizer.encode(["great", "post"])
        [1, 4, 9, 0, 0, ...]

    Attributes:
        vocabulary: Lookup table and reserved ids.
        encoding_length: Target length L of every encoding.
    """

    def __init__(self, vocabulary: Vocabulary, encoding_length: int = DEFAULT_ENCODING_LENGTH) -> None:
        if encoding_length < 1:
            raise ValueError(f"encoding_length must be >= 1, got {encoding_length}")
        self.vocabulary = vocabulary
        self.encoding_length = encoding_length

    def encode(self, words: Sequence[str]) -> EncodedSequence:
        """
        Encode ``words`` into vocabulary ids.

        Position 0 is always START. Short inputs are padded with PAD up to
        ``encoding_length``; inputs of ``encoding_length - 1`` words or more get
        no padding and may come out longer than ``encoding_length``.
        """
        encoded = [self.vocabulary.start]
        encoded.extend(self.vocabulary.token_for(word) for word in words)

        missing = self.encoding_length - len(encoded)
        if missing > 0:
            encoded.extend([self.vocabulary.pad] * missing)
        return encoded
