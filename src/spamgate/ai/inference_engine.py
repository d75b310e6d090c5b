"""
Lazily loaded spam model with async wrappers for non-blocking inference.

This module owns the process-wide scoring model used to classify comments.

Features:
- Load-once semantics: the model is loaded on first use, and concurrent first
  callers share that single load behind an asyncio lock
- Optional load timeout so a stalled download cannot hang submissions forever
- Input length validation with a configurable overflow policy
- Load failures are recorded and re-raised as ModelUnavailable until reset

All blocking operations are wrapped in asyncio.to_thread() to avoid blocking the event loop.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Callable, List, Sequence

from spamgate.ai.errors import MalformedInput, ModelUnavailable
from spamgate.ai.model_loader import ScoringModel, load_torchscript_model
from spamgate.datatypes.classification_datatypes import ClassificationResult, EncodedSequence
from spamgate.util.logger import get_logger

logger = get_logger("inference_engine")

ModelLoader = Callable[[str], ScoringModel]


@dataclass
class ModelState:
    """
    Load status of the scoring model.

    Attributes:
        init_started (bool): Indicates if a load has been attempted.
        available (bool): True if the model is loaded and ready.
        init_error (str | None): Last load error message, if any.
    """
    init_started: bool = False
    available: bool = False
    init_error: str | None = None


class InferenceEngine:
    """
    Classifies encoded comments with a model that is loaded at most once.

    Attributes:
        model_location (str): Path or URL of the serialized model.
        encoding_length (int): Input length L the model expects, shape ``[1, L]``.
        overflow_policy (str): ``"truncate"`` keeps the first L ids of longer
            encodings, ``"reject"`` raises MalformedInput for them.
        load_timeout (float | None): Seconds to wait for the load, None for no limit.
        state (ModelState): Load status, shared with status displays.
        init_lock (asyncio.Lock): Serializes model loading.
    """

    def __init__(
        self,
        model_location: str,
        encoding_length: int = 20,
        *,
        loader: ModelLoader | None = None,
        overflow_policy: str = "truncate",
        load_timeout: float | None = None,
        device: str = "cpu",
    ) -> None:
        if overflow_policy not in {"truncate", "reject"}:
            raise ValueError(f"Unknown overflow policy: {overflow_policy!r}")
        self.model_location = model_location
        self.encoding_length = encoding_length
        self.overflow_policy = overflow_policy
        self.load_timeout = load_timeout
        self._loader: ModelLoader = loader or functools.partial(load_torchscript_model, device=device)
        self._model: ScoringModel | None = None
        self.state = ModelState()
        self.init_lock = asyncio.Lock()

    def _set_init_error(self, msg: str) -> None:
        self.state.available = False
        self.state.init_error = msg

    def is_model_available(self) -> bool:
        return self.state.available

    def get_model_init_error(self) -> str | None:
        return self.state.init_error

    async def ensure_model(self) -> ScoringModel:
        """
        Return the loaded model, loading it on the first call.

        Raises:
            ModelUnavailable: If loading fails, timed out, or failed earlier.
        """
        if self._model is not None:
            return self._model

        async with self.init_lock:
            if self._model is not None:
                return self._model

            # Previously failed - don't retry until reset()
            if self.state.init_started and self.state.init_error:
                raise ModelUnavailable(self.state.init_error)

            self.state.init_started = True
            logger.info("[INFERENCE] Loading model from %s", self.model_location)

            # A TimeoutError raised by the loader itself is an ordinary load failure
            deadline = asyncio.timeout(self.load_timeout)
            try:
                async with deadline:
                    model = await asyncio.to_thread(self._loader, self.model_location)
            except Exception as exc:
                if isinstance(exc, TimeoutError) and deadline.expired():
                    self._set_init_error(f"model load timed out after {self.load_timeout:g}s")
                    logger.error("[INFERENCE] %s", self.state.init_error)
                    raise ModelUnavailable(self.state.init_error) from None
                self._set_init_error(f"model load failed: {exc}")
                logger.error("[INFERENCE] Model load from %s failed: %s", self.model_location, exc)
                raise ModelUnavailable(self.state.init_error) from exc

            self._model = model
            self.state.available = True
            self.state.init_error = None
            logger.info("[INFERENCE] Model ready")
            return model

    def prepare_input(self, encoded: Sequence[int]) -> EncodedSequence:
        """
        Fit an encoding to the model input length according to the overflow policy.

        Raises:
            MalformedInput: If the encoding is shorter than the input length, or
                longer while the policy is ``"reject"``.
        """
        length = len(encoded)
        if length < self.encoding_length:
            raise MalformedInput(f"Encoded sequence has {length} ids, model expects {self.encoding_length}")
        if length > self.encoding_length:
            if self.overflow_policy == "reject":
                raise MalformedInput(f"Encoded sequence has {length} ids, model accepts at most {self.encoding_length}")
            logger.debug("[INFERENCE] Truncating encoding from %d to %d ids", length, self.encoding_length)
        return list(encoded[: self.encoding_length])

    async def classify(self, encoded: Sequence[int]) -> ClassificationResult:
        """
        Score one encoded comment.

        The encoding is sent as a single-item batch of shape ``[1, L]``.

        Returns:
            ClassificationResult: Not-spam and spam probabilities.

        Raises:
            MalformedInput: If the encoding length does not fit the model.
            ModelUnavailable: If the model cannot be loaded or the forward pass fails.
        """
        batch: List[EncodedSequence] = [self.prepare_input(encoded)]
        model = await self.ensure_model()

        try:
            outputs = await asyncio.to_thread(model.predict, batch)
        except Exception as exc:
            logger.error("[INFERENCE] Forward pass failed: %s", exc)
            raise ModelUnavailable(f"forward pass failed: {exc}") from exc

        try:
            result = ClassificationResult.from_probabilities(outputs[0])
        except (IndexError, TypeError, ValueError) as exc:
            logger.error("[INFERENCE] Unexpected model output %r: %s", outputs, exc)
            raise ModelUnavailable(f"unexpected model output: {exc}") from exc

        logger.debug("[INFERENCE] %s -> not_spam=%.4f spam=%.4f", batch[0], result.not_spam, result.spam)
        return result

    async def reset(self) -> None:
        """Drop the loaded model and any recorded failure so the next call loads again."""
        async with self.init_lock:
            self._model = None
            self.state.init_started = False
            self.state.available = False
            self.state.init_error = None
