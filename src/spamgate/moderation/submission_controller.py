"""
Submission pipeline for locally typed comments.

A submission moves the controller from IDLE to PROCESSING, runs the text through
normalization, encoding, classification and the threshold gate, then returns to
IDLE on every exit path. Accepted comments are published on the broadcast
channel; every processed submission is reported to the registered listeners as a
:class:`SubmissionOutcome` so the rendering side can show or mark it.

Only one submission runs at a time. Submitting while another one is processing
is ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Protocol, Sequence

from spamgate.ai.errors import ClassificationError
from spamgate.ai.tokenizer import Tokenizer, normalize_text
from spamgate.broadcast.broadcast_channel import BroadcastChannel
from spamgate.datatypes.classification_datatypes import ClassificationResult, Decision
from spamgate.datatypes.message_datatypes import Message, SubmissionOutcome, SubmissionState
from spamgate.moderation.identity import IdentityProvider
from spamgate.moderation.moderation_gate import ModerationGate
from spamgate.util.logger import get_logger

logger = get_logger("submission_controller")

OutcomeListener = Callable[[SubmissionOutcome], None]


class Classifier(Protocol):
    async def classify(self, encoded: Sequence[int]) -> ClassificationResult:
        ...


class SubmissionController:
    """
    Orchestrates one comment submission at a time.

    Attributes:
        tokenizer: Encodes normalized words for the model.
        classifier: Async scorer, normally the :class:`InferenceEngine`.
        gate: Threshold policy.
        channel: Where accepted comments are published.
        identity: Source of the author name for new comments.
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        classifier: Classifier,
        gate: ModerationGate,
        channel: BroadcastChannel,
        identity: IdentityProvider,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.tokenizer = tokenizer
        self.classifier = classifier
        self.gate = gate
        self.channel = channel
        self.identity = identity
        self._clock = clock
        self._state = SubmissionState.IDLE
        self._listeners: List[OutcomeListener] = []

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_processing(self) -> bool:
        return self._state is SubmissionState.PROCESSING

    def add_listener(self, listener: OutcomeListener) -> None:
        """Register a callback invoked with every submission outcome."""
        self._listeners.append(listener)

    async def submit(self, text: str) -> SubmissionOutcome | None:
        """
        Run ``text`` through the pipeline.

        Returns:
            SubmissionOutcome | None: The outcome, or None when another
            submission was still processing and this one was ignored.
        """
        if self._state is SubmissionState.PROCESSING:
            logger.debug("[SUBMISSION] Ignoring submission while another one is processing")
            return None

        self._state = SubmissionState.PROCESSING
        try:
            outcome = await self._process(text)
        finally:
            self._state = SubmissionState.IDLE

        self._notify(outcome)
        return outcome

    async def _process(self, text: str) -> SubmissionOutcome:
        words = normalize_text(text)
        encoded = self.tokenizer.encode(words)

        try:
            result = await self.classifier.classify(encoded)
        except ClassificationError as exc:
            logger.error("[SUBMISSION] Classification failed, comment not published: %s", exc)
            return SubmissionOutcome(text=text, decision=Decision.REJECT, error=exc)
        except Exception as exc:
            logger.exception("[SUBMISSION] Unexpected classifier failure, comment not published: %s", exc)
            return SubmissionOutcome(text=text, decision=Decision.REJECT, error=exc)

        decision = self.gate.decide(result)
        logger.info(
            "[SUBMISSION] spam=%.4f threshold=%.2f -> %s",
            result.spam,
            self.gate.threshold,
            decision.value,
        )

        if decision is Decision.REJECT:
            return SubmissionOutcome(text=text, decision=decision, result=result)

        message = Message.create(self.identity.current, text, moment=self._clock())
        self.channel.publish(message)
        return SubmissionOutcome(text=text, decision=decision, message=message, result=result)

    def _notify(self, outcome: SubmissionOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as exc:
                logger.exception("[SUBMISSION] Outcome listener failed: %s", exc)
