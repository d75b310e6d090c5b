"""Lifecycle management helpers for the inference engine."""
from __future__ import annotations

from typing import Optional, Tuple

from spamgate.ai.errors import ModelUnavailable
from spamgate.ai.inference_engine import InferenceEngine
from spamgate.util.logger import get_logger

logger = get_logger("engine_lifecycle")


class EngineLifecycle:
    """Manage warm-up, restart, and shutdown of the inference engine."""

    def __init__(self, engine: InferenceEngine) -> None:
        """Bind the lifecycle controller to the shared engine."""
        self._engine = engine

    async def initialize(self) -> Tuple[bool, Optional[str]]:
        """Load the model ahead of the first submission and report availability."""

        logger.info("[ENGINE LIFECYCLE] Warming up inference engine…")
        try:
            await self._engine.ensure_model()
        except ModelUnavailable as exc:
            logger.warning("[ENGINE LIFECYCLE] Warm-up failed: %s", exc)
        return self._engine.state.available, self._engine.state.init_error

    async def restart(self) -> Tuple[bool, Optional[str]]:
        """Discard the current model (and any recorded failure) and load again."""

        logger.info("[ENGINE LIFECYCLE] Restart requested; resetting engine…")
        await self._engine.reset()
        return await self.initialize()

    async def shutdown(self) -> None:
        """Release the loaded model."""

        logger.info("[ENGINE LIFECYCLE] Shutting down inference engine…")
        await self._engine.reset()
