"""
Spamgate Comment Client
=======================

Interactive comment client that checks every comment with an on-device spam
model before broadcasting it to the other participants of the room.
"""

import asyncio
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from spamgate.ai.engine_lifecycle import EngineLifecycle
from spamgate.ai.inference_engine import InferenceEngine
from spamgate.ai.tokenizer import Tokenizer
from spamgate.broadcast.broadcast_channel import BroadcastChannel
from spamgate.broadcast.memory_channel import BroadcastHub
from spamgate.configuration.app_configuration import AppConfig, default_config_path
from spamgate.datatypes.vocabulary import Vocabulary
from spamgate.moderation.identity import IdentityProvider
from spamgate.moderation.moderation_gate import ModerationGate
from spamgate.moderation.submission_controller import SubmissionController
from spamgate.ui.console import ConsoleControl, console_session, render_message, render_outcome
from spamgate.util.logger import get_logger, handle_exception


logger = get_logger("main")


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. SPAMGATE_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("SPAMGATE_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


def load_environment(base_dir: Path) -> None:
    """Load ``.env`` from the base directory without overriding the real environment."""
    load_dotenv(dotenv_path=base_dir / ".env")


@dataclass
class Runtime:
    """Everything one client session needs, wired together."""
    engine: InferenceEngine
    lifecycle: EngineLifecycle
    channel: BroadcastChannel
    controller: SubmissionController


def build_runtime(config: AppConfig, vocabulary: Vocabulary, channel: BroadcastChannel) -> Runtime:
    """Construct the submission pipeline from configuration.

    Parameters
    ----------
    config:
        Loaded application configuration.
    vocabulary:
        Pre-built vocabulary used by the tokenizer.
    channel:
        Broadcast channel accepted comments are published on.
    """
    settings = config.classifier
    engine = InferenceEngine(
        settings.model_location,
        settings.encoding_length,
        overflow_policy=settings.overflow_policy,
        load_timeout=settings.load_timeout_seconds,
        device=settings.device,
    )
    identity = IdentityProvider(config.default_identity)
    if env_name := os.getenv("SPAMGATE_USERNAME"):
        identity.set(env_name)

    controller = SubmissionController(
        Tokenizer(vocabulary, settings.encoding_length),
        engine,
        ModerationGate(settings.spam_threshold),
        channel,
        identity,
    )
    return Runtime(engine=engine, lifecycle=EngineLifecycle(engine), channel=channel, controller=controller)


async def run_session(runtime: Runtime) -> int:
    """Run the console until the user quits, then release the engine and channel."""
    runtime.controller.add_listener(render_outcome)
    runtime.channel.on_message(lambda message: render_message(message, remote=True))
    await runtime.channel.start()

    available, detail = await runtime.lifecycle.initialize()
    if not available:
        logger.warning(
            "Spam model is unavailable (%s). Comments will be held back until it loads.",
            detail or "no details",
        )

    control = ConsoleControl(runtime.controller, runtime.engine)
    try:
        async with console_session(control):
            await control.shutdown_event.wait()
    finally:
        await runtime.channel.close()
        try:
            await runtime.lifecycle.shutdown()
        except Exception as exc:
            logger.exception("Error during inference engine shutdown: %s", exc)
        logger.info("Shutdown complete.")
    return 0


async def async_main() -> int:
    """Bootstrap configuration, vocabulary and the pipeline, returning an exit code."""
    base_dir = resolve_base_dir()
    os.chdir(base_dir)
    load_environment(base_dir)

    config = AppConfig(default_config_path())

    try:
        vocabulary = Vocabulary.load(config.vocabulary_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.critical("Failed to load vocabulary: %s", exc)
        return 1
    logger.info("Loaded vocabulary with %d words from %s", len(vocabulary), config.vocabulary_path)

    hub = BroadcastHub()
    runtime = build_runtime(config, vocabulary, hub.join(config.broadcast_room))
    return await run_session(runtime)


def main() -> int:
    """Entrypoint that runs the async client and returns the process exit code."""
    sys.excepthook = handle_exception
    logger.info("Starting Spamgate comment client…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the client: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
