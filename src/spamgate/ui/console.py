"""Interactive comment console: the local submission surface and message renderer."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import PromptSession

from spamgate.ai.inference_engine import InferenceEngine
from spamgate.datatypes.message_datatypes import Message, SubmissionOutcome
from spamgate.moderation.submission_controller import SubmissionController
from spamgate.util.logger import get_logger

# Box drawing helpers for aligned console output
BOX_WIDTH = 45

def box_title(title: str) -> list[str]:
    inner_width = BOX_WIDTH - 2
    pad_left = (inner_width - len(title)) // 2
    pad_right = inner_width - len(title) - pad_left
    return [
        f"╔{'═' * inner_width}╗",
        f"║{' ' * pad_left}{title}{' ' * pad_right}║",
        f"╚{'═' * inner_width}╝"
    ]

logger = get_logger("console")

COMMAND_PREFIX = "/"

# Type alias for command handler functions
CommandHandler = Callable[["ConsoleControl", list[str]], Awaitable[None]]


@dataclass
class Command:
    """Definition of a console command."""
    name: str
    handler: CommandHandler
    aliases: list[str]
    description: str
    usage: str = ""

    def matches(self, input_cmd: str) -> bool:
        """Check if input matches this command or any alias."""
        return input_cmd == self.name or input_cmd in self.aliases


def console_print(message: str, style: str = "") -> None:
    """Render text via prompt_toolkit without breaking the active prompt."""
    formatted: FormattedText | str
    if style:
        formatted = FormattedText([(style, message)])
    else:
        formatted = message
    print_formatted_text(formatted)


def render_message(message: Message, *, remote: bool = False) -> None:
    """Print a comment the way the comment list shows it."""
    print_formatted_text(FormattedText([
        ("ansicyan bold", message.author),
        ("", "  "),
        ("ansibrightblack", message.timestamp),
        ("ansibrightblack", "  (remote)" if remote else ""),
    ]))
    console_print(f"  {message.text}")


def render_outcome(outcome: SubmissionOutcome) -> None:
    """Show the local result of a submission: the comment, or a spam marker."""
    if outcome.accepted and outcome.message is not None:
        render_message(outcome.message)
    elif outcome.failed:
        console_print(f"✗ Could not check comment, not posted: {outcome.error}", "ansired")
        console_print(f"  {outcome.text}", "ansibrightblack")
    else:
        spam = outcome.result.spam if outcome.result else 1.0
        console_print(f"⚠ Held back as spam ({spam:.0%})", "ansiyellow")
        console_print(f"  {outcome.text}", "ansibrightblack strike")


class ConsoleControl:
    """Glue between the prompt loop, the submission controller and the engine."""

    def __init__(self, controller: SubmissionController, engine: InferenceEngine) -> None:
        self.controller = controller
        self.engine = engine
        self.shutdown_event = asyncio.Event()
        self._pending: set[asyncio.Task[SubmissionOutcome | None]] = set()

    def request_shutdown(self) -> None:
        self.shutdown_event.set()

    def is_shutdown_requested(self) -> bool:
        return self.shutdown_event.is_set()

    def submit(self, text: str) -> asyncio.Task[SubmissionOutcome | None] | None:
        """Start a submission in the background unless one is already running."""
        if self.controller.is_processing:
            console_print("Still checking your previous comment…", "ansibrightblack")
            return None
        task = asyncio.create_task(self.controller.submit(text))
        self._pending.add(task)
        task.add_done_callback(self._on_submission_done)
        return task

    def _on_submission_done(self, task: asyncio.Task[SubmissionOutcome | None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Submission failed: %s", exc, exc_info=exc)
            console_print(f"Error: {exc}", "ansired")

    async def drain(self) -> None:
        """Wait for any submission that is still running."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


# ==================== Command Handlers ====================

async def cmd_help(control: ConsoleControl, args: list[str]) -> None:
    """Display available commands and their descriptions."""
    for line in box_title("Console Commands Reference"):
        console_print(line, "ansigreen")

    console_print("\n  Type any other text to post it as a comment.")
    for cmd in COMMANDS:
        aliases_str = f" (aliases: {', '.join(COMMAND_PREFIX + a for a in cmd.aliases)})" if cmd.aliases else ""
        console_print(f"\n  {COMMAND_PREFIX}{cmd.name}{aliases_str}", "ansicyan")
        console_print(f"    {cmd.description}")
        if cmd.usage:
            console_print(f"    Usage: {cmd.usage}", "ansibrightblack")

    console_print("")


async def cmd_status(control: ConsoleControl, args: list[str]) -> None:
    """Display model and submission status."""
    for line in box_title("Client Status"):
        console_print(line, "ansiblue")

    state = control.engine.state
    if state.available:
        model_status = "🟢 Loaded"
    elif state.init_error:
        model_status = f"🔴 Unavailable ({state.init_error})"
    else:
        model_status = "⚪ Not loaded yet"
    console_print(f"  Model:      {model_status}")
    console_print(f"  Threshold:  {control.controller.gate.threshold:.2f}")
    console_print(f"  Submission: {control.controller.state.value}")
    console_print(f"  Posting as: {control.controller.identity.current}")
    console_print("")


async def cmd_name(control: ConsoleControl, args: list[str]) -> None:
    """Change the name comments are posted under."""
    if not args:
        console_print(f"Posting as {control.controller.identity.current}.", "ansibrightblack")
        return
    name = control.controller.identity.set(" ".join(args))
    console_print(f"Now posting as {name}.", "ansigreen")


async def cmd_quit(control: ConsoleControl, args: list[str]) -> None:
    """Request graceful shutdown."""
    console_print("Shutdown requested.", "ansiyellow")
    control.request_shutdown()


# ==================== Command Registry ====================

COMMANDS: list[Command] = [
    Command(
        name="help",
        handler=cmd_help,
        aliases=["h", "?"],
        description="Show this help message with all available commands",
    ),
    Command(
        name="status",
        handler=cmd_status,
        aliases=["stat", "info"],
        description="Display model state, threshold and the current submission state",
    ),
    Command(
        name="name",
        handler=cmd_name,
        aliases=["nick"],
        description="Show or change the name your comments are posted under",
        usage="/name <display name>",
    ),
    Command(
        name="quit",
        handler=cmd_quit,
        aliases=["exit", "stop"],
        description="Leave the room and exit",
    ),
]


# ==================== Input Dispatcher ====================

async def handle_console_input(line: str, control: ConsoleControl) -> None:
    """Run a ``/command`` or post the line as a comment."""
    text = line.strip()
    if not text:
        return

    if not text.startswith(COMMAND_PREFIX):
        control.submit(text)
        return

    parts = text[len(COMMAND_PREFIX):].split()
    if not parts:
        return
    cmd_name = parts[0].lower()
    args = parts[1:]

    for cmd in COMMANDS:
        if cmd.matches(cmd_name):
            try:
                await cmd.handler(control, args)
            except Exception as exc:
                logger.exception("Error executing command '%s': %s", cmd_name, exc)
                console_print(f"Error executing command: {exc}", "ansired")
            return

    console_print(f"Unknown command '{cmd_name}'. Type '/help' for available commands.", "ansired")


async def run_console(control: ConsoleControl) -> None:
    """Read comments and commands until shutdown is requested."""
    session = PromptSession(f"{control.controller.identity.current}> ")

    for line in box_title("Spamgate Comment Console"):
        console_print(line, "ansigreen")
    console_print("Type a comment and press Enter. '/help' lists commands.\n", "ansibrightblack")

    with patch_stdout():
        while not control.is_shutdown_requested():
            try:
                line = await session.prompt_async(f"{control.controller.identity.current}> ")
                await handle_console_input(line, control)
            except (EOFError, KeyboardInterrupt):
                console_print("\nShutdown requested by user.", "ansiyellow")
                control.request_shutdown()
                break
            except Exception as exc:
                logger.exception("Error in console input loop: %s", exc)
                console_print(f"Error: {exc}", "ansired")


@asynccontextmanager
async def console_session(control: ConsoleControl) -> AsyncIterator[ConsoleControl]:
    """Run the console as a task, cancelling it and draining submissions on exit."""
    console_task = asyncio.create_task(run_console(control))
    try:
        yield control
    finally:
        control.request_shutdown()
        console_task.cancel()
        try:
            await console_task
        except asyncio.CancelledError:
            pass
        await control.drain()
