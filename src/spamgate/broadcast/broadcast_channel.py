"""Publish/subscribe seam between the local client and the other participants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from spamgate.datatypes.message_datatypes import Message

MessageHandler = Callable[[Message], None]


class BroadcastChannel(ABC):
    """Transport-agnostic channel used to fan out accepted comments.

    Implementations deliver remote messages to every registered handler, once
    per received message and in receipt order. Duplicates sent by the transport
    are delivered as distinct messages.
    """

    @abstractmethod
    def publish(self, message: Message) -> None:
        """Send ``message`` to all other participants without waiting for acknowledgement."""

    @abstractmethod
    def on_message(self, handler: MessageHandler) -> None:
        """Register ``handler`` for messages published by other participants."""

    async def start(self) -> None:
        """Begin delivering remote messages. No-op by default."""

    async def close(self) -> None:
        """Stop delivering remote messages. No-op by default."""
