"""
In-process broadcast transport.

A :class:`BroadcastHub` groups participants into rooms. Every participant gets
its own :class:`LocalBroadcastChannel`; publishing on one channel serializes the
message to its wire payload and queues it on every other channel of the same
room. Each channel drains its queue in a single task, so handlers see messages
in receipt order.

Usage:
    hub = BroadcastHub()
    alice = hub.join("comments")
    bob = hub.join("comments")
    bob.on_message(render)
    await bob.start()
    alice.publish(Message.create("alice", "hello"))
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Dict, List

from spamgate.broadcast.broadcast_channel import BroadcastChannel, MessageHandler
from spamgate.datatypes.message_datatypes import Message
from spamgate.util.logger import get_logger

logger = get_logger("memory_channel")

Payload = Dict[str, Any]


class BroadcastHub:
    """Routes wire payloads between the channels that joined the same room."""

    def __init__(self) -> None:
        self._rooms: Dict[str, List["LocalBroadcastChannel"]] = defaultdict(list)

    def join(self, room: str) -> "LocalBroadcastChannel":
        channel = LocalBroadcastChannel(self, room)
        self._rooms[room].append(channel)
        logger.debug("[BROADCAST] Channel joined room '%s' (%d members)", room, len(self._rooms[room]))
        return channel

    def leave(self, channel: "LocalBroadcastChannel") -> None:
        members = self._rooms.get(channel.room)
        if members and channel in members:
            members.remove(channel)
            if not members:
                del self._rooms[channel.room]

    def members(self, room: str) -> List["LocalBroadcastChannel"]:
        return list(self._rooms.get(room, []))

    def route(self, sender: "LocalBroadcastChannel", payload: Payload) -> int:
        """Queue ``payload`` on every member of the sender's room except the sender."""
        delivered = 0
        for member in self._rooms.get(sender.room, []):
            if member is not sender:
                member.receive(dict(payload))
                delivered += 1
        return delivered


class LocalBroadcastChannel(BroadcastChannel):
    """One participant's endpoint on a :class:`BroadcastHub`.

    Attributes:
        room (str): Room this channel publishes to and receives from.
    """

    def __init__(self, hub: BroadcastHub, room: str) -> None:
        self._hub = hub
        self.room = room
        self._handlers: List[MessageHandler] = []
        self._queue: asyncio.Queue[Payload] = asyncio.Queue()
        self._pump: asyncio.Task[None] | None = None

    def publish(self, message: Message) -> None:
        delivered = self._hub.route(self, message.to_payload())
        logger.debug("[BROADCAST] Published comment by %s to %d peer(s) in '%s'", message.author, delivered, self.room)

    def on_message(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def receive(self, payload: Payload) -> None:
        """Accept a raw wire payload from the transport."""
        self._queue.put_nowait(payload)

    async def start(self) -> None:
        if self._pump is None or self._pump.done():
            self._pump = asyncio.create_task(self._run(), name=f"broadcast-{self.room}")

    async def flush(self) -> None:
        """Wait until every queued payload has been handed to the handlers."""
        await self._queue.join()

    async def close(self) -> None:
        self._hub.leave(self)
        if self._pump is not None:
            self._pump.cancel()
            try:
                await self._pump
            except asyncio.CancelledError:
                pass
            self._pump = None

    async def _run(self) -> None:
        while True:
            payload = await self._queue.get()
            try:
                self._dispatch(payload)
            finally:
                self._queue.task_done()

    def _dispatch(self, payload: Payload) -> None:
        try:
            message = Message.from_payload(payload)
        except ValueError as exc:
            logger.warning("[BROADCAST] Dropping malformed payload %r: %s", payload, exc)
            return

        for handler in list(self._handlers):
            try:
                handler(message)
            except Exception as exc:
                logger.exception("[BROADCAST] Message handler failed: %s", exc)
