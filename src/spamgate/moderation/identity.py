from __future__ import annotations

from spamgate.util.logger import get_logger

logger = get_logger("identity")


class IdentityProvider:
    """Holds the display name of the local participant.

    There is no authentication; the name starts as the configured placeholder
    and can be changed by the user for the rest of the process lifetime.
    """

    def __init__(self, default: str = "Anonymous") -> None:
        self.default = default
        self._current = default

    @property
    def current(self) -> str:
        return self._current

    def set(self, name: str) -> str:
        """Change the current name; blank names fall back to the default."""
        cleaned = name.strip() or self.default
        if cleaned != self._current:
            logger.info("[IDENTITY] Now posting as %s", cleaned)
        self._current = cleaned
        return cleaned
