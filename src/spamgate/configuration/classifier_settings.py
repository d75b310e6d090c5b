from typing import Any, Dict

from spamgate.util.logger import get_logger

logger = get_logger("classifier_settings")

DEFAULT_ENCODING_LENGTH = 20
DEFAULT_SPAM_THRESHOLD = 0.5
DEFAULT_MODEL_LOCATION = "model/model.pt"
OVERFLOW_POLICIES = ("truncate", "reject")


class ClassifierSettings:
    """Typed accessors for the ``classifier`` section of the app config.

    Values are coerced on access. Anything missing or out of range falls back
    to the default with a warning instead of raising, so a bad config file
    never stops the client from starting.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        """Return the underlying mapping (shallow copy recommended by callers)."""
        return self.data

    @property
    def model_location(self) -> str:
        val = self.data.get("model_location")
        return str(val) if val else DEFAULT_MODEL_LOCATION

    @property
    def encoding_length(self) -> int:
        raw = self.data.get("encoding_length", DEFAULT_ENCODING_LENGTH)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("[CLASSIFIER SETTINGS] encoding_length %r is not an integer; using %d", raw, DEFAULT_ENCODING_LENGTH)
            return DEFAULT_ENCODING_LENGTH
        if value < 1:
            logger.warning("[CLASSIFIER SETTINGS] encoding_length must be >= 1, got %d; using %d", value, DEFAULT_ENCODING_LENGTH)
            return DEFAULT_ENCODING_LENGTH
        return value

    @property
    def spam_threshold(self) -> float:
        raw = self.data.get("spam_threshold", DEFAULT_SPAM_THRESHOLD)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("[CLASSIFIER SETTINGS] spam_threshold %r is not a number; using %.2f", raw, DEFAULT_SPAM_THRESHOLD)
            return DEFAULT_SPAM_THRESHOLD
        if not 0.0 <= value <= 1.0:
            logger.warning("[CLASSIFIER SETTINGS] spam_threshold must be within [0, 1], got %s; using %.2f", value, DEFAULT_SPAM_THRESHOLD)
            return DEFAULT_SPAM_THRESHOLD
        return value

    @property
    def overflow_policy(self) -> str:
        value = str(self.data.get("overflow_policy", "truncate")).lower()
        if value not in OVERFLOW_POLICIES:
            logger.warning("[CLASSIFIER SETTINGS] Unknown overflow_policy %r; using 'truncate'", value)
            return "truncate"
        return value

    @property
    def load_timeout_seconds(self) -> float | None:
        raw = self.data.get("load_timeout_seconds")
        if raw is None:
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("[CLASSIFIER SETTINGS] load_timeout_seconds %r is not a number; disabling timeout", raw)
            return None
        return value if value > 0 else None

    @property
    def device(self) -> str:
        return str(self.data.get("device") or "cpu")
