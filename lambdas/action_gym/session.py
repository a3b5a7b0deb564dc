from dataclasses import dataclass, field
from typing import Any, Dict, Optional

FALLBACK_INTENT = "Fallback"


@dataclass
class ConversationSession:
    """Per-conversation data the platform carries between turns.

    Only ``fallbackCount`` is owned here; any other keys found in the stored
    data are kept in ``extra`` and written back untouched.
    """

    fallback_count: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Optional[Dict[str, Any]]) -> "ConversationSession":
        data = dict(data or {})
        raw = data.pop("fallbackCount", None)
        try:
            count = int(raw) if raw is not None else None
        except (TypeError, ValueError):
            count = None
        return cls(fallback_count=count, extra=data)

    def to_data(self) -> Dict[str, Any]:
        return {**self.extra, "fallbackCount": self.fallback_count or 0}


def normalize(session: ConversationSession, intent_name: str) -> None:
    """Reset the fallback counter unless this turn is another fallback.

    A missing or zero count is reset as well, which is a no-op for zero.
    """
    if not session.fallback_count or intent_name != FALLBACK_INTENT:
        session.fallback_count = 0
