from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..scheduling.clock import to_utc

CHAT_ROLES = {"user", "assistant"}


@dataclass
class ChatMessage:
    """One turn of the study chat, kept per user."""

    role: str
    content: str
    created_at: datetime

    def __post_init__(self):
        if self.role not in CHAT_ROLES:
            raise ValueError(f"Unknown chat role: {self.role}")
        self.created_at = to_utc(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        return cls(
            role=data["role"],
            content=data["content"],
            created_at=data["createdAt"],
        )
