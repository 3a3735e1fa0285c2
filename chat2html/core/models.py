"""Data models for exported chat sessions."""

from dataclasses import dataclass, field
from typing import Optional

ROLES = ("user", "model")


@dataclass
class Attachment:
    """File attached to a message."""

    name: str
    mime_type: str
    data_url: str = ""


@dataclass
class Flashcard:
    """Term/definition pair generated for a message."""

    term: str
    definition: str


@dataclass
class Message:
    """Individual message in a chat session."""

    role: str  # "user", "model"
    text: str
    file: Optional[Attachment] = None
    flashcards: list[Flashcard] = field(default_factory=list)

    @property
    def is_user(self) -> bool:
        """True for messages typed by the user."""
        return self.role == "user"


@dataclass
class ChatSession:
    """Complete chat session."""

    id: str
    title: str
    messages: list[Message]
    is_pinned: bool = False
