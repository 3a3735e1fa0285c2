"""Parser for exported chat session JSON."""

from typing import Any, Optional

from chat2html.core.models import (
    ROLES,
    Attachment,
    ChatSession,
    Flashcard,
    Message,
)


def process_session(json_data: dict[str, Any]) -> ChatSession:
    """
    Process a chat session from its exported JSON form.

    Missing keys fall back to defaults; messages without text or attachment
    are dropped.

    Args:
        json_data: Raw session JSON

    Returns:
        Processed ChatSession object
    """
    messages = [
        message
        for message in (
            _process_message(data) for data in json_data.get("messages") or []
        )
        if message is not None
    ]

    return ChatSession(
        id=str(json_data.get("id", "")),
        title=json_data.get("title") or "Untitled",
        messages=messages,
        is_pinned=bool(json_data.get("isPinned", False)),
    )


def _process_message(data: dict[str, Any]) -> Optional[Message]:
    """Build a Message, or None when there is nothing to render."""
    text = data.get("text") or ""
    file = _process_attachment(data.get("file"))
    if not text and file is None:
        return None

    flashcards = [
        Flashcard(term=card.get("term", ""), definition=card.get("definition", ""))
        for card in data.get("flashcards") or []
    ]

    # anything not typed by the user is shown as assistant output
    role = data.get("role")
    if role not in ROLES:
        role = "model"

    return Message(
        role=role,
        text=text,
        file=file,
        flashcards=flashcards,
    )


def _process_attachment(data: Optional[dict[str, Any]]) -> Optional[Attachment]:
    if not data:
        return None
    return Attachment(
        name=data.get("name", ""),
        mime_type=data.get("mimeType", ""),
        data_url=data.get("dataUrl", ""),
    )
