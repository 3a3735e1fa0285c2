"""base exporter interface."""

from abc import ABC, abstractmethod

from chat2html.core.models import ChatSession


class Exporter(ABC):  # pylint: disable=too-few-public-methods
    """abstract base class for chat session exporters."""

    @abstractmethod
    def export(
        self,
        session: ChatSession,
        destination: str,
        dry_run: bool = False,
        overwrite: bool = False,
    ) -> bool:
        """
        Export a chat session to the destination.

        Args:
            session: The session to export
            destination: Where to write the export (interpretation varies by exporter)
            dry_run: If True, don't actually write anything
            overwrite: If True, overwrite existing content

        Returns:
            True if the session was written
        """
        ...  # pylint: disable=unnecessary-ellipsis
