"""HTML exporter for chat sessions."""

import html as html_lib
import logging
import re
from pathlib import Path
from typing import Optional

from chat2html.core.models import ChatSession, Message
from chat2html.exporters.base import Exporter
from chat2html.exporters.utils.markdown import RenderContext, markdown_to_html

logger = logging.getLogger(__name__)

# math spans are restored verbatim; MathJax typesets them in the browser
MATHJAX_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
MATHJAX_CONFIG = (
    "window.MathJax = {tex: {inlineMath: [['$', '$']], "
    "displayMath: [['$$', '$$']]}};"
)


def session_filename(session: ChatSession) -> str:
    """builds a filesystem-safe file name from the session title."""
    safe_title = re.sub(r"[^\w\s-]", "", session.title)
    safe_title = re.sub(r"[-\s]+", "_", safe_title).strip("_")
    if not safe_title:
        safe_title = session.id or "Untitled"
    return f"Chat-{safe_title}.html"


class HTMLExporter(Exporter):  # pylint: disable=too-few-public-methods
    """exports chat sessions to standalone HTML documents."""

    def __init__(self, ctx: Optional[RenderContext] = None) -> None:
        self.ctx = ctx or RenderContext()

    def export(
        self,
        session: ChatSession,
        destination: str,
        dry_run: bool = False,
        overwrite: bool = False,
    ) -> bool:
        """exports session to an HTML file in the destination directory."""
        output_path = Path(destination) / session_filename(session)

        if dry_run:
            logger.info("Would write to: %s", output_path)
            return False

        if output_path.exists() and not overwrite:
            logger.info("Skipping existing file: %s", output_path)
            return False

        html_content = self.render_session(session)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html_content, encoding="utf-8")
        logger.debug("Wrote %s", output_path)
        return True

    def render_session(self, session: ChatSession) -> str:
        """renders the full HTML document for a session."""
        title_escaped = html_lib.escape(session.title)
        messages_html = "\n".join(
            self.render_message(message) for message in session.messages
        )

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title_escaped}</title>
    <script>{MATHJAX_CONFIG}</script>
    <script async src="{MATHJAX_URL}"></script>
</head>
<body>
    <h1>{title_escaped}</h1>
{messages_html}
</body>
</html>"""

    def render_message(self, message: Message) -> str:
        """renders one message bubble."""
        author = "You" if message.is_user else "Assistant"
        parts = [f'<div class="author">{author}</div>']

        if message.file is not None:
            name = html_lib.escape(message.file.name)
            mime_type = html_lib.escape(message.file.mime_type)
            parts.append(f'<div class="attachment" title="{mime_type}">{name}</div>')

        if message.text:
            body = markdown_to_html(message.text, self.ctx)
            parts.append(f'<div class="content">{body}</div>')

        if message.flashcards:
            cards = "".join(
                f"<dt>{html_lib.escape(card.term)}</dt>"
                f"<dd>{html_lib.escape(card.definition)}</dd>"
                for card in message.flashcards
            )
            parts.append(f'<dl class="flashcards">{cards}</dl>')

        return f'<div class="message {message.role}">{"".join(parts)}</div>'
