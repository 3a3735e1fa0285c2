"""rendering utilities for chat message content."""

from chat2html.exporters.utils.markdown import (
    RenderContext,
    convert_markdown,
    markdown_to_html,
)
from chat2html.exporters.utils.math_spans import extract_math, restore_math

__all__ = [
    "RenderContext",
    "convert_markdown",
    "markdown_to_html",
    "extract_math",
    "restore_math",
]
