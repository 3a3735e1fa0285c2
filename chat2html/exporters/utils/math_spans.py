"""math span protection for markdown processing."""

import re

# display math is listed first so "$$" is never taken as two inline delimiters
MATH_PATTERN = re.compile(r"\$\$[\s\S]*?\$\$|\$[\s\S]*?\$")

# sentinel must not contain any markdown or markup syntax characters
_SENTINEL = "╣MATH"


def placeholder(index: int) -> str:
    """returns the placeholder token standing in for the span at index."""
    return f"{_SENTINEL}{index}╣"


def extract_math(text: str) -> tuple[str, list[str]]:
    """
    replaces math spans with indexed placeholders.

    Args:
        text: input text containing $...$ or $$...$$ spans

    Returns:
        tuple of (shielded text, list of spans in first-seen order)
    """
    spans: list[str] = []

    def replacer(match: re.Match[str]) -> str:
        spans.append(match.group(0))
        return placeholder(len(spans) - 1)

    return MATH_PATTERN.sub(replacer, text), spans


def restore_math(markup: str, spans: list[str]) -> str:
    """
    puts math spans back in place of their placeholders.

    Spans are inserted verbatim. A placeholder the converter dropped is
    skipped, and a duplicated one is only restored once.

    Args:
        markup: converted text with placeholders
        spans: spans returned by extract_math

    Returns:
        markup with math spans restored
    """
    for i, span in enumerate(spans):
        markup = markup.replace(placeholder(i), span, 1)
    return markup
