"""markdown to HTML conversion for chat messages."""

import html as html_lib
import re
from dataclasses import dataclass
from typing import Any, Optional, cast

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock, fence, html_block
from markdown_it.rules_core import StateCore

from chat2html.exporters.utils.math_spans import extract_math, restore_math

FENCE_MARKER_PATTERN = re.compile(r"`{3,}|~{3,}")
BLOCKQUOTE_PATTERN = re.compile(r"> (.*)")
BLOCK_TAG_PATTERN = re.compile(
    r"</?(h[1-6]|ul|ol|li|blockquote|table|thead|tbody|tr|th|td|pre|code)\b"
)

CODE_CLASS = (
    "bg-slate-200 dark:bg-slate-900 text-amber-600 dark:text-amber-400 "
    "px-1.5 py-1 rounded text-sm font-mono"
)
LINK_CLASS = "text-brand hover:underline"

LIST_CLOSE_FOR_OPEN = {
    "bullet_list_open": "bullet_list_close",
    "ordered_list_open": "ordered_list_close",
}


@dataclass
class RenderContext:
    """presentation options passed to the converter."""

    code_class: str = CODE_CLASS
    link_class: str = LINK_CLASS
    link_target: str = "_blank"


def markdown_to_html(text: str, ctx: Optional[RenderContext] = None) -> str:
    """
    renders a chat message to HTML, keeping math spans untouched.

    Args:
        text: markdown text, possibly containing $...$ or $$...$$ math
        ctx: presentation options (defaults to RenderContext())

    Returns:
        HTML markup with math spans restored verbatim
    """
    shielded, spans = extract_math(text)
    html = convert_markdown(shielded, ctx)
    return restore_math(html, spans) if spans else html


def convert_markdown(text: str, ctx: Optional[RenderContext] = None) -> str:
    """
    converts markdown to HTML.

    Parses CommonMark with tables and strikethrough; single newlines inside a
    paragraph become <br>. Fences must start a line and be closed, every
    '> ' line is its own blockquote, and adjacent lists of the same kind are
    merged. Never raises: unrecognized syntax is kept as escaped text.

    Args:
        text: markdown text
        ctx: presentation options (defaults to RenderContext())

    Returns:
        HTML markup
    """
    ctx = ctx or RenderContext()

    md = MarkdownIt("commonmark", {"breaks": True, "xhtmlOut": False})
    md.enable(["table", "strikethrough"])
    md.disable(["code", "hr", "lheading", "reference", "blockquote"])
    md.disable(["html_inline", "image"])

    md.block.ruler.at(
        "fence",
        _closed_fence,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
    md.block.ruler.at(
        "html_block",
        _block_markup,
        {"alt": ["paragraph", "reference", "blockquote"]},
    )
    md.block.ruler.before(
        "list", "blockquote_line", _blockquote_line, {"alt": ["paragraph", "list"]}
    )
    md.core.ruler.push("merge_lists", _merge_lists)

    renderer: Any = md.renderer
    original_render_token = renderer.renderToken

    def custom_render_token(tokens: Any, idx: int, options: Any, env: Any) -> str:
        token = tokens[idx]

        tag_map = {"s": "del"}
        if token.tag in tag_map:
            token.tag = tag_map[token.tag]

        return cast(str, original_render_token(tokens, idx, options, env))

    renderer.renderToken = custom_render_token

    def render_fence(tokens: Any, idx: int, options: Any, _env: Any) -> str:
        token = tokens[idx]
        lang = token.info.strip()
        code = token.content.replace("<", "&lt;").replace(">", "&gt;").strip()
        css_class = f"{options.langPrefix}{lang}"
        return f'<pre><code class="{css_class}">{code}</code></pre>\n'

    renderer.rules["fence"] = render_fence

    def render_code_inline(tokens: Any, idx: int, _options: Any, _env: Any) -> str:
        token = tokens[idx]
        escaped = html_lib.escape(token.content, quote=False)
        class_attr = f' class="{ctx.code_class}"' if ctx.code_class else ""
        return f"<code{class_attr}>{escaped}</code>"

    renderer.rules["code_inline"] = render_code_inline

    def render_link_open(tokens: Any, idx: int, options: Any, env: Any) -> str:
        token = tokens[idx]
        if ctx.link_target:
            token.attrSet("target", ctx.link_target)
            token.attrSet("rel", "noopener noreferrer")
        if ctx.link_class:
            token.attrSet("class", ctx.link_class)
        return cast(str, renderer.renderToken(tokens, idx, options, env))

    renderer.rules["link_open"] = render_link_open

    return cast(str, md.render(text))


def _line_text(state: StateBlock, line: int) -> str:
    """returns a source line without its indentation."""
    return state.src[state.bMarks[line] + state.tShift[line] : state.eMarks[line]]


def _closed_fence(
    state: StateBlock, startLine: int, endLine: int, silent: bool
) -> bool:
    """accepts a fenced code block only when a closing fence follows."""
    opening = FENCE_MARKER_PATTERN.match(_line_text(state, startLine))
    if opening is None:
        return False

    marker = opening.group(0)
    for line in range(startLine + 1, endLine):
        text = _line_text(state, line)
        closing = FENCE_MARKER_PATTERN.match(text)
        if (
            closing is not None
            and closing.group(0)[0] == marker[0]
            and len(closing.group(0)) >= len(marker)
            and not text[closing.end() :].strip(" \t")
        ):
            return fence(state, startLine, endLine, silent)

    return False


def _block_markup(
    state: StateBlock, startLine: int, endLine: int, silent: bool
) -> bool:
    """passes through raw HTML only when it starts with a structural tag."""
    if not BLOCK_TAG_PATTERN.match(_line_text(state, startLine)):
        return False
    return html_block(state, startLine, endLine, silent)


def _blockquote_line(
    state: StateBlock, startLine: int, _endLine: int, silent: bool
) -> bool:
    """turns a single '> ' line into its own blockquote."""
    if state.is_code_block(startLine):
        return False

    quote = BLOCKQUOTE_PATTERN.match(_line_text(state, startLine))
    if quote is None:
        return False
    if silent:
        return True

    line_map = [startLine, startLine + 1]

    token = state.push("blockquote_open", "blockquote", 1)
    token.markup = ">"
    token.map = line_map

    token = state.push("inline", "", 0)
    token.content = quote.group(1).strip()
    token.map = line_map
    token.children = []

    token = state.push("blockquote_close", "blockquote", -1)
    token.markup = ">"

    state.line = startLine + 1
    return True


def _merge_lists(state: StateCore) -> None:
    """
    merges adjacent lists of the same kind into one list.

    Also drops ordered list start numbers and hides paragraphs inside list
    items, so loose and tight lists render the same.
    """
    merged: list[Any] = []
    item_depth = 0

    for token in state.tokens:
        previous = merged[-1] if merged else None
        if (
            token.type in LIST_CLOSE_FOR_OPEN
            and previous is not None
            and previous.type == LIST_CLOSE_FOR_OPEN[token.type]
            and previous.level == token.level
        ):
            merged.pop()
            continue

        if token.type == "ordered_list_open":
            token.attrs.pop("start", None)
        elif token.type == "list_item_open":
            item_depth += 1
        elif token.type == "list_item_close":
            item_depth -= 1
        elif token.type in ("paragraph_open", "paragraph_close") and item_depth:
            token.hidden = True

        merged.append(token)

    state.tokens[:] = merged
