"""tests for markdown to HTML conversion."""

import pytest

from chat2html.exporters.utils.markdown import (
    CODE_CLASS,
    RenderContext,
    convert_markdown,
    markdown_to_html,
)

PLAIN = RenderContext(code_class="", link_class="", link_target="")


def test_empty_input_gives_empty_output() -> None:
    """converts empty and blank input to empty output."""
    assert convert_markdown("") == ""
    assert convert_markdown("\n  \n") == ""


def test_converts_heading() -> None:
    """converts '# Title' to a level-1 heading."""
    assert convert_markdown("# Title") == "<h1>Title</h1>\n"


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
def test_converts_heading_levels(level: int) -> None:
    """matches heading level to the number of # characters."""
    html = convert_markdown("#" * level + " Heading")
    assert html == f"<h{level}>Heading</h{level}>\n"


def test_seven_hashes_is_not_a_heading() -> None:
    """leaves runs longer than six # as text."""
    assert convert_markdown("####### Seven") == "<p>####### Seven</p>\n"


def test_heading_requires_space() -> None:
    """leaves '#word' as text."""
    assert convert_markdown("#hashtag") == "<p>#hashtag</p>\n"


def test_heading_content_gets_inline_formatting() -> None:
    """renders emphasis inside headings."""
    assert (
        convert_markdown("## **Bold** head")
        == "<h2><strong>Bold</strong> head</h2>\n"
    )


def test_converts_bold_and_italic() -> None:
    """converts **bold** and *italic* without leftover asterisks."""
    assert (
        convert_markdown("**bold** and *italic*")
        == "<p><strong>bold</strong> and <em>italic</em></p>\n"
    )


def test_italic_inside_bold() -> None:
    """renders italic nested inside bold."""
    assert (
        convert_markdown("**bold *and* italic**")
        == "<p><strong>bold <em>and</em> italic</strong></p>\n"
    )


def test_converts_strikethrough() -> None:
    """converts ~~text~~ to <del>."""
    assert convert_markdown("~~gone~~") == "<p><del>gone</del></p>\n"


def test_lone_asterisks_stay_literal() -> None:
    """leaves unmatched emphasis markers alone."""
    assert convert_markdown("**") == "<p>**</p>\n"
    assert convert_markdown("2 * 3") == "<p>2 * 3</p>\n"


def test_converts_inline_code_with_styling() -> None:
    """converts inline code without processing its content."""
    html = convert_markdown("use `a*b*` here")
    assert html == f'<p>use <code class="{CODE_CLASS}">a*b*</code> here</p>\n'


def test_converts_links() -> None:
    """converts [label](url) to a link opening in a new tab."""
    html = convert_markdown("[site](https://example.com)")
    assert html == (
        '<p><a href="https://example.com" target="_blank" '
        'rel="noopener noreferrer" class="text-brand hover:underline">site</a></p>\n'
    )


def test_link_url_not_formatted() -> None:
    """keeps emphasis markers in link URLs as they are."""
    html = convert_markdown("[a](http://x/*y*)", PLAIN)
    assert html == '<p><a href="http://x/*y*">a</a></p>\n'


def test_link_label_formatted() -> None:
    """renders emphasis inside link labels."""
    html = convert_markdown("[**a**](u)", PLAIN)
    assert html == '<p><a href="u"><strong>a</strong></a></p>\n'


def test_render_context_without_classes() -> None:
    """omits class, target and rel attributes when empty."""
    assert convert_markdown("`x`", PLAIN) == "<p><code>x</code></p>\n"


def test_converts_table() -> None:
    """converts a pipe table with header and one body row."""
    html = convert_markdown("| a | b |\n| --- | --- |\n| 1 | 2 |")
    assert "<thead>\n<tr>\n<th>a</th>\n<th>b</th>\n</tr>\n</thead>" in html
    assert "<tbody>\n<tr>\n<td>1</td>\n<td>2</td>\n</tr>\n</tbody>" in html
    assert html.startswith("<table>") and html.endswith("</table>\n")


def test_table_cells_get_inline_formatting() -> None:
    """renders inline syntax inside cells."""
    html = convert_markdown("| **a** | `b` |\n|---|:---:|", PLAIN)
    assert "<th><strong>a</strong></th>" in html
    assert '<th style="text-align:center"><code>b</code></th>' in html
    assert "<td>" not in html


def test_table_followed_by_paragraph() -> None:
    """ends the table at the first line that is not a row."""
    html = convert_markdown("| a |\n|---|\n| 1 |\n\nafter")
    assert html.endswith("</table>\n<p>after</p>\n")
    assert "<td>1</td>" in html


def test_table_without_separator_is_text() -> None:
    """leaves a table without separator row as paragraph text."""
    html = convert_markdown("| a | b |\n| 1 | 2 |")
    assert html == "<p>| a | b |<br>\n| 1 | 2 |</p>\n"


def test_converts_code_block_with_language() -> None:
    """escapes < and > and tags the code block with its language."""
    html = convert_markdown("```js\n<tag>\n```")
    assert html == '<pre><code class="language-js">&lt;tag&gt;</code></pre>\n'


def test_code_block_without_language_is_trimmed() -> None:
    """uses an empty language and trims surrounding whitespace."""
    html = convert_markdown("```\n\n  x = 1  \n\n```")
    assert html == '<pre><code class="language-">x = 1</code></pre>\n'


def test_code_block_content_not_converted() -> None:
    """keeps markdown syntax inside code blocks literal."""
    html = convert_markdown("```\n# not heading\n- item\n**x** & y\n```")
    assert html == (
        '<pre><code class="language-"># not heading\n- item\n**x** & y'
        "</code></pre>\n"
    )


def test_code_block_keeps_form_feed_and_line_separator() -> None:
    """splits lines on \\n only, so other line breaks stay inside the code."""
    html = convert_markdown("```\na\x0cb\u2028c\n```")
    assert html == '<pre><code class="language-">a\x0cb\u2028c</code></pre>\n'


def test_tilde_fence() -> None:
    """accepts ~~~ fences as well as backticks."""
    html = convert_markdown("~~~sh\nls -l\n~~~")
    assert html == '<pre><code class="language-sh">ls -l</code></pre>\n'


def test_unterminated_code_fence_is_text() -> None:
    """leaves an unterminated fence as literal text."""
    assert convert_markdown("```py\nprint(1)") == "<p>```py<br>\nprint(1)</p>\n"


def test_fence_must_start_a_line() -> None:
    """renders backticks opened mid-line as escaped inline code, not a block."""
    html = convert_markdown("Run this:```sh\necho <x>\n```", PLAIN)
    assert "<pre>" not in html
    assert "<code>" in html
    assert "&lt;x&gt;" in html
    assert "<x>" not in html


def test_converts_blockquotes_line_by_line() -> None:
    """wraps each quoted line in its own blockquote."""
    html = convert_markdown("> quoted\n> *again*")
    assert html == (
        "<blockquote>quoted</blockquote>\n"
        "<blockquote><em>again</em></blockquote>\n"
    )


def test_blockquote_ends_paragraph() -> None:
    """starts a blockquote on a line right after paragraph text."""
    html = convert_markdown("text\n> quote")
    assert html == "<p>text</p>\n<blockquote>quote</blockquote>\n"


def test_blockquote_requires_space() -> None:
    """leaves '>text' as paragraph text."""
    assert convert_markdown(">text") == "<p>&gt;text</p>\n"


def test_four_asterisks_stay_literal() -> None:
    """does not turn '****' into emphasis or a rule."""
    html = convert_markdown("****")
    assert html == "<p>****</p>\n"
    assert "<em>" not in html


def test_empty_bold_markers_stay_literal() -> None:
    """leaves markers that enclose nothing but whitespace as text."""
    assert "<strong>" not in convert_markdown("** **")
    assert "<em>" not in convert_markdown("a ** b")


def test_merges_unordered_list_items() -> None:
    """merges consecutive - and * items into one list."""
    html = convert_markdown("- a\n- b\n* c")
    assert html == "<ul>\n<li>a</li>\n<li>b</li>\n<li>c</li>\n</ul>\n"


def test_merges_ordered_list_items_and_drops_numbers() -> None:
    """merges ordered items and ignores the typed numbers."""
    html = convert_markdown("5. five\n9. nine")
    assert html == "<ol>\n<li>five</li>\n<li>nine</li>\n</ol>\n"


def test_merges_ordered_lists_with_different_delimiters() -> None:
    """merges '1.' and '2)' items into one ordered list."""
    html = convert_markdown("1. one\n2) two")
    assert html == "<ol>\n<li>one</li>\n<li>two</li>\n</ol>\n"


def test_merges_list_items_across_blank_lines() -> None:
    """renders loose list items like tight ones."""
    html = convert_markdown("- a\n\n- b")
    assert html == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n"


def test_different_list_kinds_not_merged() -> None:
    """starts a new list when the list kind changes."""
    html = convert_markdown("- a\n1. b")
    assert html == "<ul>\n<li>a</li>\n</ul>\n<ol>\n<li>b</li>\n</ol>\n"


def test_paragraph_between_lists() -> None:
    """splits lists separated by a paragraph."""
    html = convert_markdown("- a\n\ntext\n\n- b")
    assert html == (
        "<ul>\n<li>a</li>\n</ul>\n<p>text</p>\n<ul>\n<li>b</li>\n</ul>\n"
    )


def test_nested_list() -> None:
    """keeps indented items as a nested list."""
    html = convert_markdown("- a\n  - b")
    assert html == "<ul>\n<li>a\n<ul>\n<li>b</li>\n</ul>\n</li>\n</ul>\n"


def test_indented_list_item() -> None:
    """accepts leading whitespace before the marker."""
    html = convert_markdown("  - indented")
    assert html == "<ul>\n<li>indented</li>\n</ul>\n"


def test_list_items_get_inline_formatting() -> None:
    """renders emphasis inside list items."""
    html = convert_markdown("* **x**")
    assert html == "<ul>\n<li><strong>x</strong></li>\n</ul>\n"


def test_paragraphs_split_on_blank_lines() -> None:
    """wraps blocks in <p> and turns single newlines into <br>."""
    html = convert_markdown("First\nline\n\n   \nSecond")
    assert html == "<p>First<br>\nline</p>\n<p>Second</p>\n"


def test_paragraph_before_list() -> None:
    """ends a paragraph where a list starts."""
    html = convert_markdown("Intro:\n- a\n- b")
    assert html == "<p>Intro:</p>\n<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n"


def test_heading_followed_by_text() -> None:
    """keeps text after a heading out of the heading."""
    assert convert_markdown("# T\nbody") == "<h1>T</h1>\n<p>body</p>\n"


def test_block_markup_passes_through() -> None:
    """does not wrap text that already starts with a block tag."""
    html = "<table><tr><td>x</td></tr></table>"
    assert convert_markdown(html).strip() == html


def test_other_markup_is_escaped() -> None:
    """escapes raw HTML that is not structural block markup."""
    html = convert_markdown("<script>alert(1)</script> and <b>x</b>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;" in html


def test_reference_definitions_stay_text() -> None:
    """renders '[a]: url' lines instead of dropping them."""
    assert "[a]: http://x" in convert_markdown("[a]: http://x")


def test_indented_text_is_not_code() -> None:
    """treats four-space indented text as a paragraph."""
    assert convert_markdown("    x = 1") == "<p>x = 1</p>\n"


def test_windows_line_endings() -> None:
    """handles CRLF line endings."""
    assert convert_markdown("# A\r\ntext") == "<h1>A</h1>\n<p>text</p>\n"


def test_markdown_to_html_keeps_math_verbatim() -> None:
    """keeps math spans untouched by emphasis rules."""
    assert markdown_to_html("$a_1 * b_2 * c$") == "<p>$a_1 * b_2 * c$</p>\n"
    assert (
        markdown_to_html("# Energy $E=mc^2$") == "<h1>Energy $E=mc^2$</h1>\n"
    )


def test_markdown_to_html_restores_every_span() -> None:
    """restores math spans placed in different block elements."""
    text = "$$x$$\n\n- $y$\n\n| $z$ | b |\n|---|---|"
    html = markdown_to_html(text)
    assert "$$x$$" in html
    assert "<li>$y$</li>" in html
    assert "<th>$z$</th>" in html
    assert "\u2563" not in html


@pytest.mark.parametrize(
    "text",
    [
        "",
        "# Title\n\nSome **bold** text",
        "- a\n- b\n\n1. c",
        "| a | b |\n|---|---|\n| 1 | 2 |",
        "```py\nif a < b:\n    pass\n```",
        "> quote with [link](http://x)",
    ],
)
def test_shielding_is_noop_without_math(text: str) -> None:
    """renders text without math exactly like the plain converter."""
    assert markdown_to_html(text) == convert_markdown(text)
