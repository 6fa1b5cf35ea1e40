from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from html_mdx.config import MAX_DEPTH_ENV, ConvertConfig, recursion_safe_depth
from html_mdx.converter import MarkdownConverter, html_to_markdown


@pytest.mark.parametrize("html", ["<h2></h2>", "<h2>   </h2>", "<h2><b> </b></h2>"])
def test_empty_heading_is_suppressed(convert_first, html: str) -> None:
    assert convert_first(html) == ""


def test_heading_block_spacing(convert_first) -> None:
    assert convert_first("<h2>Title</h2>") == "\n\n## Title\n\n"
    assert convert_first("<h6> Deep  title </h6>") == "\n\n###### Deep title\n\n"


def test_document_output_is_trimmed() -> None:
    assert html_to_markdown("<h2>Title</h2>") == "## Title"


def test_link_falls_back_to_href() -> None:
    assert html_to_markdown('<a href="https://x.test"></a>') == "[https://x.test](https://x.test)"


def test_link_without_href_emits_text() -> None:
    assert html_to_markdown("<a>text only</a>") == "text only"


def test_link_with_inline_markup() -> None:
    assert html_to_markdown('<a href="/x"><em>hi</em></a>') == "[*hi*](/x)"


def test_link_with_unsafe_scheme_degrades_to_text() -> None:
    assert html_to_markdown('<a href="javascript:alert(1)">click</a>') == "click"


def test_paragraph_with_emphasis() -> None:
    html = "<p>Hello <strong>bold</strong> and <em>it</em> or <b>b</b><i>i</i></p>"
    assert html_to_markdown(html) == "Hello **bold** and *it* or **b***i*"


def test_empty_emphasis_is_suppressed() -> None:
    assert html_to_markdown("<p>a<b> </b>b<em></em></p>") == "ab"


def test_line_break() -> None:
    assert html_to_markdown("<p>one<br>two</p>") == "one  \ntwo"


def test_inline_code_escapes_backticks() -> None:
    assert html_to_markdown("<p>Use <code>a`b</code></p>") == "Use `a\\`b`"


def test_inline_code_uses_raw_text() -> None:
    assert html_to_markdown("<code> <b>x</b>  y </code>") == "`x  y`"


def test_preformatted_block_keeps_text_verbatim() -> None:
    html = "<pre>line1\n  line2 <b>bold</b>\n\n</pre>"
    assert html_to_markdown(html) == "```\nline1\n  line2 bold\n```"


def test_text_whitespace_and_entities() -> None:
    assert html_to_markdown("<p>a\n\n   b &amp; c&nbsp;d</p>") == "a b & c d"


def test_blockquote_prefixes_each_line() -> None:
    html = "<blockquote><p>one</p><p>two</p></blockquote>"
    assert html_to_markdown(html) == "> one\n> two"


def test_empty_blockquote_is_suppressed() -> None:
    assert html_to_markdown("<blockquote> <p></p> </blockquote>") == ""


def test_horizontal_rule_between_paragraphs() -> None:
    assert html_to_markdown("<p>a</p><hr><p>b</p>") == "a\n\n---\n\nb"


def test_script_and_style_are_dropped() -> None:
    html = '<p>x</p><script>var a = "<p>";</script><style>p { color: red }</style>'
    assert html_to_markdown(html) == "x"


def test_unknown_elements_are_transparent() -> None:
    assert html_to_markdown("<div><span>a</span> <section>b</section></div>") == "a b"


def test_comments_are_ignored() -> None:
    assert html_to_markdown("<p>a<!-- hidden -->b</p>") == "ab"


def test_image_rendering() -> None:
    assert html_to_markdown('<img src="/a.png" alt="A">') == "![A](/a.png)"
    assert html_to_markdown('<img alt="no source">') == ""


def test_full_document_uses_body() -> None:
    html = "<html><head><title>T</title></head><body><p>x</p></body></html>"
    assert html_to_markdown(html) == "x"


@pytest.mark.parametrize("html", [None, "", "   \n "])
def test_blank_input_returns_empty_string(html) -> None:
    assert html_to_markdown(html) == ""


def test_missing_parser_falls_back_to_stripped_text() -> None:
    config = ConvertConfig(parser="no-such-parser")
    html = "<p>Hello <b>world</b></p><script>x()</script>"
    assert html_to_markdown(html, config) == "Hello world"


def test_never_emits_more_than_one_blank_line() -> None:
    html = (
        "<div><p>a</p>\n\n\n<p></p> <blockquote><p>q</p></blockquote>"
        "<ul><li>x</li></ul><table><tr><td>t</td></tr></table><hr><h1>h</h1></div>"
        "<pre>code\n\n\n\nmore</pre>"
    )
    output = html_to_markdown(html)
    assert "\n\n\n" not in output
    assert output.startswith("a\n\n> q\n\n- x\n\n| t |")


def test_depth_guard_truncates_deep_subtrees() -> None:
    html = "<div>" * 6 + "deep" + "</div>" * 6 + "<p>shallow</p>"
    soup = BeautifulSoup(html, "html.parser")
    converter = MarkdownConverter(ConvertConfig(max_depth=5))
    assert converter.convert_document(soup) == "shallow"
    assert converter.truncated is True


def test_depth_guard_handles_pathological_nesting() -> None:
    html = "<div>" * 2000 + "deep" + "</div>" * 2000 + "<p>after</p>"
    assert html_to_markdown(html) == "after"


def test_nesting_within_limit_is_converted() -> None:
    soup = BeautifulSoup("<div><div><p>ok</p></div></div>", "html.parser")
    converter = MarkdownConverter(ConvertConfig(max_depth=5))
    assert converter.convert_document(soup) == "ok"
    assert converter.truncated is False


def test_large_configured_depth_does_not_overflow_the_stack() -> None:
    html = "<div>" * 400 + "deep" + "</div>" * 400 + "<p>after</p>"
    assert html_to_markdown(html, ConvertConfig(max_depth=400)) == "after"


def test_deep_inline_markup_with_env_depth(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(MAX_DEPTH_ENV, "5000")
    html = "<b>" * 2000 + "x" + "</b>" * 2000
    assert html_to_markdown(html, ConvertConfig.from_env()) == ""


def test_mutated_config_is_still_capped() -> None:
    config = ConvertConfig()
    config.max_depth = 1_000_000
    converter = MarkdownConverter(config)
    assert converter.max_depth == recursion_safe_depth()


def test_recursion_error_falls_back_to_plain_text(monkeypatch: pytest.MonkeyPatch) -> None:
    def overflow(self, root):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(MarkdownConverter, "convert_document", overflow)
    assert html_to_markdown("<p>Hello <b>world</b></p><script>x()</script>") == "Hello world"
