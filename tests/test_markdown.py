from __future__ import annotations

from html_mdx.markdown import compose_markdown, custom_taxonomy_section, term_lines
from html_mdx.models import ImageRecord, PostMetadata, TaxonomyTerms, Term


def test_compose_full_document() -> None:
    post = PostMetadata(
        title="Hello   World\n",
        categories=[Term("News", "https://ex.test/c/news")],
        tags=[Term("py", "https://ex.test/t/py")],
        featured_image=ImageRecord("https://ex.test/cover.png", "Cover", ""),
    )
    content = (
        "<p>Body <img src='https://ex.test/a.png' alt='A'></p>"
        "<p><img src='https://ex.test/cover.png' title='Cover title'></p>"
    )

    expected = (
        "title: Hello World\n"
        "\n"
        "---\n"
        "\n"
        "**Category**\n"
        "\n"
        "- [News](https://ex.test/c/news)\n"
        "\n"
        "**Tag**\n"
        "\n"
        "- [py](https://ex.test/t/py)\n"
        "\n"
        "**Images**\n"
        "\n"
        '- ![Cover](https://ex.test/cover.png "Cover title")\n'
        "- ![A](https://ex.test/a.png)\n"
        "\n"
        "---\n"
        "\n"
        "Body ![A](https://ex.test/a.png)\n"
        "\n"
        '![Cover title](https://ex.test/cover.png "Cover title")\n'
    )
    assert compose_markdown(post, content) == expected


def test_compose_minimal_document_uses_placeholders() -> None:
    markdown = compose_markdown(PostMetadata(title="T"), "")
    assert markdown == (
        "title: T\n\n---\n\n**Category**\n\n_(none)_\n\n---\n\n_(no content)_\n"
    )


def test_summary_section_comes_first() -> None:
    post = PostMetadata(title="T", excerpt_html="<p>Short <b>summary</b></p>")
    markdown = compose_markdown(post, "<p>Body</p>")
    assert markdown.startswith("title: T\n\n---\n\n**Summary**\n\nShort **summary**\n\n**Category**")
    assert markdown.endswith("---\n\nBody\n")


def test_blank_summary_is_omitted() -> None:
    post = PostMetadata(title="T", excerpt_html="<p> </p>")
    assert "**Summary**" not in compose_markdown(post, "<p>Body</p>")


def test_term_lines_skip_unusable_links() -> None:
    terms = [
        Term(" Jazz  Age ", "https://ex.test/g/jazz"),
        Term("Bad", "javascript:void(0)"),
        Term("Empty", ""),
    ]
    assert term_lines(terms) == ["- [Jazz Age](https://ex.test/g/jazz)"]


def test_custom_taxonomy_section() -> None:
    taxonomies = [
        TaxonomyTerms("genre", "Genre", [Term("Jazz", "https://ex.test/g/jazz")]),
        TaxonomyTerms("category", "Category", [Term("News", "https://ex.test/c/news")]),
        TaxonomyTerms("mood", "Mood", [Term("x", "javascript:1")]),
        TaxonomyTerms("era", "", [Term("1960s", "/era/60s")]),
    ]
    assert custom_taxonomy_section(taxonomies) == (
        "**Custom Taxonomies**\n\n"
        "**Genre (`genre`)**\n\n- [Jazz](https://ex.test/g/jazz)\n\n"
        "**era (`era`)**\n\n- [1960s](/era/60s)"
    )
    assert custom_taxonomy_section([]) == ""


def test_custom_taxonomies_sit_between_categories_and_tags() -> None:
    post = PostMetadata(
        title="T",
        tags=[Term("t", "/t")],
        taxonomies=[TaxonomyTerms("genre", "Genre", [Term("g", "/g")])],
    )
    markdown = compose_markdown(post, "<p>x</p>")
    assert markdown.index("**Category**") < markdown.index("**Custom Taxonomies**")
    assert markdown.index("**Custom Taxonomies**") < markdown.index("**Tag**")
