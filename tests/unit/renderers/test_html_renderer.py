#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the BBCode to HTML renderer."""

import pytest

from bbtransform.ast import TagNode
from bbtransform.exceptions import InvalidOptionsError
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions
from bbtransform.parsers.bbcode import BBCodeParser
from bbtransform.renderers.html import (
    HtmlRenderer,
    TagRendererRegistry,
    css_color,
    css_font_size,
    default_html_renderers,
    html_parser_options,
    youtube_video_id,
)


def _render(markup: str, **options) -> str:
    doc = BBCodeParser(html_parser_options()).parse(markup)
    return HtmlRenderer(HtmlRendererOptions(**options)).render_to_string(doc)


@pytest.mark.unit
class TestHtmlVocabulary:
    """Tests for the default tag renderers."""

    @pytest.mark.parametrize(
        "markup,expected",
        [
            ("[b]x[/b]", "<strong>x</strong>"),
            ("[i]x[/i]", "<em>x</em>"),
            ("[u]x[/u]", "<u>x</u>"),
            ("[s]x[/s]", "<del>x</del>"),
            ("[sub]x[/sub][sup]y[/sup]", "<sub>x</sub><sup>y</sup>"),
            ("[center]x[/center]", '<div style="text-align: center">x</div>'),
            ("[right]x[/right]", '<div style="text-align: right">x</div>'),
            ("[h2]Title[/h2]", "<h2>Title</h2>"),
            ("[table][tr][td]1[/td][th]2[/th][/tr][/table]", "<table><tr><td>1</td><th>2</th></tr></table>"),
        ],
    )
    def test_simple_elements(self, markup: str, expected: str) -> None:
        """Test tags that map to one HTML element."""
        assert _render(markup) == expected

    def test_nested_example(self) -> None:
        """Test the size/bold example end to end."""
        assert (
            _render('Hello [size="14"][b]World!![/b][/size] Yo.')
            == 'Hello <span style="font-size: 14px"><strong>World!!</strong></span> Yo.'
        )

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("14", '<span style="font-size: 14px">x</span>'),
            ("12pt", '<span style="font-size: 12pt">x</span>'),
            ("150%", '<span style="font-size: 150%">x</span>'),
            ("large", '<span style="font-size: large">x</span>'),
            ("99", "x"),
            ("0", "x"),
            ("14;color:red", "x"),
        ],
    )
    def test_size(self, value: str, expected: str) -> None:
        """Test font sizes and their limits."""
        assert _render(f"[size={value}]x[/size]") == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#ff0000", '<span style="color: #ff0000">x</span>'),
            ("#F00", '<span style="color: #F00">x</span>'),
            ("red", '<span style="color: red">x</span>'),
            ("red;background:url(x)", "x"),
            ("", "x"),
        ],
    )
    def test_color(self, value: str, expected: str) -> None:
        """Test colour values and rejected CSS injection."""
        assert _render(f"[color={value}]x[/color]") == expected

    def test_font(self) -> None:
        """Test font families."""
        assert _render("[font=Arial]x[/font]") == '<span style="font-family: Arial">x</span>'
        assert _render('[font="a;b"]x[/font]') == "x"

    def test_quote(self) -> None:
        """Test quotes with and without an author."""
        assert _render("[quote]hi[/quote]") == "<blockquote>hi</blockquote>"
        assert _render("[quote=Bob]hi[/quote]") == "<blockquote><cite>Bob wrote:</cite>hi</blockquote>"
        assert _render('[quote author="A<B"]hi[/quote]') == (
            "<blockquote><cite>A&lt;B wrote:</cite>hi</blockquote>"
        )

    def test_code_keeps_body_verbatim(self) -> None:
        """Test that code bodies are escaped and never rendered."""
        assert _render("[code=python]if a < b: [b]x[/b][/code]") == (
            '<pre><code class="language-python">if a &lt; b: [b]x[/b]</code></pre>'
        )
        assert _render("[code]x[/code]") == "<pre><code>x</code></pre>"

    def test_noparse(self) -> None:
        """Test that noparse bodies come out as escaped text."""
        assert _render("[noparse][b]<x>[/b][/noparse]") == "[b]&lt;x&gt;[/b]"

    def test_url_with_attribute(self) -> None:
        """Test links whose target is the attribute."""
        assert _render("[url=https://example.com]site[/url]") == (
            '<a href="https://example.com" rel="nofollow">site</a>'
        )

    def test_url_from_body(self) -> None:
        """Test links whose target is the body."""
        assert _render("[url]https://a.com/?a=1&b=2[/url]") == (
            '<a href="https://a.com/?a=1&amp;b=2" rel="nofollow">https://a.com/?a=1&amp;b=2</a>'
        )

    def test_url_attribute_quote_is_escaped(self) -> None:
        """Test that a quote in the target cannot end the href attribute."""
        assert _render('[url=https://a.com/"onmouseover=x]t[/url]') == (
            '<a href="https://a.com/&quot;onmouseover=x" rel="nofollow">t</a>'
        )

    @pytest.mark.parametrize(
        "target",
        ["javascript:alert(1)", "JavaScript:alert(1)", "java\tscript:alert(1)", "vbscript:x", "data:text/html,x"],
    )
    def test_url_dangerous_scheme_dropped(self, target: str) -> None:
        """Test that dangerous link targets leave only the content."""
        assert _render(f"[url={target}]click[/url]") == "click"

    def test_email(self) -> None:
        """Test mailto links and invalid addresses."""
        assert _render("[email]a@b.com[/email]") == '<a href="mailto:a@b.com">a@b.com</a>'
        assert _render("[email=a@b.com]me[/email]") == '<a href="mailto:a@b.com">me</a>'
        assert _render("[email]nope[/email]") == "nope"

    def test_img(self) -> None:
        """Test images with and without dimensions."""
        assert _render("[img]https://x.com/a.png[/img]") == '<img src="https://x.com/a.png" alt="">'
        assert _render("[img=100x50]a.png[/img]") == '<img src="a.png" alt="" width="100" height="50">'
        assert _render('[img width=10 height=20 alt="A pic"]u.png[/img]') == (
            '<img src="u.png" alt="A pic" width="10" height="20">'
        )

    def test_img_dangerous_source(self) -> None:
        """Test that script image sources are not emitted as img."""
        assert "<img" not in _render("[img]javascript:alert(1)[/img]")

    def test_lists(self) -> None:
        """Test unordered and ordered lists with implicit items."""
        assert _render("[list][*]a[*]b[/list]") == "<ul><li>a</li><li>b</li></ul>"
        assert _render("[list=1][*]a[/list]") == "<ol><li>a</li></ol>"
        assert _render("[list=a][*]a[/list]") == '<ol type="a"><li>a</li></ol>'
        assert _render("[list][li]a[/li][/list]") == "<ul><li>a</li></ul>"

    def test_standalone_hr_and_br(self) -> None:
        """Test that hr and br do not swallow following text."""
        assert _render("a[hr]b[br]c") == "a<hr>b<br>c"

    def test_spoiler(self) -> None:
        """Test spoilers with default and custom summaries."""
        assert _render("[spoiler]x[/spoiler]") == '<details class="spoiler"><summary>Spoiler</summary>x</details>'
        assert _render("[spoiler=Plot]x[/spoiler]") == '<details class="spoiler"><summary>Plot</summary>x</details>'

    def test_youtube(self) -> None:
        """Test YouTube embeds from URLs and invalid ids."""
        assert _render("[youtube]https://www.youtube.com/watch?v=dQw4w9WgXcQ[/youtube]") == (
            '<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" width="560" height="315" '
            'frameborder="0" allowfullscreen></iframe>'
        )
        assert _render("[youtube]not a video[/youtube]") == "not a video"

    def test_tag_names_are_case_insensitive(self) -> None:
        """Test that ``[B]`` renders like ``[b]``."""
        assert _render("[B]x[/B]") == "<strong>x</strong>"


@pytest.mark.unit
class TestHtmlEscaping:
    """Tests for escaping of text and literal markup."""

    def test_text_is_escaped(self) -> None:
        """Test that free text cannot inject HTML."""
        assert _render("<script>alert(1)</script> & more") == "&lt;script&gt;alert(1)&lt;/script&gt; &amp; more"

    def test_unknown_tag_literal_is_escaped(self) -> None:
        """Test that preserved unknown tags are escaped like text."""
        assert _render('[foo="<x>"]<y>[/foo]') == '[foo="&lt;x&gt;"]&lt;y&gt;[/foo]'

    def test_no_escape(self) -> None:
        """Test trusted mode."""
        assert _render("[b]<i>[/b]", escape_text=False) == "<strong><i></strong>"

    def test_convert_newlines(self) -> None:
        """Test newline conversion in text."""
        assert _render("a\nb\r\nc", convert_newlines=True) == "a<br>\nb<br>\nc"
        assert _render("a\nb") == "a\nb"


@pytest.mark.unit
class TestHtmlTagSelection:
    """Tests for deciding which tags are rendered."""

    def test_unknown_tags_preserved(self) -> None:
        """Test the default unknown tag mode."""
        assert _render("[foo][b]x[/b][/foo]") == "[foo]<strong>x</strong>[/foo]"

    def test_unknown_tags_stripped(self) -> None:
        """Test stripping unknown tags while keeping their content."""
        assert _render("[foo][b]x[/b][/foo] [:)]", unknown_tag_mode="strip") == "<strong>x</strong> "

    def test_strip_does_not_change_renderer(self) -> None:
        """Test that stripping leaves the renderer's registry untouched."""
        renderer = HtmlRenderer(HtmlRendererOptions(unknown_tag_mode="strip"))
        renderer.render_to_string(BBCodeParser().parse("[foo]x[/foo]"))
        assert "foo" not in renderer.tag_renderers

    def test_keep_tags(self) -> None:
        """Test that kept tags stay literal, case-insensitively."""
        assert _render("[b]x[/b][i]y[/i]", keep_tags={"B"}) == "[b]x[/b]<em>y</em>"

    def test_transform_flag_respected(self) -> None:
        """Test that tags with a cleared flag stay literal."""
        doc = BBCodeParser().parse("[spoiler]x[/spoiler][b]y[/b]")
        doc.walk(TagNode, lambda node: setattr(node, "transform", doc.tag_name(node) != "spoiler"))
        assert HtmlRenderer().render_to_string(doc) == "[spoiler]x[/spoiler]<strong>y</strong>"

    def test_custom_vocabulary(self) -> None:
        """Test a replacement set of tag renderers."""
        renderer = HtmlRenderer(tag_renderers={"B": lambda tag, content: f"<b>{content}</b>"})
        doc = BBCodeParser().parse("[b]x[/b][i]y[/i]")
        assert renderer.render_to_string(doc) == "<b>x</b>[i]y[/i]"

    def test_wrong_options_type(self) -> None:
        """Test that parser options are rejected."""
        with pytest.raises(InvalidOptionsError):
            HtmlRenderer(BBCodeParserOptions())  # type: ignore[arg-type]


@pytest.mark.unit
@pytest.mark.security
class TestHtmlSanitizePass:
    """Tests for the optional bleach post-pass."""

    def test_sanitize_removes_unsafe_markup_from_custom_renderers(self) -> None:
        """Test that custom renderer output is cleaned."""
        registry = default_html_renderers()
        registry["evil"] = lambda tag, content: f'<span onclick="x">{content}</span><script>bad()</script>'
        renderer = HtmlRenderer(HtmlRendererOptions(sanitize_output=True), tag_renderers=registry)
        html = renderer.render_to_string(BBCodeParser().parse("[evil]x[/evil]"))
        assert "onclick" not in html
        assert "<script" not in html
        assert "<span>x</span>" in html

    def test_sanitize_keeps_vocabulary(self) -> None:
        """Test that the default vocabulary survives sanitizing."""
        html = _render("[b]x[/b] [size=14]y[/size] [url=https://a.com]z[/url]", sanitize_output=True)
        assert "<strong>x</strong>" in html
        assert "font-size" in html
        assert 'href="https://a.com"' in html


@pytest.mark.unit
class TestTagRendererRegistry:
    """Tests for the case-insensitive registry."""

    def test_register_decorator(self) -> None:
        """Test registering one function for several names."""
        registry = TagRendererRegistry()

        @registry.register("Spoiler", "hide")
        def render(tag, content):
            return content

        assert registry["SPOILER"] is render
        assert registry["hide"] is render
        assert sorted(registry) == ["hide", "spoiler"]
        assert len(registry) == 2

    def test_rejects_non_callables(self) -> None:
        """Test that renderers must be callable."""
        with pytest.raises(TypeError):
            TagRendererRegistry()["b"] = "strong"  # type: ignore[assignment]

    def test_copy_is_independent(self) -> None:
        """Test that copies do not share entries."""
        registry = default_html_renderers()
        copy = registry.copy()
        del copy["B"]
        assert "b" in registry
        assert "b" not in copy

    def test_default_vocabulary_is_fresh(self) -> None:
        """Test that each call returns a new registry."""
        assert default_html_renderers() is not default_html_renderers()


@pytest.mark.unit
class TestValueHelpers:
    """Tests for value validation helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [("14", "14px"), (" 14PX ", "14px"), ("72", "72px"), ("73", None), ("500%", "500%"), ("x-large", "x-large")],
    )
    def test_css_font_size(self, value: str, expected) -> None:
        """Test size normalisation."""
        assert css_font_size(value) == expected

    def test_css_font_size_empty(self) -> None:
        """Test missing sizes."""
        assert css_font_size(None) is None
        assert css_font_size("") is None

    def test_css_color(self) -> None:
        """Test colour validation."""
        assert css_color(" blue ") == "blue"
        assert css_color("#12345") is None
        assert css_color("expression(x)") is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/watch?feature=x&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("nope", None),
        ],
    )
    def test_youtube_video_id(self, value: str, expected) -> None:
        """Test video id extraction."""
        assert youtube_video_id(value) == expected

    def test_html_parser_options_keeps_existing(self) -> None:
        """Test that HTML parsing keeps caller standalone tags."""
        options = html_parser_options(BBCodeParserOptions(standalone_tags={":)"}))
        assert options.standalone_tags == frozenset({":)", "hr", "br"})
