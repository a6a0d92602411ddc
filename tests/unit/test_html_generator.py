"""
Unit Tests for HTML Generator
=============================

Unit tests for style conversion, node rendering and font embedding.
"""

import base64
import pytest
from pathlib import Path

from social_card.core.layout.builder import box, text
from social_card.core.rendering.html_generator import (
    CardHTMLGenerator,
    HTMLGenerationError,
    css_family,
    css_value,
    generate_html,
    style_to_css,
)
from social_card.models.schemas import Canvas, NodeStyle, RenderRequest, VectorDocument


class TestCSSConversion:
    """Test style record to CSS conversion."""

    @pytest.mark.parametrize(
        "name,value,expected",
        [
            ("width", 40, "40px"),
            ("gap", 2.5, "2.5px"),
            ("width", "40%", "40%"),
            ("margin_top", "auto", "auto"),
            ("font_weight", 700, "700"),
            ("line_height", 1.4, "1.4"),
        ],
    )
    def test_css_value(self, name, value, expected):
        assert css_value(name, value) == expected

    def test_font_family_is_quoted(self):
        assert css_value("font_family", "Crimson Text") == '"Crimson Text"'

    def test_generic_family_is_not_quoted(self):
        assert css_family("monospace") == "monospace"

    def test_enum_values_use_their_css_keyword(self):
        style = NodeStyle(flex_direction="column", font_style="italic")
        assert style_to_css(style) == "flex-direction: column; font-style: italic"

    def test_declarations_follow_fixed_order(self):
        style = NodeStyle(color="#fff", width=10, font_size=12, padding="2em")
        assert style_to_css(style) == "width: 10px; padding: 2em; color: #fff; font-size: 12px"

    def test_empty_style(self):
        assert style_to_css(NodeStyle()) == ""
        assert style_to_css(None) == ""


class TestCardHTMLGenerator:
    """Test HTML document generation."""

    @pytest.fixture
    def generator(self):
        return CardHTMLGenerator()

    @pytest.fixture
    def request_(self, simple_tree, resolved_fonts):
        return RenderRequest(root=simple_tree, canvas=Canvas(), fonts=tuple(resolved_fonts))

    @pytest.mark.asyncio
    async def test_generate_returns_vector_document(self, generator, request_):
        document = await generator.generate(request_)

        assert isinstance(document, VectorDocument)
        assert document.media_type == "text/html"
        assert (document.width, document.height) == (1200, 630)
        assert document.font_families == ["Crimson Text", "Lora", "JetBrains Mono"]
        assert document.markup.startswith("<!DOCTYPE html>")

    @pytest.mark.asyncio
    async def test_fonts_are_embedded_as_data_uris(self, generator, request_, resolved_fonts):
        markup = (await generator.generate(request_)).markup

        assert markup.count("@font-face") == 3
        for font in resolved_fonts:
            encoded = base64.b64encode(font.data).decode("ascii")
            assert f"data:font/ttf;base64,{encoded}" in markup
        assert 'font-family: "Crimson Text";\n  font-weight: 700;' in markup

    @pytest.mark.asyncio
    async def test_canvas_dimensions_are_fixed(self, generator, simple_tree):
        request = RenderRequest(root=simple_tree, canvas=Canvas(width=600, height=315))
        markup = (await generator.generate(request)).markup

        assert "width: 600px; height: 315px" in markup

    @pytest.mark.asyncio
    async def test_first_font_is_body_default(self, generator, request_):
        markup = (await generator.generate(request_)).markup
        assert 'body { font-family: "Crimson Text"; }' in markup

    @pytest.mark.asyncio
    async def test_without_fonts_body_uses_generic_family(self, generator, simple_tree):
        markup = (await generator.generate(RenderRequest(root=simple_tree))).markup

        assert "@font-face" not in markup
        assert "body { font-family: sans-serif; }" in markup

    @pytest.mark.asyncio
    async def test_tree_is_rendered_in_order(self, generator, request_):
        markup = (await generator.generate(request_)).markup

        assert markup.count('data-kind="container"') == 1
        assert markup.count('data-kind="text"') == 2
        assert markup.index(">Hello</div>") < markup.index(">World</div>")

    @pytest.mark.asyncio
    async def test_generate_html_helper(self, request_):
        document = await generate_html(request_)
        assert "card-canvas" in document.markup

    @pytest.mark.asyncio
    async def test_missing_template_raises(self, tmp_path: Path, request_):
        generator = CardHTMLGenerator(template_dir=tmp_path)

        with pytest.raises(HTMLGenerationError, match="Template rendering failed"):
            await generator.generate(request_)


class TestRenderNode:
    """Test rendering of individual nodes."""

    @pytest.fixture
    def generator(self):
        return CardHTMLGenerator()

    def test_text_content_is_escaped(self, generator):
        markup = generator.render_node(text("<b>Result<()> & more</b>"))
        assert "&lt;b&gt;Result&lt;()&gt; &amp; more&lt;/b&gt;" in markup
        assert "<b>" not in markup

    def test_style_attribute(self, generator):
        markup = generator.render_node(text("x", color="#E5E5E5", font_size=12))
        assert markup == '<div data-kind="text" style="color: #E5E5E5; font-size: 12px">x</div>'

    def test_font_family_quotes_are_attribute_safe(self, generator):
        markup = generator.render_node(text("x", font_family="Lora"))
        assert 'style="font-family: &#34;Lora&#34;"' in markup

    def test_unstyled_container_has_no_style_attribute(self, generator):
        assert generator.render_node(box()) == '<div data-kind="container"></div>'

    def test_whitespace_is_preserved(self, generator):
        markup = generator.render_node(text("    pub fn", white_space="pre"))
        assert ">    pub fn</div>" in markup
        assert "white-space: pre" in markup

    def test_nested_containers(self, generator):
        markup = generator.render_node(box(box(text("a")), text("b")))
        assert markup == (
            '<div data-kind="container"><div data-kind="container">'
            '<div data-kind="text">a</div></div><div data-kind="text">b</div></div>'
        )
