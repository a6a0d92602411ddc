"""
HTML Generator
==============

Convert a render request (layout tree plus fonts) into an HTML document.

The document is the vector representation of the card: resolution
independent markup in which every box is a flex container, every style
property maps to one CSS declaration and every font is embedded as a
``@font-face`` data URI, so that rendering needs no further I/O.
"""

from typing import Dict, List, Any, Optional, Union
from pathlib import Path
import base64

import jinja2
from markupsafe import Markup, escape

from social_card.config.logging import get_logger
from social_card.models.schemas import (
    GENERIC_FONT_FAMILIES,
    NodeStyle,
    RenderRequest,
    StyledNode,
    VectorDocument,
)

logger = get_logger(__name__)

# Properties rendered without a unit when given as numbers
UNITLESS_PROPERTIES = {"font_weight", "line_height"}

CSS_PROPERTY_ORDER = [
    "width",
    "height",
    "flex_direction",
    "justify_content",
    "align_items",
    "gap",
    "padding",
    "padding_left",
    "padding_right",
    "margin_top",
    "margin_right",
    "background_color",
    "color",
    "border_radius",
    "border_top",
    "overflow",
    "font_family",
    "font_size",
    "font_weight",
    "font_style",
    "letter_spacing",
    "line_height",
    "text_align",
    "white_space",
]


class HTMLGenerationError(Exception):
    """Exception raised when HTML generation fails."""

    pass


def css_family(family: str) -> str:
    """Quote a font family for CSS unless it is a generic family."""
    if family in GENERIC_FONT_FAMILIES:
        return family
    return f'"{family}"'


def css_value(name: str, value: Union[int, float, str]) -> str:
    """Convert a style value to its CSS form."""
    if hasattr(value, "value"):
        return str(value.value)
    if isinstance(value, (int, float)) and name not in UNITLESS_PROPERTIES:
        return f"{value}px"
    if name == "font_family":
        return css_family(str(value))
    return str(value)


def style_to_css(style: Optional[NodeStyle]) -> str:
    """Convert a NodeStyle to an inline CSS declaration list."""
    if not style:
        return ""

    css_rules: List[str] = []
    for name in CSS_PROPERTY_ORDER:
        value = getattr(style, name)
        if value is None:
            continue
        css_rules.append(f"{name.replace('_', '-')}: {css_value(name, value)}")

    return "; ".join(css_rules)


class CardHTMLGenerator:
    """Jinja2-based generator turning a render request into an HTML document."""

    template_name = "card.html"

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        self.logger: Any = logger.bind(generator="jinja2")
        self._setup_jinja2_environment(template_dir or Path(__file__).parent / "templates")

    def _setup_jinja2_environment(self, template_dir: Path) -> None:
        """Setup Jinja2 template environment."""
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            undefined=jinja2.StrictUndefined,
            enable_async=True,
        )

        self.env.filters["b64encode"] = lambda data: base64.b64encode(data).decode("ascii")
        self.env.filters["css_family"] = lambda family: Markup(css_family(family))
        self.env.globals["render_node"] = self.render_node

    async def generate(self, request: RenderRequest, title: str = "Social Card") -> VectorDocument:
        """
        Generate the HTML document for a render request.

        Args:
            request: Layout tree, canvas and fonts
            title: Document title

        Returns:
            VectorDocument wrapping the markup

        Raises:
            HTMLGenerationError: If template rendering fails
        """
        try:
            template = self.env.get_template(self.template_name)
            context = self._prepare_context(request, title)
            markup = await template.render_async(**context)
        except jinja2.TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            self.logger.error("HTML generation failed", error=error_msg)
            raise HTMLGenerationError(error_msg) from e

        self.logger.debug(
            "HTML generation completed",
            template=self.template_name,
            html_length=len(markup),
            nodes=request.root.node_count(),
        )

        return VectorDocument(
            markup=markup,
            width=request.canvas.width,
            height=request.canvas.height,
            font_families=[font.family for font in request.fonts],
        )

    def _prepare_context(self, request: RenderRequest, title: str) -> Dict[str, Any]:
        """Prepare template rendering context."""
        return {
            "title": title,
            "root": request.root,
            "fonts": request.fonts,
            "width": request.canvas.width,
            "height": request.canvas.height,
            "default_family": request.fonts[0].family if request.fonts else "sans-serif",
        }

    def render_node(self, node: StyledNode) -> Markup:
        """
        Render a layout tree node and its descendants.

        Args:
            node: Node to render

        Returns:
            Markup for the node
        """
        css = style_to_css(node.style)
        style_attr = Markup(' style="{}"').format(css) if css else Markup("")

        if node.is_leaf:
            return Markup('<div data-kind="text"{}>{}</div>').format(
                style_attr, escape(node.content)
            )

        children = Markup("").join(self.render_node(child) for child in node.children)
        return Markup('<div data-kind="container"{}>{}</div>').format(style_attr, children)


async def generate_html(request: RenderRequest) -> VectorDocument:
    """
    Generate the HTML document for a render request.

    Args:
        request: Layout tree, canvas and fonts

    Returns:
        VectorDocument wrapping the markup
    """
    return await CardHTMLGenerator().generate(request)
