"""
Render Orchestrator
===================

Combines a layout tree and a resolved font set into a finished PNG:
validates the fonts against the tree, generates the card document and
rasterizes it. Any failure aborts the render; nothing partial is returned.
"""

from typing import Any, Iterable, Optional, Sequence, Set, Tuple

from social_card.config.logging import get_logger
from social_card.config.settings import Settings, get_settings
from social_card.core.rendering.html_generator import CardHTMLGenerator
from social_card.core.rendering.png_generator import PlaywrightRasterizer
from social_card.models.schemas import (
    GENERIC_FONT_FAMILIES,
    Canvas,
    FontStyle,
    RasterImage,
    RenderRequest,
    ResolvedFont,
    StyledNode,
)

logger = get_logger(__name__)


class DuplicateFontError(Exception):
    """Exception raised when a font set contains the same face twice."""

    pass


class MissingFontError(Exception):
    """Exception raised when the layout tree references an unresolved font family."""

    def __init__(self, family: str) -> None:
        super().__init__(f"Font family '{family}' is referenced by the layout but was not resolved")
        self.family = family


def validate_font_set(fonts: Iterable[ResolvedFont]) -> None:
    """
    Ensure family, weight and style identify each font uniquely.

    Raises:
        DuplicateFontError: If two fonts share the same identity
    """
    seen: Set[Tuple[str, int, FontStyle]] = set()
    for font in fonts:
        if font.key in seen:
            raise DuplicateFontError(
                f"Duplicate font: {font.family} {font.weight} {font.style.value}"
            )
        seen.add(font.key)


def validate_font_references(root: StyledNode, fonts: Iterable[ResolvedFont]) -> None:
    """
    Ensure every family referenced by the tree is in the font set.

    Generic CSS families are accepted as the system default fallback.

    Raises:
        MissingFontError: Naming the first unresolved family
    """
    available = {font.family for font in fonts}
    for family in root.font_families():
        if family not in available and family not in GENERIC_FONT_FAMILIES:
            raise MissingFontError(family)


class RenderOrchestrator:
    """Drives the layout tree → document → PNG sequence."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        html_generator: Optional[CardHTMLGenerator] = None,
        rasterizer: Optional[PlaywrightRasterizer] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.html_generator = html_generator or CardHTMLGenerator()
        self.rasterizer = rasterizer or PlaywrightRasterizer(self.settings)
        self.logger: Any = logger.bind(component="orchestrator")

    @property
    def canvas(self) -> Canvas:
        return Canvas(width=self.settings.canvas_width, height=self.settings.canvas_height)

    async def render(self, root: StyledNode, fonts: Sequence[ResolvedFont]) -> RasterImage:
        """
        Render a layout tree with the given fonts.

        Args:
            root: Root of the layout tree
            fonts: Resolved fonts available to text nodes

        Returns:
            RasterImage with exactly the canvas dimensions

        Raises:
            DuplicateFontError: If the font set has duplicate identities
            MissingFontError: If the tree references an unresolved family
            HTMLGenerationError: If the document cannot be generated
            RasterizationError: If the document cannot be rasterized
        """
        validate_font_set(fonts)
        validate_font_references(root, fonts)

        request = RenderRequest(root=root, canvas=self.canvas, fonts=tuple(fonts))
        self.logger.info(
            "Rendering card",
            canvas=request.canvas.label,
            fonts=[font.family for font in request.fonts],
            nodes=root.node_count(),
        )

        document = await self.html_generator.generate(request)
        return await self.rasterizer.rasterize(document)
