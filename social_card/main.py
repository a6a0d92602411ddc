"""
Social Card Entry Point
=======================

Runs the whole pipeline unconditionally: resolve fonts, build the layout
tree, render it and write the PNG. Exits 0 on success and 1 on any failure.
"""

from typing import Optional, Sequence
import asyncio
import sys

from social_card.config.logging import get_logger, setup_logging
from social_card.config.settings import Settings, get_settings
from social_card.core.fonts.resolver import BaseFontSource, FontResolver, default_font_sources
from social_card.core.layout.builder import build_layout_tree
from social_card.core.layout.content import DEFAULT_CARD_CONTENT, load_card_content
from social_card.core.output.writer import OutputWriter
from social_card.core.rendering.orchestrator import RenderOrchestrator
from social_card.models.schemas import CardContent, OutputArtifact

logger = get_logger(__name__)


def load_content(settings: Settings) -> CardContent:
    """Card content from the configured file, or the default card."""
    if settings.content_path is None:
        return DEFAULT_CARD_CONTENT
    return load_card_content(settings.content_path)


async def generate_card(
    settings: Optional[Settings] = None,
    sources: Optional[Sequence[BaseFontSource]] = None,
    orchestrator: Optional[RenderOrchestrator] = None,
) -> OutputArtifact:
    """
    Generate the social card.

    Args:
        settings: Settings override, defaults to the environment settings
        sources: Font sources, defaults to the standard card fonts
        orchestrator: Render orchestrator override

    Returns:
        OutputArtifact of the written image
    """
    settings = settings or get_settings()
    content = load_content(settings)
    root = build_layout_tree(content)

    async with FontResolver(settings) as resolver:
        fonts = await resolver.resolve_all(
            sources if sources is not None else default_font_sources(settings)
        )

    orchestrator = orchestrator or RenderOrchestrator(settings)
    image = await orchestrator.render(root, fonts)

    artifact = OutputWriter(settings.output_path).write(image)
    if content.caption:
        logger.info(content.caption)
    return artifact


def main() -> None:
    """Console script entry point."""
    settings = get_settings()
    setup_logging(settings)
    try:
        asyncio.run(generate_card(settings))
    except Exception:
        logger.exception("Social card generation failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
