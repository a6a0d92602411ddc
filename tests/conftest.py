"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, fonts, layout trees and mock collaborators.
"""

import pytest
from pathlib import Path
from typing import List

from pydantic_settings import SettingsConfigDict

from social_card.config.settings import Settings
from social_card.core.layout.builder import box, build_layout_tree, text
from social_card.core.layout.content import DEFAULT_CARD_CONTENT
from social_card.models.schemas import CardContent, FontSpec, ResolvedFont, StyledNode

from tests.utils.data_generators import FontDataGenerator


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    __test__ = False

    environment: str = "testing"
    log_level: str = "DEBUG"
    playwright_headless: bool = True
    fetch_timeout: float = 5.0

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="OGP_TEST_")


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    """Destination of the rendered card inside a temporary directory."""
    return tmp_path / "docs" / "assets" / "ogp.png"


@pytest.fixture
def mono_font_file(tmp_path: Path) -> Path:
    """A local monospaced font file."""
    path = tmp_path / "fonts" / "JetBrainsMono-Regular.ttf"
    path.parent.mkdir(parents=True)
    path.write_bytes(FontDataGenerator.ttf_bytes("JetBrains Mono"))
    return path


@pytest.fixture
def test_settings(output_path: Path, mono_font_file: Path) -> TestSettings:
    """Test settings fixture."""
    return TestSettings(output_path=output_path, mono_font_path=mono_font_file)


@pytest.fixture
def card_content() -> CardContent:
    """Default gitlogue card content."""
    return DEFAULT_CARD_CONTENT


@pytest.fixture
def card_tree(card_content: CardContent) -> StyledNode:
    """Layout tree of the default card."""
    return build_layout_tree(card_content)


@pytest.fixture
def resolved_fonts() -> List[ResolvedFont]:
    """The three fonts of the default card."""
    specs = [
        FontSpec(family="Crimson Text", weight=700),
        FontSpec(family="Lora", weight=400),
        FontSpec(family="JetBrains Mono", weight=400),
    ]
    return [
        ResolvedFont.from_spec(spec, FontDataGenerator.ttf_bytes(spec.family)) for spec in specs
    ]


@pytest.fixture
def simple_tree() -> StyledNode:
    """A small two-level tree using a single font family."""
    return box(
        text("Hello", font_family="Lora", font_size=24, color="#E5E5E5"),
        text("World", font_family="Lora", font_style="italic"),
        width="100%",
        height="100%",
        flex_direction="column",
        gap=8,
        background_color="#0C0C0F",
    )
