"""
Layout Tree Builder
===================

Declarative construction of the social card layout tree.

The card is a fixed two-column composition: an information panel on the
left and a simulated terminal application window on the right. Only the
leaves are data driven (CardContent); structure, palette and typography
are fixed. Every container lays out its children along a single axis,
flexbox style, with sizes given in pixels or as percentages of the
parent's content box.
"""

from typing import Any, Dict, Optional

from social_card.config.logging import get_logger
from social_card.core.layout.content import DEFAULT_CARD_CONTENT
from social_card.models.schemas import (
    CardContent,
    CodeLine,
    NodeKind,
    NodeStyle,
    StyledNode,
    TextLine,
    UseCase,
)

logger = get_logger(__name__)

TITLE_FONT = "Crimson Text"
BODY_FONT = "Lora"
MONO_FONT = "JetBrains Mono"


class Palette:
    """Fixed colors of the card."""

    BACKGROUND = "#0C0C0F"
    TEXT = "#E5E5E5"
    MUTED = "#A0A0A0"
    ACCENT = "#61AFEF"
    DIM = "#565F89"
    FOOTER = "#4B5263"
    WINDOW = "#1A1B26"
    SIDEBAR = "#16161E"
    GUTTER = "#3B4261"
    META = "#9AA5CE"


def box(*children: StyledNode, **style: Any) -> StyledNode:
    """Create a container node laying out ``children`` with the given style."""
    return StyledNode(kind=NodeKind.CONTAINER, style=NodeStyle(**style), children=children)


def text(content: str, **style: Any) -> StyledNode:
    """Create a text leaf with the given style."""
    return StyledNode(kind=NodeKind.TEXT, style=NodeStyle(**style), content=content)


class SocialCardBuilder:
    """Builds the layout tree of the social card from static content."""

    def __init__(self, content: CardContent) -> None:
        self.content = content
        self.logger: Any = logger.bind(component="layout_builder")

    def build(self) -> StyledNode:
        """
        Build the complete layout tree.

        Returns:
            Root StyledNode filling the canvas
        """
        root = box(
            self._info_panel(),
            self._window_panel(),
            width="100%",
            height="100%",
            background_color=Palette.BACKGROUND,
        )
        self.logger.debug("Layout tree built", nodes=root.node_count())
        return root

    # Left column

    def _info_panel(self) -> StyledNode:
        return box(
            text(
                self.content.title,
                font_size=76,
                font_weight=700,
                font_family=TITLE_FONT,
                color=Palette.TEXT,
                letter_spacing="-0.02em",
            ),
            text(
                self.content.tagline,
                font_size=24,
                font_family=BODY_FONT,
                color=Palette.MUTED,
                line_height=1.5,
            ),
            text(
                self.content.subcopy,
                font_size=18,
                font_family=BODY_FONT,
                color=Palette.ACCENT,
                font_style="italic",
            ),
            self._use_cases(),
            text(
                self.content.repository_url,
                font_size=16,
                font_family=BODY_FONT,
                color=Palette.FOOTER,
                margin_top="auto",
            ),
            width="40%",
            height="100%",
            flex_direction="column",
            justify_content="center",
            align_items="flex-start",
            padding=40,
            gap=30,
        )

    def _use_cases(self) -> StyledNode:
        return box(
            *(self._use_case(use_case) for use_case in self.content.use_cases),
            flex_direction="column",
            gap=6,
            margin_top=30,
        )

    def _use_case(self, use_case: UseCase) -> StyledNode:
        return box(
            text(use_case.label, color=use_case.color),
            text(use_case.description, color=Palette.DIM),
            font_size=16,
            font_family=BODY_FONT,
            gap=6,
        )

    # Right column

    def _window_panel(self) -> StyledNode:
        window = box(
            box(self._file_tree(), self._editor(), height="75%"),
            box(
                self._commit_meta(),
                self._terminal(),
                height="25%",
                border_top=f"1px solid {Palette.GUTTER}",
            ),
            width="100%",
            height="100%",
            background_color=Palette.WINDOW,
            border_radius=8,
            overflow="hidden",
            flex_direction="column",
        )
        return box(
            window,
            width="60%",
            height="100%",
            align_items="center",
            justify_content="center",
            padding=30,
            background_color=Palette.BACKGROUND,
        )

    def _file_tree(self) -> StyledNode:
        return box(
            *(self._line(entry) for entry in self.content.file_tree),
            width="25%",
            background_color=Palette.SIDEBAR,
            padding=15,
            flex_direction="column",
            gap=4,
            font_family=MONO_FONT,
            font_size=11,
            color=Palette.DIM,
        )

    def _editor(self) -> StyledNode:
        return box(
            *(self._code_line(line) for line in self.content.code_lines),
            width="75%",
            background_color=Palette.WINDOW,
            padding=15,
            flex_direction="column",
            gap=1,
            font_family=MONO_FONT,
            font_size=11,
        )

    def _code_line(self, line: CodeLine) -> StyledNode:
        return box(
            text(
                line.number,
                color=Palette.GUTTER,
                margin_right=12,
                width=30,
                text_align="right",
                font_size=10,
            ),
            text(line.code, color=line.color, white_space="pre"),
            background_color=line.background or "transparent",
            padding_left=4,
            padding_right=4,
        )

    def _commit_meta(self) -> StyledNode:
        return box(
            *(self._line(entry) for entry in self.content.commit),
            width="25%",
            background_color=Palette.SIDEBAR,
            padding=15,
            flex_direction="column",
            gap=6,
            font_family=MONO_FONT,
            font_size=10,
            color=Palette.META,
        )

    def _terminal(self) -> StyledNode:
        return box(
            *(self._line(entry) for entry in self.content.terminal),
            width="75%",
            background_color=Palette.WINDOW,
            padding=15,
            flex_direction="column",
            gap=3,
            font_family=MONO_FONT,
            font_size=10,
            color=Palette.DIM,
        )

    def _line(self, line: TextLine) -> StyledNode:
        style: Dict[str, Any] = {"color": line.color}
        if line.indent:
            style["padding_left"] = 10
        if line.font_size is not None:
            style["font_size"] = line.font_size
        if line.margin_top is not None:
            style["margin_top"] = line.margin_top
        return text(line.text, **style)


def build_layout_tree(content: Optional[CardContent] = None) -> StyledNode:
    """
    Build the card layout tree.

    Args:
        content: Card content, defaults to the gitlogue card

    Returns:
        Root of the layout tree
    """
    return SocialCardBuilder(content or DEFAULT_CARD_CONTENT).build()
