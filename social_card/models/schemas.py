"""
Pydantic Models and Schemas
===========================

Core data models for the layout tree, fonts, render requests and artifacts.
Tree and font models are frozen: they are built once per render and never
mutated afterwards.
"""

from typing import Optional, List, Dict, Any, Union, Tuple, Iterator, FrozenSet
from enum import Enum
from pathlib import Path
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# CSS generic families are always available and need no font data
GENERIC_FONT_FAMILIES: FrozenSet[str] = frozenset(
    {"serif", "sans-serif", "monospace", "system-ui"}
)

_LENGTH_PATTERN = re.compile(r"^-?\d+(\.\d+)?(px|%|em)?$")
_FAMILY_PATTERN = re.compile(r"^[A-Za-z0-9 _-]+$")

Length = Union[int, float, str]


# Enums
class NodeKind(str, Enum):
    """Layout tree node variants."""
    CONTAINER = "container"
    TEXT = "text"


class FlexDirection(str, Enum):
    """Main axis of a container."""
    ROW = "row"
    COLUMN = "column"


class FontStyle(str, Enum):
    """Font style of a face."""
    NORMAL = "normal"
    ITALIC = "italic"


def _check_length(value: Optional[Length]) -> Optional[Length]:
    if value is None or isinstance(value, (int, float)):
        return value
    if value == "auto" or _LENGTH_PATTERN.match(value):
        return value
    raise ValueError(f"Invalid length '{value}': expected a number, 'Npx', 'N%', 'Nem' or 'auto'")


def _check_family(value: str) -> str:
    if not _FAMILY_PATTERN.match(value):
        raise ValueError(f"Invalid font family name: {value!r}")
    return value


# Layout Tree Models
class NodeStyle(BaseModel):
    """Layout and typography properties of a layout tree node.

    Numbers are pixels. String lengths may be ``"N%"`` (of the parent's
    content box), ``"Npx"``, ``"Nem"`` or ``"auto"``.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    # Sizing
    width: Optional[Length] = None
    height: Optional[Length] = None

    # Flex layout
    flex_direction: Optional[FlexDirection] = Field(None, alias="flexDirection")
    justify_content: Optional[str] = Field(None, alias="justifyContent")
    align_items: Optional[str] = Field(None, alias="alignItems")
    gap: Optional[Length] = None

    # Spacing
    padding: Optional[Length] = None
    padding_left: Optional[Length] = Field(None, alias="paddingLeft")
    padding_right: Optional[Length] = Field(None, alias="paddingRight")
    margin_top: Optional[Length] = Field(None, alias="marginTop")
    margin_right: Optional[Length] = Field(None, alias="marginRight")

    # Colors and decoration
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    color: Optional[str] = None
    border_radius: Optional[Length] = Field(None, alias="borderRadius")
    border_top: Optional[str] = Field(None, alias="borderTop")
    overflow: Optional[str] = None

    # Typography
    font_family: Optional[str] = Field(None, alias="fontFamily")
    font_size: Optional[Length] = Field(None, alias="fontSize")
    font_weight: Optional[int] = Field(None, alias="fontWeight", ge=100, le=900)
    font_style: Optional[FontStyle] = Field(None, alias="fontStyle")
    letter_spacing: Optional[str] = Field(None, alias="letterSpacing")
    line_height: Optional[float] = Field(None, alias="lineHeight", gt=0)
    text_align: Optional[str] = Field(None, alias="textAlign")
    white_space: Optional[str] = Field(None, alias="whiteSpace")

    @field_validator(
        "width", "height", "gap", "padding", "padding_left", "padding_right",
        "margin_top", "margin_right", "border_radius", "font_size",
    )
    @classmethod
    def validate_length(cls, v: Optional[Length]) -> Optional[Length]:
        """Validate CSS length values."""
        return _check_length(v)

    @field_validator("font_family")
    @classmethod
    def validate_font_family(cls, v: Optional[str]) -> Optional[str]:
        """Validate font family names."""
        return _check_family(v) if v is not None else v


class StyledNode(BaseModel):
    """A node of the layout tree: a container of children or a text leaf."""
    model_config = ConfigDict(frozen=True)

    kind: NodeKind = Field(..., description="Node variant")
    style: NodeStyle = Field(default_factory=NodeStyle, description="Node style")
    children: Tuple["StyledNode", ...] = Field(default=(), description="Ordered child nodes")
    content: Optional[str] = Field(None, description="Literal text (text leaves only)")

    @model_validator(mode="after")
    def validate_shape(self) -> "StyledNode":
        """A text leaf has content and no children; a container has no content."""
        if self.kind is NodeKind.TEXT:
            if self.content is None:
                raise ValueError("Text node requires content")
            if self.children:
                raise ValueError("Text node cannot have children")
        elif self.content is not None:
            raise ValueError("Container node cannot have text content")
        return self

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.TEXT

    def walk(self) -> Iterator["StyledNode"]:
        """Iterate over this node and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def font_families(self) -> List[str]:
        """Font families referenced anywhere in the subtree, in first-use order."""
        families: List[str] = []
        for node in self.walk():
            family = node.style.font_family
            if family is not None and family not in families:
                families.append(family)
        return families


StyledNode.model_rebuild()


# Font Models
class FontSpec(BaseModel):
    """Identity of a requested font face."""
    model_config = ConfigDict(frozen=True)

    family: str = Field(..., min_length=1, description="Font family name")
    weight: int = Field(400, ge=100, le=900, description="Registered font weight")
    style: FontStyle = Field(FontStyle.NORMAL, description="Registered font style")

    @field_validator("family")
    @classmethod
    def validate_family(cls, v: str) -> str:
        """Validate font family name."""
        return _check_family(v)

    @property
    def key(self) -> Tuple[str, int, FontStyle]:
        return (self.family, self.weight, self.style)


class ResolvedFont(FontSpec):
    """Binary font data ready for embedding, plus its identity."""

    data: bytes = Field(..., repr=False, exclude=True, description="Raw TrueType data")

    @classmethod
    def from_spec(cls, spec: FontSpec, data: bytes) -> "ResolvedFont":
        return cls(family=spec.family, weight=spec.weight, style=spec.style, data=data)


# Rendering Models
class Canvas(BaseModel):
    """Fixed pixel dimensions of one render."""
    model_config = ConfigDict(frozen=True)

    width: int = Field(1200, gt=0, le=4000, description="Canvas width in pixels")
    height: int = Field(630, gt=0, le=4000, description="Canvas height in pixels")

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


class RenderRequest(BaseModel):
    """Bundle submitted to the vector layout engine."""
    model_config = ConfigDict(frozen=True)

    root: StyledNode = Field(..., description="Root of the layout tree")
    canvas: Canvas = Field(default_factory=Canvas, description="Output dimensions")
    fonts: Tuple[ResolvedFont, ...] = Field(default=(), description="Embedded fonts")


class VectorDocument(BaseModel):
    """Resolution independent markup produced from a render request."""
    markup: str = Field(..., description="Document markup")
    media_type: str = Field("text/html", description="Markup media type")
    width: int = Field(..., gt=0, description="Canvas width in pixels")
    height: int = Field(..., gt=0, description="Canvas height in pixels")
    font_families: List[str] = Field(default_factory=list, description="Embedded families")


class RasterImage(BaseModel):
    """Result of rasterizing a vector document."""
    png_data: bytes = Field(..., repr=False, exclude=True, description="PNG binary data")
    width: int = Field(..., description="Image width")
    height: int = Field(..., description="Image height")
    file_size: int = Field(..., description="File size in bytes")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Generation metadata")


class OutputArtifact(BaseModel):
    """The persisted card image."""
    data: bytes = Field(..., repr=False, exclude=True, description="Written image bytes")
    path: Path = Field(..., description="Destination path")
    width: int = Field(..., description="Image width")
    height: int = Field(..., description="Image height")

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


# Card Content Models
class UseCase(BaseModel):
    """One entry of the use case list."""
    label: str
    description: str
    color: str


class TextLine(BaseModel):
    """A single colored line of monospaced text."""
    text: str
    color: str
    indent: bool = False
    font_size: Optional[int] = None
    margin_top: Optional[int] = None


class CodeLine(BaseModel):
    """An annotated line of the editor listing."""
    number: str
    code: str
    color: str = "#E5E5E5"
    background: Optional[str] = None


class CardContent(BaseModel):
    """Static content of the social card."""
    title: str = Field(..., min_length=1)
    tagline: str
    subcopy: str
    use_cases: List[UseCase] = Field(default_factory=list)
    repository_url: str
    file_tree: List[TextLine] = Field(default_factory=list)
    code_lines: List[CodeLine] = Field(default_factory=list)
    commit: List[TextLine] = Field(default_factory=list)
    terminal: List[TextLine] = Field(default_factory=list)
    caption: Optional[str] = None
