"""
Card Content
============

Static content feeding the layout tree builder. The default content is the
gitlogue card; an optional JSON or YAML file can replace it, validated with
Cerberus before conversion to the CardContent model.
"""

from typing import Dict, List, Any, Tuple
from pathlib import Path
import json
import yaml  # type: ignore[import-untyped]
from cerberus import Validator  # type: ignore[import-untyped]

from social_card.config.logging import get_logger
from social_card.models.schemas import CardContent, CodeLine, TextLine, UseCase

logger = get_logger(__name__)


class ContentError(Exception):
    """Exception raised when a content file cannot be loaded or is invalid."""

    pass


DEFAULT_CARD_CONTENT = CardContent(
    title="gitlogue",
    tagline="Cinematic Git commit replay for your terminal",
    subcopy="Watch your code history come alive.",
    use_cases=[
        UseCase(label="▸ Screensaver", description="— Ambient coding display", color="#7AA2F7"),
        UseCase(label="▸ Education", description="— Visualize code evolution", color="#9ECE6A"),
        UseCase(label="▸ Presentations", description="— Replay commit histories", color="#E0AF68"),
        UseCase(
            label="▸ Content Creation", description="— Record with VHS/asciinema", color="#BB9AF7"
        ),
        UseCase(
            label="▸ Desktop Ricing", description="— Living terminal decoration", color="#7DCFFF"
        ),
    ],
    repository_url="github.com/unhappychoice/gitlogue",
    file_tree=[
        TextLine(text="src/", color="#7AA2F7"),
        TextLine(text="~ ui.rs +28 -7", color="#9ECE6A", indent=True),
        TextLine(text="  animation.rs", color="#565F89", indent=True),
        TextLine(text="  config.rs", color="#565F89", indent=True),
        TextLine(text="  git.rs", color="#565F89", indent=True),
        TextLine(text="Cargo.toml", color="#7AA2F7", margin_top=4),
        TextLine(text="README.md", color="#7AA2F7"),
    ],
    code_lines=[
        CodeLine(number="174", code="    "),
        CodeLine(number="175", code="    pub fn new(config: Config) -> Self {"),
        CodeLine(number="176", code="        Self { engine: Engine::new(config) }"),
        CodeLine(number="177", code="    }"),
        CodeLine(number="178", code="    "),
        CodeLine(
            number="179",
            code="-   pub fn load(&mut self, meta: Metadata) {",
            color="#E06C75",
            background="#3F1F1F",
        ),
        CodeLine(
            number="180",
            code="+   pub fn load(&mut self, meta: Metadata) -> Result<()> {",
            color="#89E051",
            background="#1F3F1F",
        ),
        CodeLine(number="181", code="        self.metadata = Some(meta.clone());"),
        CodeLine(number="182", code="        self.engine.load(meta)?;"),
        CodeLine(
            number="183",
            code="+       self.validate_state()?;",
            color="#89E051",
            background="#1F3F1F",
        ),
        CodeLine(number="184", code="        Ok(())"),
        CodeLine(number="185", code="    }"),
        CodeLine(number="186", code="    "),
        CodeLine(number="187", code="    pub fn render(&mut self) -> Result<()> {"),
        CodeLine(number="188", code="        self.engine.render()"),
    ],
    commit=[
        TextLine(text="hash: f16f674", color="#E0AF68"),
        TextLine(text="author: Yuji Ueki", color="#9AA5CE"),
        TextLine(text="date: 2025-11-09", color="#565F89", font_size=9),
        TextLine(text="      16:51:33", color="#565F89", font_size=9),
        TextLine(text="feat: implement", color="#7AA2F7", margin_top=8),
        TextLine(text="input handling", color="#7AA2F7"),
    ],
    terminal=[
        TextLine(text="~ time-travel 2025-11-09 16:51:33", color="#9ECE6A"),
        TextLine(text="Compressing digital dreams: 100%", color="#9AA5CE"),
        TextLine(text="Signing with invisible ink: done.", color="#9AA5CE"),
        TextLine(text="3a62bb4..3a62bb4  SUCCESS", color="#9ECE6A", margin_top=3),
        TextLine(text="Arrived at 2025-11-09 16:51:33", color="#7AA2F7"),
    ],
    caption="静止しているのに動いて見える",
)


class ContentValidator:
    """Content file validation using Cerberus schemas."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="content_validator")
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        color = {"type": "string", "regex": r"^#[0-9A-Fa-f]{3,8}$"}

        self.text_line_schema = {
            "text": {"type": "string", "required": True},
            "color": {**color, "required": True},
            "indent": {"type": "boolean"},
            "font_size": {"type": "integer", "min": 1, "nullable": True},
            "margin_top": {"type": "integer", "min": 0, "nullable": True},
        }

        self.code_line_schema = {
            "number": {"type": "string", "required": True},
            "code": {"type": "string", "required": True},
            "color": color,
            "background": {**color, "nullable": True},
        }

        self.use_case_schema = {
            "label": {"type": "string", "required": True},
            "description": {"type": "string", "required": True},
            "color": {**color, "required": True},
        }

        def list_of(schema: Dict[str, Any]) -> Dict[str, Any]:
            return {"type": "list", "schema": {"type": "dict", "schema": schema}}

        self.content_schema: Dict[str, Any] = {
            "title": {"type": "string", "required": True, "empty": False},
            "tagline": {"type": "string", "required": True},
            "subcopy": {"type": "string", "required": True},
            "repository_url": {"type": "string", "required": True},
            "use_cases": list_of(self.use_case_schema),
            "file_tree": list_of(self.text_line_schema),
            "code_lines": list_of(self.code_line_schema),
            "commit": list_of(self.text_line_schema),
            "terminal": list_of(self.text_line_schema),
            "caption": {"type": "string", "nullable": True},
        }

    def validate(self, data: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate content file structure.

        Args:
            data: Parsed content data

        Returns:
            Tuple of (is_valid, errors)
        """
        validator = Validator(self.content_schema)  # type: ignore[misc]
        is_valid = validator.validate(data)  # type: ignore[misc]
        errors: List[str] = []
        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))  # type: ignore[attr-defined]
        return bool(is_valid), errors

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            if isinstance(error_info, list):
                for error in error_info:
                    if isinstance(error, dict):
                        formatted_errors.extend(self._format_validation_errors(error, current_path))
                    else:
                        formatted_errors.append(f"{current_path}: {error}")
            elif isinstance(error_info, dict):
                formatted_errors.extend(self._format_validation_errors(error_info, current_path))

        return formatted_errors


def detect_content_format(path: Path, text: str) -> str:
    """
    Detect content file format from the suffix, falling back to the content.

    Returns:
        "json" or "yaml"
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return "json" if text.lstrip().startswith("{") else "yaml"


def parse_card_content(text: str, content_format: str) -> CardContent:
    """
    Parse and validate content file text.

    Args:
        text: Raw file content
        content_format: "json" or "yaml"

    Returns:
        Validated CardContent

    Raises:
        ContentError: If the text cannot be parsed or fails validation
    """
    try:
        raw_data = json.loads(text) if content_format == "json" else yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise ContentError(
            f"Invalid JSON syntax at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    except yaml.YAMLError as e:
        raise ContentError(f"Invalid YAML syntax: {e}") from e

    if not isinstance(raw_data, dict):
        raise ContentError(
            f"Content must be a dictionary/object, got {type(raw_data).__name__}"
        )

    is_valid, errors = ContentValidator().validate(raw_data)
    if not is_valid:
        raise ContentError("Invalid card content: " + "; ".join(errors))

    return CardContent.model_validate(raw_data)


def load_card_content(path: Path) -> CardContent:
    """
    Load card content from a JSON or YAML file.

    Raises:
        ContentError: If the file is unreadable or invalid
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ContentError(f"Could not read content file: {path}") from e

    content_format = detect_content_format(Path(path), text)
    logger.info("Loading card content", path=str(path), format=content_format)
    return parse_card_content(text, content_format)
