"""
Output Writer
=============

Persists the rendered card to its destination. The image is written to a
temporary sibling file and moved into place, so the destination either
keeps its previous content or holds the complete new image.
"""

from typing import Any
from pathlib import Path
import os
import stat
import tempfile

from social_card.config.logging import get_logger
from social_card.models.schemas import OutputArtifact, RasterImage

logger = get_logger(__name__)


class WriteError(Exception):
    """Exception raised when the output image cannot be persisted."""

    pass


class OutputWriter:
    """Writes the final PNG to a fixed destination path."""

    def __init__(self, destination: Path) -> None:
        self.destination = Path(destination)
        self.logger: Any = logger.bind(component="output_writer")

    def write(self, image: RasterImage) -> OutputArtifact:
        """
        Write the image, replacing any existing file.

        Args:
            image: Rasterized card

        Returns:
            OutputArtifact describing the written file

        Raises:
            WriteError: If the file cannot be written
        """
        temp_path = None
        try:
            self.destination.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=self.destination.parent, prefix=f".{self.destination.name}.", suffix=".tmp"
            )
            temp_path = Path(temp_name)
            with os.fdopen(fd, "wb") as handle:
                handle.write(image.png_data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(temp_path, self._file_mode())
            os.replace(temp_path, self.destination)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            error_msg = f"Could not write {self.destination}: {e}"
            self.logger.error("Output write failed", error=error_msg)
            raise WriteError(error_msg) from e

        artifact = OutputArtifact(
            data=image.png_data,
            path=self.destination.resolve(),
            width=image.width,
            height=image.height,
        )
        self.logger.info(
            f"OGP image generated: {artifact.path} ({artifact.dimensions}px)",
            path=str(artifact.path),
            size=artifact.dimensions,
            file_size=image.file_size,
        )
        return artifact

    def _file_mode(self) -> int:
        """Permissions of the existing destination, or the umask default for a new file."""
        try:
            return stat.S_IMODE(self.destination.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
