"""
PNG Generator
=============

Playwright-based rasterization of card documents. Chromium performs text
shaping and flex layout of the markup; the canvas is captured as a PNG and
verified (and optionally re-encoded) with Pillow.
"""

from typing import Optional, Dict, Any, List, AsyncGenerator
from contextlib import asynccontextmanager
import io

from playwright.async_api import async_playwright, Browser, Error as PlaywrightError, Page
from PIL import Image, UnidentifiedImageError  # type: ignore

from social_card.config.logging import get_logger
from social_card.config.settings import Settings, get_settings
from social_card.models.schemas import RasterImage, VectorDocument

logger = get_logger(__name__)

# Loads every declared face and reports the families that failed to load
FONT_LOAD_SCRIPT = """
async () => {
  const faces = Array.from(document.fonts);
  await Promise.allSettled(faces.map((face) => face.load()));
  await document.fonts.ready;
  return faces
    .filter((face) => face.status !== "loaded")
    .map((face) => face.family.replace(/^["']|["']$/g, ""));
}
"""

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--font-render-hinting=none",
]


class RasterizationError(Exception):
    """Exception raised when rasterization fails."""

    pass


class PlaywrightRasterizer:
    """Rasterizes vector documents with a headless Chromium."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="rasterizer")

    @asynccontextmanager
    async def _browser(self) -> AsyncGenerator[Browser, None]:
        """Launch a browser for one render and always close it."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=self.settings.playwright_headless, args=BROWSER_ARGS
            )
            try:
                yield browser
            finally:
                await browser.close()

    async def rasterize(self, document: VectorDocument) -> RasterImage:
        """
        Rasterize a document to a PNG of exactly the document's dimensions.

        Args:
            document: Card markup and canvas size

        Returns:
            RasterImage containing PNG data and metadata

        Raises:
            RasterizationError: If the browser fails, a font fails to load or
                the captured image has the wrong size
        """
        self.logger.info(
            "Rasterizing document",
            html_length=len(document.markup),
            width=document.width,
            height=document.height,
        )

        try:
            async with self._browser() as browser:
                context = await browser.new_context(
                    viewport={"width": document.width, "height": document.height},
                    device_scale_factor=1,
                )
                try:
                    page = await context.new_page()
                    page.set_default_timeout(self.settings.playwright_timeout)
                    await page.set_content(document.markup, wait_until="load")
                    await self._ensure_fonts_loaded(page)

                    screenshot_bytes = await page.screenshot(
                        type="png",
                        clip={"x": 0, "y": 0, "width": document.width, "height": document.height},
                        animations="disabled",
                    )
                finally:
                    await context.close()
        except PlaywrightError as e:
            error_msg = f"Browser rendering failed: {e}"
            self.logger.error("Rasterization error", error=error_msg)
            raise RasterizationError(error_msg) from e

        png_data = self._process_png(screenshot_bytes, document)

        result = RasterImage(
            png_data=png_data,
            width=document.width,
            height=document.height,
            file_size=len(png_data),
            metadata={
                "generator": "playwright",
                "optimization": self.settings.optimize_png,
                "font_families": list(document.font_families),
            },
        )

        self.logger.debug(
            "Rasterization completed",
            file_size=result.file_size,
            optimized=self.settings.optimize_png,
        )
        return result

    async def _ensure_fonts_loaded(self, page: Page) -> None:
        """Force every embedded face to load; a face that cannot load is fatal."""
        failed: List[str] = await page.evaluate(FONT_LOAD_SCRIPT)
        if failed:
            families = ", ".join(sorted(set(failed)))
            raise RasterizationError(f"Embedded fonts failed to load: {families}")

    def _process_png(self, png_bytes: bytes, document: VectorDocument) -> bytes:
        """
        Verify the captured PNG and optionally re-encode it with Pillow.

        Args:
            png_bytes: Screenshot bytes
            document: Document whose canvas the image must match

        Returns:
            Final PNG bytes
        """
        try:
            image = Image.open(io.BytesIO(png_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise RasterizationError(f"Screenshot is not a valid PNG: {e}") from e

        if image.size != (document.width, document.height):
            raise RasterizationError(
                f"Screenshot size {image.size[0]}x{image.size[1]} does not match "
                f"canvas {document.width}x{document.height}"
            )

        if not self.settings.optimize_png:
            return png_bytes

        output = io.BytesIO()
        save_kwargs: Dict[str, Any] = {"format": "PNG", "optimize": True}
        image.save(output, **save_kwargs)
        optimized_bytes = output.getvalue()

        reduction = (1 - len(optimized_bytes) / len(png_bytes)) * 100 if png_bytes else 0
        self.logger.debug(
            "PNG optimization completed",
            original_size=len(png_bytes),
            optimized_size=len(optimized_bytes),
            reduction_percent=round(reduction, 2),
        )
        return optimized_bytes
