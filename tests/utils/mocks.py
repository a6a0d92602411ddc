"""
Test Mocks
===========

Mock implementations of the HTTP session, Playwright and the rasterizer.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

from social_card.models.schemas import RasterImage, VectorDocument

from tests.utils.data_generators import PNGDataGenerator


def mock_response(status: int = 200, text: str = "", body: bytes = b"") -> MagicMock:
    """Mock aiohttp response usable as ``async with session.get(...) as response``."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    response.read = AsyncMock(return_value=body)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


class MockSession:
    """Mock aiohttp session serving canned responses by URL."""

    def __init__(self, routes: Optional[Dict[str, MagicMock]] = None) -> None:
        self.routes = dict(routes or {})
        self.requested: List[str] = []
        self.closed = False

    def get(self, url: str) -> MagicMock:
        self.requested.append(url)
        for prefix, response in self.routes.items():
            if url.startswith(prefix):
                return response
        return mock_response(status=404, text="Not Found")

    async def close(self) -> None:
        self.closed = True


class MockRasterizer:
    """Rasterizer returning a solid PNG of the document's size."""

    def __init__(self) -> None:
        self.documents: List[VectorDocument] = []

    async def rasterize(self, document: VectorDocument) -> RasterImage:
        self.documents.append(document)
        png_data = PNGDataGenerator.png_bytes(document.width, document.height)
        return RasterImage(
            png_data=png_data,
            width=document.width,
            height=document.height,
            file_size=len(png_data),
            metadata={"generator": "mock"},
        )


def mock_playwright(
    screenshot: bytes, failed_fonts: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Build a mocked ``async_playwright()`` chain.

    Returns:
        Dict with the ``factory`` to patch in and the inner mocks
    """
    page = MagicMock()
    page.set_default_timeout = MagicMock()
    page.set_content = AsyncMock()
    page.evaluate = AsyncMock(return_value=failed_fonts or [])
    page.screenshot = AsyncMock(return_value=screenshot)

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=playwright)
    manager.__aexit__ = AsyncMock(return_value=False)

    factory = MagicMock(return_value=manager)
    return {
        "factory": factory,
        "playwright": playwright,
        "browser": browser,
        "context": context,
        "page": page,
    }
