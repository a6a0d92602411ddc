"""
Font Resolver
=============

Obtains embeddable TrueType data for the fonts a card needs. Remote fonts
are located by scraping the Google Fonts CSS API response for the first
``.ttf`` asset URL; local fonts are read from a fixed path. Fonts are
resolved concurrently and held in memory for one render only.
"""

from typing import Any, Iterable, List, Optional
from abc import ABC, abstractmethod
from pathlib import Path
import asyncio
import re

import aiohttp

from social_card.config.logging import get_logger
from social_card.config.settings import Settings, get_settings
from social_card.models.schemas import FontSpec, ResolvedFont

logger = get_logger(__name__)

FONT_URL_PATTERN = re.compile(r"url\((https://[^)\s]+?\.ttf)\)")


class ResourceNotFoundError(Exception):
    """Exception raised when a font resource cannot be located or retrieved."""

    pass


class NetworkError(ResourceNotFoundError):
    """Exception raised on transport failures, timeouts and non-success responses."""

    pass


def build_stylesheet_url(family: str, weight: int, base_url: str) -> str:
    """
    Build the CSS API request URL for a font family.

    Args:
        family: Human readable family name, e.g. "Crimson Text"
        weight: Weight requested from the endpoint
        base_url: Stylesheet endpoint

    Returns:
        Stylesheet URL with whitespace in the family replaced by ``+``
    """
    family_param = re.sub(r"\s+", "+", family.strip())
    return f"{base_url}?family={family_param}:wght@{weight}&display=swap"


def extract_font_url(css_text: str, family: str) -> str:
    """
    Extract the first TrueType asset URL from a stylesheet body.

    Args:
        css_text: Stylesheet returned by the CSS API
        family: Requested family, used in the error message

    Returns:
        Absolute HTTPS URL of the ``.ttf`` asset

    Raises:
        ResourceNotFoundError: If the stylesheet references no ``.ttf`` asset
    """
    match = FONT_URL_PATTERN.search(css_text)
    if not match:
        raise ResourceNotFoundError(f"Could not find font URL for {family}")
    return match.group(1)


class BaseFontSource(ABC):
    """Abstract origin of a font's binary data."""

    def __init__(self, spec: FontSpec) -> None:
        self.spec = spec

    @property
    def family(self) -> str:
        return self.spec.family

    @abstractmethod
    async def load(self, session: aiohttp.ClientSession) -> bytes:
        """Load the raw font data."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human readable progress message."""
        pass


class GoogleFontSource(BaseFontSource):
    """Font fetched through the Google Fonts CSS API."""

    def __init__(self, spec: FontSpec, settings: Optional[Settings] = None) -> None:
        super().__init__(spec)
        self.settings = settings or get_settings()

    @property
    def stylesheet_url(self) -> str:
        return build_stylesheet_url(
            self.family, self.settings.stylesheet_weight, self.settings.stylesheet_url
        )

    def describe(self) -> str:
        return f"Downloading {self.family}..."

    async def load(self, session: aiohttp.ClientSession) -> bytes:
        """
        Fetch the stylesheet, extract the asset URL and download the asset.

        Raises:
            ResourceNotFoundError: If the stylesheet has no ``.ttf`` asset
            NetworkError: If either request fails
        """
        css_text = await self._get(session, self.stylesheet_url, binary=False)
        font_url = extract_font_url(css_text, self.family)
        logger.debug("Font asset located", family=self.family, url=font_url)
        return await self._get(session, font_url, binary=True)

    async def _get(self, session: aiohttp.ClientSession, url: str, binary: bool) -> Any:
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise NetworkError(
                        f"Request for {self.family} failed: {response.status} {url}"
                    )
                if binary:
                    return await response.read()
                return await response.text()
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request for {self.family} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request for {self.family} timed out: {url}") from e


class LocalFontSource(BaseFontSource):
    """Font read from a fixed filesystem path."""

    def __init__(self, spec: FontSpec, path: Path) -> None:
        super().__init__(spec)
        self.path = Path(path)

    def describe(self) -> str:
        return f"Loading {self.family}..."

    async def load(self, session: aiohttp.ClientSession) -> bytes:
        """
        Read the font file.

        Raises:
            ResourceNotFoundError: If the file is absent or unreadable
        """
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise ResourceNotFoundError(
                f"Could not read font file for {self.family}: {self.path}"
            ) from e


class FontResolver:
    """Resolves font sources into in-memory fonts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="font_resolver")
        self._session = session
        self._own_session = session is None

    async def __aenter__(self) -> "FontResolver":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.settings.fetch_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._own_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this resolver created it."""
        if self._own_session and self._session is not None:
            if not self._session.closed:
                await self._session.close()
            self._session = None

    async def resolve(self, source: BaseFontSource) -> ResolvedFont:
        """
        Resolve a single font source.

        Args:
            source: Remote or local font source

        Returns:
            ResolvedFont carrying the source's identity and data

        Raises:
            ResourceNotFoundError: If the font cannot be obtained
        """
        self.logger.info(source.describe(), family=source.family)
        try:
            data = await source.load(self._get_session())
        except ResourceNotFoundError as e:
            self.logger.error("Font resolution failed", family=source.family, error=str(e))
            raise

        if not data:
            raise ResourceNotFoundError(f"Font data for {source.family} is empty")

        self.logger.debug("Font resolved", family=source.family, size=len(data))
        return ResolvedFont.from_spec(source.spec, data)

    async def resolve_all(self, sources: Iterable[BaseFontSource]) -> List[ResolvedFont]:
        """
        Resolve several font sources concurrently.

        The first failure cancels the remaining fetches and propagates.

        Args:
            sources: Font sources to resolve

        Returns:
            Resolved fonts in the order of ``sources``
        """
        tasks = [asyncio.ensure_future(self.resolve(source)) for source in sources]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise


def default_font_sources(settings: Optional[Settings] = None) -> List[BaseFontSource]:
    """Font sources of the standard card: two Google fonts and a local monospaced font."""
    settings = settings or get_settings()
    return [
        GoogleFontSource(FontSpec(family="Crimson Text", weight=700), settings),
        GoogleFontSource(FontSpec(family="Lora", weight=400), settings),
        LocalFontSource(FontSpec(family="JetBrains Mono", weight=400), settings.mono_font_path),
    ]
