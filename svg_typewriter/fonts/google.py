"""Google Fonts client.

Fetches the CSS for a font family, subset to the characters actually
rendered, and inlines every referenced font file as a base64 data URI so
the SVG does not depend on the network when displayed.
"""

from __future__ import annotations

import base64
import concurrent.futures
import logging
import re
import urllib.error
import urllib.request
from urllib.parse import urlencode

from svg_typewriter.config import FontConfig
from svg_typewriter.exceptions import FontFetchError

logger = logging.getLogger(__name__)

FONT_FILE_URL = re.compile(
    r"url\((https://fonts\.gstatic\.com[^)]+)\)\s+format\(['\"]([^'\"]+)['\"]\)"
)


class GoogleFontsResolver:
    """Resolve font families to self-contained ``@font-face`` CSS.

    A font file that cannot be fetched keeps its remote URL in the CSS. A
    stylesheet that cannot be fetched makes ``resolve`` return None.
    """

    def __init__(self, config: FontConfig | None = None) -> None:
        """Initialize resolver.

        Args:
            config: Endpoint, timeout and size limits. Defaults apply when
                not given.
        """
        self.config = config or FontConfig()

    def stylesheet_url(self, family: str, text: str, weight: str = "400") -> str:
        query = urlencode(
            {"family": f"{family}:wght@{weight}", "text": text, "display": "fallback"}
        )
        return f"{self.config.css_url}?{query}"

    def fetch(self, url: str) -> bytes:
        """Fetch a resource.

        Args:
            url: URL to fetch

        Returns:
            Response body

        Raises:
            FontFetchError: If the request fails or the body is too large
        """
        req = urllib.request.Request(url, headers={"User-Agent": self.config.user_agent})
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                content_length = response.headers.get("Content-Length")
                if content_length and int(content_length) > self.config.max_size:
                    raise FontFetchError(
                        url, details={"error": f"Too large: {content_length} bytes"}
                    )
                content = response.read(self.config.max_size + 1)
                if len(content) > self.config.max_size:
                    raise FontFetchError(
                        url, details={"error": f"Too large: >{self.config.max_size} bytes"}
                    )
                return content
        except FontFetchError:
            raise
        except urllib.error.HTTPError as e:
            raise FontFetchError(url, status_code=e.code) from e
        except urllib.error.URLError as e:
            raise FontFetchError(url, details={"error": str(e.reason)}) from e
        except (OSError, ValueError) as e:
            raise FontFetchError(url, details={"error": str(e)}) from e

    def fetch_stylesheet(self, family: str, text: str, weight: str = "400") -> str:
        return self.fetch(self.stylesheet_url(family, text, weight)).decode("utf-8")

    def _data_uri(self, url: str, font_format: str) -> str | None:
        try:
            content = self.fetch(url)
        except FontFetchError as e:
            logger.warning("Failed to fetch font file: %s", e)
            return None
        encoded = base64.b64encode(content).decode("ascii")
        return f"data:font/{font_format};base64,{encoded}"

    def inline_fonts(self, css: str) -> str:
        """Replace font file URLs in ``css`` with data URIs, in parallel."""
        matches = list(dict.fromkeys(FONT_FILE_URL.findall(css)))
        if not matches:
            return css

        workers = max(1, min(self.config.max_workers, len(matches)))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            data_uris = list(
                executor.map(lambda match: self._data_uri(*match), matches)
            )

        for (url, _font_format), data_uri in zip(matches, data_uris):
            if data_uri is not None:
                css = css.replace(url, data_uri)
        return css

    def resolve(self, family: str, text: str, weight: str = "400") -> str | None:
        """Return embeddable CSS for ``family``, or None on failure."""
        try:
            css = self.fetch_stylesheet(family, text, weight)
        except (FontFetchError, UnicodeDecodeError) as e:
            logger.warning("Failed to fetch font %r: %s", family, e)
            return None
        return self.inline_fonts(css)
