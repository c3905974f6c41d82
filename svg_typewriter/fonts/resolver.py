"""Font asset resolution.

The renderer never talks to the network itself: it is given a
``FontResolver`` and asks it for embeddable CSS, one family at a time.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable
from typing import Protocol

from svg_typewriter.models import TextLine

logger = logging.getLogger(__name__)


class FontResolver(Protocol):
    def resolve(self, family: str, text: str, weight: str = "400") -> str | None:
        """Return ``@font-face`` CSS for ``family`` covering ``text``."""
        ...


class NullFontResolver:
    """Resolver that never embeds anything; renderers use fallback fonts."""

    def resolve(self, family: str, text: str, weight: str = "400") -> str | None:
        return None


def unique_characters(lines: Iterable[TextLine]) -> str:
    """Characters used across ``lines``, in first-seen order."""
    return "".join(dict.fromkeys("".join(line.content for line in lines)))


def collect_font_css(
    lines: Iterable[TextLine],
    resolver: FontResolver,
    max_workers: int = 4,
) -> str:
    """Resolve every distinct font family of ``lines`` in parallel.

    Each family is requested once with the characters of all lines and
    the weight of the first line that uses it. A family whose resolution
    fails is left out; the others are joined in line order.
    """
    lines = list(lines)
    families: dict[str, str] = {}
    for line in lines:
        families.setdefault(line.font_family, line.font_weight)
    if not families:
        return ""

    text = unique_characters(lines)
    workers = max(1, min(max_workers, len(families)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(resolver.resolve, family, text, weight)
            for family, weight in families.items()
        ]
        results = []
        for family, future in zip(families, futures):
            try:
                results.append(future.result())
            except Exception:
                logger.warning("Font resolver failed for %r", family, exc_info=True)
                results.append(None)

    return "\n".join(css for css in results if css)
