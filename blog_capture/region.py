import logging
import math
from typing import Callable, Dict, List, Optional

from playwright.sync_api import Page

from blog_capture.models import ContentRegion, RegionSource

"""
Locate the title/intro region of a loaded blog page.

Detection is an ordered chain of strategies. Each returns a ContentRegion or None;
the first hit wins and the chain ends with a default that always succeeds.
An error in any strategy skips straight to the default:

1. title selectors (most platform-specific first) => element bottom + margin, capped
2. document <title> with the platform suffix stripped => default height
3. caller-supplied label => default height
"""

logger = logging.getLogger(__name__)

Strategy = Callable[[Page, Dict[str, object]], Optional[ContentRegion]]


def _clamp_offset(value: float, config: Dict[str, object]) -> int:
    capped = min(value, float(config.get("max_region_height_px", 600)))
    return max(1, int(math.ceil(capped)))


def from_title_selectors(page: Page, config: Dict[str, object]) -> Optional[ContentRegion]:
    """
    First selector resolving to a visible element with text => bottom of that element + margin.
    """
    margin = config.get("title_margin_px", 50)
    for selector in config.get("title_selectors", []):
        element = page.query_selector(selector)
        if element is None or not element.is_visible():
            continue
        text = (element.text_content() or "").strip()
        if not text:
            continue
        box = element.bounding_box()
        if box is None:
            continue
        bottom = box["y"] + box["height"]
        logger.debug(f"Title selector '{selector}' matched, bottom={bottom}")
        return ContentRegion(
            bottom_offset_px=_clamp_offset(bottom + margin, config),
            source=RegionSource.DETECTED_SELECTOR,
            title=text,
        )
    return None


def from_page_title(page: Page, config: Dict[str, object]) -> Optional[ContentRegion]:
    """
    Use the document title (minus the platform suffix) as the label, with the default height.
    """
    title = (page.title() or "").strip()
    suffix = config.get("page_title_suffix") or ""
    if suffix and suffix in title:
        title = title.replace(suffix, "").strip()
    if not title:
        return None
    return ContentRegion(
        bottom_offset_px=_clamp_offset(config.get("default_region_height_px", 400), config),
        source=RegionSource.PAGE_TITLE_FALLBACK,
        title=title,
    )


STRATEGIES: List[Strategy] = [from_title_selectors, from_page_title]


def detect_content_region(
    page: Page,
    fallback_title: str,
    config: Dict[str, object],
) -> ContentRegion:
    """
    Run the strategy chain against 'page'. Never raises.
    A strategy that finds nothing passes on to the next one; a strategy that errors
    ends the chain, and 'fallback_title' is used with the default height.
    """
    for strategy in STRATEGIES:
        try:
            region = strategy(page, config)
        except Exception as e:
            logger.debug(f"{strategy.__name__} failed, using fallback title: {e}")
            break
        if region is not None:
            return region

    return ContentRegion(
        bottom_offset_px=_clamp_offset(config.get("default_region_height_px", 400), config),
        source=RegionSource.DEFAULT,
        title=fallback_title,
    )
