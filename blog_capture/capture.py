import logging
import os
from typing import Dict, List, Sequence

from playwright.sync_api import Browser, BrowserContext, Playwright, sync_playwright

from blog_capture.address_bar import ADDRESS_BAR_HEIGHT, render_composite
from blog_capture.errors import EngineError, InvalidRequestError
from blog_capture.models import CaptureItem, CaptureResult, CaptureSession
from blog_capture.region import detect_content_region
from blog_capture.store import ArtifactStore, artifact_filename

"""
Capture a batch of blog posts with one headless Chromium.

Per item:
    new context => goto (networkidle) => detect title region => clipped screenshot
    => composite (address bar + screenshot) in a second context => PNG on disk

Items are processed strictly in order. An item that fails is recorded as a failed
CaptureResult and the batch moves on. A browser that fails to launch, or dies
mid-batch, raises EngineError and no session is returned.
"""

logger = logging.getLogger(__name__)

NO_TITLE = "no title"


def launch_browser(playwright: Playwright, config: Dict[str, object]) -> Browser:
    """
    Launch Chromium with the configured headless flag, executable and sandbox args.
    """
    return playwright.chromium.launch(
        headless=config.get("headless", True),
        executable_path=config.get("executable_path") or None,
        args=list(config.get("browser_args", [])),
    )


def _new_context(browser: Browser, width: int, height: int) -> BrowserContext:
    try:
        return browser.new_context(viewport={"width": width, "height": height})
    except Exception as e:
        raise EngineError(f"Could not open browser context: {e}") from e


def compose_capture(
    browser: Browser,
    url: str,
    content_png: bytes,
    content_height: int,
    output_path: str,
    config: Dict[str, object],
) -> None:
    """
    Render the address bar above 'content_png' in a transient context and save the result to 'output_path'.
    """
    width = config.get("canvas_width", 1200)
    total_height = ADDRESS_BAR_HEIGHT + content_height
    context = _new_context(browser, width, total_height)
    try:
        page = context.new_page()
        page.set_content(
            render_composite(url, content_png, width, content_height, config.get("tab_label", "")),
            wait_until="networkidle",
        )
        page.screenshot(path=output_path, full_page=True)
    finally:
        context.close()


def capture_item(
    browser: Browser,
    item: CaptureItem,
    ordinal: int,
    session_dir: str,
    config: Dict[str, object],
) -> CaptureResult:
    """
    Capture a single item. Navigation or rendering problems become a failed result;
    only EngineError escapes.
    """
    width = config.get("canvas_width", 1200)
    context = _new_context(browser, width, config.get("viewport_height", 900))
    try:
        page = context.new_page()
        page.goto(
            item.link,
            wait_until="networkidle",
            timeout=config.get("navigation_timeout_seconds", 30) * 1000,
        )

        region = detect_content_region(page, item.title or NO_TITLE, config)
        logger.info(
            f"Region for {item.link}: {region.bottom_offset_px}px ({region.source.value})"
        )

        content_png = page.screenshot(
            clip={"x": 0, "y": 0, "width": width, "height": region.bottom_offset_px}
        )

        filename = artifact_filename(item.date, item.name, ordinal)
        compose_capture(
            browser,
            item.link,
            content_png,
            region.bottom_offset_px,
            os.path.join(session_dir, filename),
            config,
        )
        return CaptureResult.succeeded(item, region.title, filename)
    except EngineError:
        raise
    except Exception as e:
        message = str(e).strip() or e.__class__.__name__
        logger.warning(f"Capture failed: {item.link} => {message}")
        return CaptureResult.failed(item, message)
    finally:
        context.close()


def run_batch(
    items: Sequence[CaptureItem],
    store: ArtifactStore,
    config: Dict[str, object],
) -> CaptureSession:
    """
    Capture every item in order with one browser and return the session.
    Raises InvalidRequestError for an empty batch and EngineError if the browser itself fails.
    """
    if not items:
        raise InvalidRequestError("No items to capture.")

    session_id, session_dir = store.create_session()
    results: List[CaptureResult] = []

    try:
        with sync_playwright() as p:
            browser = launch_browser(p, config)
            try:
                for i, item in enumerate(items):
                    if not browser.is_connected():
                        raise EngineError("Browser disconnected mid-batch.")
                    logger.info(f"Capturing ({i + 1}/{len(items)}): {item.link}")
                    results.append(capture_item(browser, item, i + 1, session_dir, config))
            finally:
                browser.close()
    except EngineError as e:
        logger.error(f"Browser error in session {session_id}: {e}")
        raise
    except Exception as e:
        logger.error(f"Browser error in session {session_id}: {e}")
        raise EngineError(str(e) or e.__class__.__name__) from e

    session = CaptureSession(session_id=session_id, directory=session_dir, results=results)
    logger.info(
        f"Session {session_id} complete: {session.success_count}/{session.total_count} captured."
    )
    return session
