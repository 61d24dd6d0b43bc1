import io
import logging
import os
from typing import Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils.units import pixels_to_EMU
from openpyxl.worksheet.worksheet import Worksheet
from PIL import Image

from blog_capture.errors import ArtifactNotFoundError
from blog_capture.models import CaptureResult, ImagePlacement
from blog_capture.store import ArtifactStore

"""
Excel report of a capture session, one row per result with the screenshot embedded.

Built in two passes over the same result list, joined only by row number:
  1. row data (index, date, name, link, title, status) and row heights
  2. image placement for rows whose artifact resolves through the ArtifactStore
"""

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Captures"

# (header, width)
COLUMNS = [
    ("No.", 8),
    ("Date", 12),
    ("Name", 15),
    ("Link", 50),
    ("Title", 50),
    ("Screenshot", 55),
    ("Status", 10),
]
SCREENSHOT_COL = 5  # 0-based, column F
HEADER_FILL = "FF4F46E5"
HEADER_HEIGHT = 25
IMAGE_ROW_OFFSET_PX = 2
FIRST_DATA_ROW = 2

STATUS_DONE = "Done"
STATUS_FAILED = "Failed"


def plan_image_placement(
    image_path: str,
    row: int,
    config: Dict[str, object],
) -> Optional[ImagePlacement]:
    """
    Scale the image at 'image_path' to the report width, keeping its aspect ratio.
    Returns None if the file is missing or unreadable. 'row' is the 1-based sheet row.
    """
    if not os.path.isfile(image_path):
        return None
    try:
        with Image.open(image_path) as im:
            width, height = im.size
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot read image {image_path}: {e}")
        return None
    if width <= 0:
        return None

    target_width = config.get("report_image_width_px", 380)
    return ImagePlacement(
        target_width_px=target_width,
        target_height_px=target_width * (height / width),
        anchor_row=row - 1,
        anchor_col=SCREENSHOT_COL,
    )


def row_height_for(placement: Optional[ImagePlacement], config: Dict[str, object]) -> float:
    """Row height in points: image height converted from pixels plus padding, or the fixed minimum."""
    if placement is None:
        return config.get("report_empty_row_height_pt", 30)
    return (
        placement.target_height_px / config.get("report_px_per_point", 1.33)
        + config.get("report_row_padding_pt", 10)
    )


def _write_header(ws: Worksheet) -> None:
    for col_idx, (header, width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True, color="FFFFFFFF")
        cell.fill = PatternFill(fill_type="solid", fgColor=HEADER_FILL)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        ws.column_dimensions[cell.column_letter].width = width
    ws.row_dimensions[1].height = HEADER_HEIGHT


def _write_rows(ws: Worksheet, results: Sequence[CaptureResult]) -> None:
    centered = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for offset, result in enumerate(results):
        row = FIRST_DATA_ROW + offset
        values = [
            result.index,
            result.date,
            result.name,
            result.link,
            result.blog_title or "",
            None,
            STATUS_DONE if result.success else STATUS_FAILED,
        ]
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col_idx, value=value)
            cell.alignment = centered


def _place_images(
    ws: Worksheet,
    store: ArtifactStore,
    session_id: str,
    results: Sequence[CaptureResult],
    config: Dict[str, object],
) -> List[ImagePlacement]:
    placed: List[ImagePlacement] = []
    for offset, result in enumerate(results):
        row = FIRST_DATA_ROW + offset
        placement = None
        if result.success and result.filename:
            try:
                image_path = store.resolve(session_id, result.filename)
            except ArtifactNotFoundError as e:
                logger.warning(f"Screenshot missing for row {row}: {e}")
            else:
                placement = plan_image_placement(image_path, row, config)
                if placement is not None:
                    _add_image(ws, image_path, placement)
                    placed.append(placement)
        ws.row_dimensions[row].height = row_height_for(placement, config)
    return placed


def _add_image(ws: Worksheet, image_path: str, placement: ImagePlacement) -> None:
    img = XLImage(image_path)
    width_px = int(round(placement.target_width_px))
    height_px = int(round(placement.target_height_px))
    img.width = width_px
    img.height = height_px
    marker = AnchorMarker(
        col=placement.anchor_col,
        colOff=0,
        row=placement.anchor_row,
        rowOff=pixels_to_EMU(IMAGE_ROW_OFFSET_PX),
    )
    img.anchor = OneCellAnchor(
        _from=marker,
        ext=XDRPositiveSize2D(pixels_to_EMU(width_px), pixels_to_EMU(height_px)),
    )
    ws.add_image(img)


def build_report(
    store: ArtifactStore,
    session_id: str,
    results: Sequence[CaptureResult],
    config: Dict[str, object],
) -> Workbook:
    """
    Build the report workbook for one session. Screenshots are looked up through 'store',
    so filenames outside the session directory never resolve. Missing screenshots never
    abort the export; those rows are laid out like failed captures.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    _write_header(ws)
    _write_rows(ws, results)
    placed = _place_images(ws, store, session_id, results, config)

    logger.info(f"Report built: {len(results)} rows, {len(placed)} screenshots.")
    return wb


def export_report(
    store: ArtifactStore,
    session_id: str,
    results: Sequence[CaptureResult],
    config: Dict[str, object],
) -> bytes:
    """Serialize build_report() to xlsx bytes."""
    buffer = io.BytesIO()
    build_report(store, session_id, results, config).save(buffer)
    return buffer.getvalue()
