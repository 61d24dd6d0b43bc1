"""Data models shared by the capture, storage and report modules."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence


@dataclass
class CaptureItem:
    """One blog post to capture, as read from a sheet row."""

    index: int
    date: str
    name: str
    link: str
    title: str = ""


@dataclass
class CaptureResult:
    """
    A CaptureItem plus its terminal state.
    Successful results carry blog_title and filename; failed ones carry error.
    """

    index: int
    date: str
    name: str
    link: str
    title: str
    success: bool
    blog_title: str = ""
    filename: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, item: CaptureItem, blog_title: str, filename: str) -> "CaptureResult":
        return cls(**asdict(item), success=True, blog_title=blog_title, filename=filename)

    @classmethod
    def failed(cls, item: CaptureItem, error: str) -> "CaptureResult":
        return cls(**asdict(item), success=False, error=error or "unknown error")


@dataclass
class CaptureSession:
    """Results of one capture batch and the directory holding its artifacts."""

    session_id: str
    directory: str
    results: List[CaptureResult] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)


class RegionSource(str, Enum):
    DETECTED_SELECTOR = "detected-selector"
    PAGE_TITLE_FALLBACK = "page-title-fallback"
    DEFAULT = "default"


@dataclass
class ContentRegion:
    """Vertical extent of the page worth capturing, and the title found along the way."""

    bottom_offset_px: int
    source: RegionSource
    title: str = ""


@dataclass
class ImagePlacement:
    """Where and how large a screenshot is drawn in the report. Rows/cols are 0-based."""

    target_width_px: int
    target_height_px: float
    anchor_row: int
    anchor_col: int


def items_from_rows(rows: Sequence[Sequence[str]]) -> List[CaptureItem]:
    """
    Convert raw sheet rows ([date, name, link, title]) into CaptureItems.
    index is the 1-based row position; rows without an http(s) link are dropped.
    """
    items: List[CaptureItem] = []
    for position, row in enumerate(rows, start=1):
        cells = [str(c) if c is not None else "" for c in row][:4]
        cells += [""] * (4 - len(cells))
        date, name, link, title = cells
        if not link or not link.startswith("http"):
            continue
        items.append(CaptureItem(index=position, date=date, name=name, link=link, title=title))
    return items


def items_from_dicts(records: Sequence[Dict[str, object]]) -> List[CaptureItem]:
    """Build CaptureItems from mappings; index defaults to the 1-based position."""
    items: List[CaptureItem] = []
    for position, rec in enumerate(records, start=1):
        items.append(
            CaptureItem(
                index=int(rec.get("index") or position),
                date=str(rec.get("date") or ""),
                name=str(rec.get("name") or ""),
                link=str(rec.get("link") or ""),
                title=str(rec.get("title") or ""),
            )
        )
    return items
