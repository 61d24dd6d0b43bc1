import io
import os
from typing import Callable, Dict, List

import pytest
from openpyxl import load_workbook

from blog_capture.models import CaptureItem, CaptureResult
from blog_capture.report import build_report, export_report, plan_image_placement, row_height_for
from blog_capture.store import ArtifactStore


@pytest.fixture
def store(config: Dict[str, object]) -> ArtifactStore:
    return ArtifactStore(config["captures_dir"])


@pytest.fixture
def session_id(store: ArtifactStore) -> str:
    sid, _ = store.create_session()
    return sid


def _results(session_dir: str, make_png: Callable[..., str]) -> List[CaptureResult]:
    make_png(os.path.join(session_dir, "2024-01-05_Kim_1.png"), 1200, 900)
    return [
        CaptureResult.succeeded(
            CaptureItem(1, "2024-01-05", "Kim", "https://blog.naver.com/kim/1", "Sheet title"),
            "My Post",
            "2024-01-05_Kim_1.png",
        ),
        CaptureResult.failed(
            CaptureItem(2, "2024-01-06", "Lee", "https://unreachable.invalid", ""),
            "net::ERR_NAME_NOT_RESOLVED",
        ),
        CaptureResult.succeeded(
            CaptureItem(3, "2024-01-07", "Park", "https://blog.naver.com/park/3", ""),
            "Gone",
            "2024-01-07_Park_3.png",
        ),
    ]


def test_plan_image_placement_keeps_aspect_ratio(
    temp_dir: str, config: Dict[str, object], make_png: Callable[..., str]
) -> None:
    """
    1200x900 screenshot => 380x285 in the sheet, row height 285/1.33 + 10 points.
    """
    path = make_png(os.path.join(temp_dir, "shot.png"), 1200, 900)
    placement = plan_image_placement(path, row=2, config=config)

    assert placement.target_width_px == 380
    assert placement.target_height_px == pytest.approx(285)
    assert placement.anchor_row == 1
    assert placement.anchor_col == 5
    assert row_height_for(placement, config) == pytest.approx(285 / 1.33 + 10)


def test_plan_image_placement_missing_file(temp_dir: str, config: Dict[str, object]) -> None:
    assert plan_image_placement(os.path.join(temp_dir, "nope.png"), 2, config) is None
    assert row_height_for(None, config) == 30


def test_build_report_rows_and_images(
    store: ArtifactStore, session_id: str, config: Dict[str, object], make_png: Callable[..., str]
) -> None:
    """
    One row per result; only the success with an existing file gets an image.
    A missing artifact is laid out like a failure.
    """
    results = _results(store.session_dir(session_id), make_png)
    ws = build_report(store, session_id, results, config).active

    assert ws.max_row == 1 + len(results)
    assert [c.value for c in ws[1]] == ["No.", "Date", "Name", "Link", "Title", "Screenshot", "Status"]
    assert ws["A1"].font.bold is True
    assert ws["A1"].fill.fgColor.rgb == "FF4F46E5"
    assert ws.row_dimensions[1].height == 25
    assert ws.column_dimensions["F"].width == 55

    assert ws["E2"].value == "My Post"
    assert ws["G2"].value == "Done"
    assert ws["E3"].value in (None, "")
    assert ws["G3"].value == "Failed"
    assert ws["F2"].value is None
    assert ws["B2"].alignment.vertical == "center"
    assert ws["A1"].alignment.horizontal == "center"

    assert ws.row_dimensions[2].height == pytest.approx(285 / 1.33 + 10)
    assert ws.row_dimensions[3].height == 30
    assert ws.row_dimensions[4].height == 30

    assert len(ws._images) == 1
    anchor = ws._images[0].anchor
    assert anchor._from.col == 5
    assert anchor._from.row == 1


def test_export_with_no_successes(
    store: ArtifactStore, session_id: str, config: Dict[str, object]
) -> None:
    """
    A session with only failures still exports a readable workbook without images.
    """
    results = [
        CaptureResult.failed(CaptureItem(i, "d", "n", f"https://example.com/{i}", ""), "timeout")
        for i in range(1, 4)
    ]
    ws = load_workbook(io.BytesIO(export_report(store, session_id, results, config))).active

    assert ws.max_row == 4
    assert len(ws._images) == 0
    for row in range(2, 5):
        assert ws.row_dimensions[row].height == 30
        assert ws.cell(row=row, column=6).value is None


def test_export_twice_is_structurally_identical(
    store: ArtifactStore, session_id: str, config: Dict[str, object], make_png: Callable[..., str]
) -> None:
    results = _results(store.session_dir(session_id), make_png)

    first = load_workbook(io.BytesIO(export_report(store, session_id, results, config))).active
    second = load_workbook(io.BytesIO(export_report(store, session_id, results, config))).active

    assert first.max_row == second.max_row == 4
    assert len(first._images) == len(second._images) == 1


def test_filenames_outside_session_are_not_embedded(
    temp_dir: str,
    store: ArtifactStore,
    session_id: str,
    config: Dict[str, object],
    make_png: Callable[..., str],
) -> None:
    """
    Filenames that point outside the session (parent refs, absolute paths, other sessions)
    never resolve; those rows get no image and the minimal height.
    """
    outside = make_png(os.path.join(temp_dir, "outside_secret.png"), 100, 100)
    other_id, other_dir = store.create_session()
    make_png(os.path.join(other_dir, "d_n_1.png"), 100, 100)
    item = CaptureItem(1, "d", "n", "https://example.com", "")
    results = [
        CaptureResult.succeeded(item, "t", "../../outside_secret.png"),
        CaptureResult.succeeded(item, "t", outside),
        CaptureResult.succeeded(item, "t", f"../{other_id}/d_n_1.png"),
    ]

    ws = build_report(store, session_id, results, config).active

    assert len(ws._images) == 0
    for row in range(2, 5):
        assert ws.row_dimensions[row].height == 30
