"""Fixtures: temp captures root, test config, PNG factory."""

import os
import shutil
import tempfile
from typing import Callable, Dict, Generator

import pytest
from PIL import Image

from blog_capture.config import DEFAULT_CONFIG


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """
    Yields a fresh temp directory for each test, and cleans up afterwards.
    """
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d)


@pytest.fixture
def config(temp_dir: str) -> Dict[str, object]:
    """DEFAULT_CONFIG with captures stored under the temp directory."""
    cfg = DEFAULT_CONFIG.copy()
    cfg["captures_dir"] = os.path.join(temp_dir, "captures")
    return cfg


@pytest.fixture
def make_png() -> Callable[[str, int, int], str]:
    """Returns a helper that writes a blank PNG of the given size and returns its path."""

    def _make(path: str, width: int = 1200, height: int = 900) -> str:
        Image.new("RGB", (width, height), "white").save(path, format="PNG")
        return path

    return _make
