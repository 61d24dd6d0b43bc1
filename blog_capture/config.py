import logging
import os
from typing import Dict, Optional

import yaml

"""
Settings and logging for blog_capture.

Settings are a flat dictionary. DEFAULT_CONFIG holds every key; a YAML settings
file may override any subset of them, and a couple of deployment-specific values
can be overridden from the environment:

    BROWSER_EXECUTABLE_PATH => executable_path (e.g. /usr/bin/chromium in Docker)
    CAPTURES_DIR            => captures_dir

Example YAML:
    headless: true
    navigation_timeout_seconds: 45
    title_selectors:
      - ".se-title-text"
      - ".post-title"
"""

# ------------- Default Config -------------
DEFAULT_CONFIG = {
    "headless": True,
    "executable_path": None,
    "browser_args": [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--window-size=1200,900",
    ],
    "canvas_width": 1200,
    "viewport_height": 900,
    "navigation_timeout_seconds": 30,
    "title_margin_px": 50,
    "max_region_height_px": 600,
    "default_region_height_px": 400,
    "tab_label": "네이버 블로그",
    "title_selectors": [
        ".se-title-text",
        ".se-module-text.se-title-text",
        ".se_title .se_textView",
        ".se_title",
        ".htitle",
        ".tit_h3",
        ".pcol1 .itemSubjectBol498",
    ],
    "page_title_suffix": " : 네이버 블로그",
    "captures_dir": "captures",
    "report_image_width_px": 380,
    "report_px_per_point": 1.33,
    "report_row_padding_pt": 10,
    "report_empty_row_height_pt": 30,
    "log_file": None,
}

ENV_OVERRIDES = {
    "BROWSER_EXECUTABLE_PATH": "executable_path",
    "CAPTURES_DIR": "captures_dir",
}


def setup_logger(logfile_path: Optional[str] = None) -> None:
    """
    Configure a root logger at INFO level, outputting to console and, if given, a logfile.
    Overwrites logfile if it exists.
    """
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    # Clear existing handlers if any
    root_logger.handlers = []
    root_logger.addHandler(console_handler)

    if logfile_path:
        log_dir = os.path.dirname(logfile_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(logfile_path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def load_config(settings_file: Optional[str]) -> Dict[str, object]:
    """
    Load config from a YAML file if provided, else return defaults.
    Environment overrides are applied last.
    If the YAML is malformed or not a dict, raise ValueError.
    """
    config = DEFAULT_CONFIG.copy()
    if settings_file and os.path.exists(settings_file):
        with open(settings_file, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
            if not isinstance(user_config, dict):
                raise ValueError("Config file must define a dictionary of settings.")
            config.update(user_config)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value
    return config
