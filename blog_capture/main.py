import argparse
import dataclasses
import json
import logging
import os
import sys
from typing import Dict, List, Optional

import uvicorn
import yaml

from blog_capture.capture import run_batch
from blog_capture.config import load_config, setup_logger
from blog_capture.errors import EngineError
from blog_capture.models import CaptureItem, items_from_dicts, items_from_rows
from blog_capture.report import export_report
from blog_capture.server import create_app
from blog_capture.store import ArtifactStore

"""
Command-line entry point.

Capture a batch from an items file and optionally write the Excel report:
    blog-capture --items posts.json --report captures.xlsx

Serve the HTTP API instead:
    blog-capture --serve --port 3000

Items files are JSON or YAML: either a list of {date, name, link, title} mappings,
a mapping with an "items" list, or raw sheet rows ([date, name, link, title]).
"""

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "results.json"


def load_items(items_file: str) -> List[CaptureItem]:
    """
    Read capture items from a JSON or YAML file. Raise ValueError if none are usable.
    """
    with open(items_file, "r", encoding="utf-8") as f:
        if items_file.endswith(".json"):
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list) or not data:
        raise ValueError("No items found in items file.")

    if all(isinstance(entry, dict) for entry in data):
        items = items_from_dicts(data)
    else:
        items = items_from_rows(data)

    items = [item for item in items if item.link.startswith("http")]
    if not items:
        raise ValueError("No items found in items file.")
    return items


def write_results(session_dir: str, results: List[Dict[str, object]]) -> str:
    """Dump the batch results next to the screenshots so the report can be rebuilt later."""
    path = os.path.join(session_dir, RESULTS_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=2, ensure_ascii=False)
    return path


def main(argv: Optional[List[str]] = None) -> None:
    """
    CLI entry point:
    - Batch => --items posts.json [--report out.xlsx]
    - Server => --serve [--host 0.0.0.0] [--port 3000]
    - YAML config => --settings-file settings.yaml (timeouts, selectors, browser path, etc.)
    """
    parser = argparse.ArgumentParser(
        description=(
            "Capture blog post title regions with a browser-chrome header and build an Excel report."
        )
    )
    parser.add_argument("--items", help="JSON/YAML file with the posts to capture.")
    parser.add_argument("--report", help="Write the Excel report to this path.")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve.")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", 3000)),
        help="Port for --serve.",
    )
    parser.add_argument(
        "--settings-file",
        help="YAML file providing overrides (selectors, timeouts, captures_dir, etc.).",
    )

    args = parser.parse_args(argv)

    if args.items and args.serve:
        parser.error("You must specify either --items or --serve (not both).")
    if not args.items and not args.serve:
        parser.error("You must specify either --items or --serve")

    config = load_config(args.settings_file)
    setup_logger(config.get("log_file"))

    if args.serve:
        logger.info(f"Serving on http://{args.host}:{args.port}")
        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return

    items = load_items(args.items)
    store = ArtifactStore(config.get("captures_dir", "captures"))

    try:
        session = run_batch(items, store, config)
    except EngineError as e:
        logger.error(f"Capture aborted: {e}")
        sys.exit(1)

    results_path = write_results(
        session.directory, [dataclasses.asdict(r) for r in session.results]
    )
    logger.info(f"Results => {results_path}")

    if args.report:
        with open(args.report, "wb") as f:
            f.write(export_report(store, session.session_id, session.results, config))
        logger.info(f"Report => {args.report}")

    logger.info(
        f"Captured {session.success_count}/{session.total_count} posts into {session.directory}"
    )


if __name__ == "__main__":
    main()
