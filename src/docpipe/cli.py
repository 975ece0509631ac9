"""Command-line entry point for running aggregation queries.

Usage:
    docpipe list
    docpipe run top_favorite_fruits --data-dir ./data
    docpipe exec my_pipeline.json --collection users
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from docpipe.core.config import AppSettings
from docpipe.core.exceptions import ConfigurationError, DocPipeError
from docpipe.core.logging_config import setup_logging
from docpipe.engine.executor import PipelineExecutor
from docpipe.models.literals import parse_pipeline
from docpipe.persistence import JsonFileCollectionSource, create_source
from docpipe.persistence.extjson import default
from docpipe.queries.playground import get_query, list_queries

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docpipe", description="Run aggregation pipelines over JSON collections")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List the named playground queries")

    def add_source_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--data-dir", default=None, help="Directory holding <collection>.json files")
        p.add_argument("--collection", default=None, help="Collection name (default from settings)")

    run = sub.add_parser("run", help="Run a named playground query")
    run.add_argument("name", help="Query name (see 'docpipe list')")
    add_source_args(run)

    exe = sub.add_parser("exec", help="Run a pipeline read from a JSON file")
    exe.add_argument("pipeline", help="Path to a JSON array of stage documents")
    add_source_args(exe)

    return parser


def _load_pipeline_file(path: str) -> Any:
    try:
        literals = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot read pipeline file {path}: {exc}") from exc
    return parse_pipeline(literals, name=Path(path).stem)


def run(args: argparse.Namespace, settings: AppSettings) -> int:
    if args.command == "list":
        for name, description in list_queries():
            print(f"{name:36} {description}")
        return 0

    pipeline = get_query(args.name) if args.command == "run" else _load_pipeline_file(args.pipeline)
    source = JsonFileCollectionSource(args.data_dir) if args.data_dir else create_source(settings)
    collection = args.collection or settings.storage.collection

    docs = source.load(collection)
    logger.info("Loaded %d documents from collection %r", len(docs), collection)
    results = PipelineExecutor(settings.executor).execute(docs, pipeline)
    print(json.dumps(results, indent=2, default=default))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    setup_logging(settings)
    try:
        return run(args, settings)
    except DocPipeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
