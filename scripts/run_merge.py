#!/usr/bin/env python3
"""Filter summary statistics files and merge significant variants into one table."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from summerge import (  # noqa: E402
    ConfigurationValidator,
    FileConfigurationLoader,
    PipelineConfiguration,
    SourceFile,
    SummaryPipeline,
)
from summerge.config import DEFAULT_BLOCK_SIZE, DEFAULT_BUFFER_SIZE  # noqa: E402
from summerge.storage import DuckDBParquetStorage  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Merge significant variants across summary statistics files."
    )
    parser.add_argument(
        "--config",
        action="append",
        required=True,
        help="File configuration name from config/files or a JSON path. Repeat once per input.",
    )
    parser.add_argument(
        "--input",
        action="append",
        required=True,
        help="Summary statistics file (plain or gzipped). Repeat in --config order.",
    )
    parser.add_argument(
        "--configs-dir",
        default=None,
        help="Optional custom file configuration directory",
    )
    parser.add_argument("--output-tsv", required=True, help="Merged output path")
    parser.add_argument(
        "--include-cpra",
        action="store_true",
        help="Prefix each row with chromosome, position, ref and alt.",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help="Bytes read per chunk to control memory usage.",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=DEFAULT_BLOCK_SIZE,
        help="Variants per partition.",
    )
    parser.add_argument("--db-path", default=None, help="Optional DuckDB output path")
    parser.add_argument("--parquet-path", default=None, help="Optional Parquet output path")
    parser.add_argument(
        "--table-name",
        default="merged_statistics",
        help="DuckDB table name used with --db-path.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("summerge.run_merge")

    if len(args.config) != len(args.input):
        raise ValueError(
            f"Got {len(args.config)} --config values for {len(args.input)} --input files"
        )
    if bool(args.db_path) != bool(args.parquet_path):
        raise ValueError("--db-path and --parquet-path must be given together")

    loader = FileConfigurationLoader(args.configs_dir, validator=ConfigurationValidator())
    sources = [
        SourceFile(path=Path(input_path), configuration=loader.load(config_ref))
        for config_ref, input_path in zip(args.config, args.input)
    ]

    storage = None
    if args.db_path:
        storage = DuckDBParquetStorage(
            db_path=args.db_path,
            parquet_path=args.parquet_path,
            table_name=args.table_name,
        )

    pipeline = SummaryPipeline(
        sources=sources,
        pipeline_config=PipelineConfiguration(
            buffer_size=args.buffer_size,
            block_size=args.block_size,
        ),
        include_cpra=args.include_cpra,
        storage=storage,
    )
    report = pipeline.run()

    output_path = Path(args.output_tsv)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    text = report.table.to_text()
    output_path.write_text(text + "\n" if text else "")
    logger.info("Wrote %d rows to %s", report.row_count, output_path)

    payload = {
        "sources": [str(source.path) for source in sources],
        "tags": [source.configuration.tag for source in sources],
        "variants": report.variant_count,
        "partitions": report.partition_count,
        "rows": report.row_count,
        "output_tsv": str(output_path),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
