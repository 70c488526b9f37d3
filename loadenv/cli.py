# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Command line entry point.

Usage:
    # Run an environment
    loadenv environments/staging.yaml

    # Save raw metrics and the summary
    loadenv environments/staging.yaml --output-dir results/staging
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_environment
from .errors import LoadEnvError
from .report import print_summary, summarize, write_csv_summary, write_jsonl

LOGGER = logging.getLogger("loadenv.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a loadenv environment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("config", help="Path to the environment YAML file")
    parser.add_argument("--output-dir", "-o", type=str, help="Directory for JSONL/CSV output")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        return 1

    try:
        environment = load_environment(config_path)
        report = environment.run_sync()
    except LoadEnvError as e:
        LOGGER.error("Environment run failed: %s", e)
        return 1

    summaries = summarize(report)
    print_summary(summaries)

    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        write_jsonl(report, output_dir / "raw.jsonl")
        write_csv_summary(summaries, output_dir / "summary.csv")
        print(f"  Results saved to: {output_dir}/")

    return 0


if __name__ == "__main__":
    sys.exit(main())
