"""Command line runner: parse an LP file and report what was read."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Optional

from .config import configure_logging, load_config_or_defaults
from .reader import LpFileReader

LOGGER = logging.getLogger("lpformat.runner")


def run(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Read an LP (.lp) file and report its size")
    parser.add_argument("path", help="LP file to read")
    parser.add_argument("--log-level")
    parser.add_argument("--config", help="YAML config file (default: repo_root/config.yaml)")
    parser.add_argument("--json", action="store_true", help="print the parsed model as JSON")
    args = parser.parse_args(argv)

    config = load_config_or_defaults(args.config, "lp_reader", LOGGER)
    configure_logging(config, args.log_level)

    reader = LpFileReader(args.path)
    LOGGER.info("Number of objectives: %d", reader.number_of_objectives)
    LOGGER.info("Number of variables: %d", reader.number_of_variables)
    LOGGER.info("Number of constraints: %d", reader.number_of_constraints)
    if args.json:
        print(json.dumps(reader.to_payload(), indent=2))
    return 0 if reader.ok else 1


if __name__ == "__main__":
    raise SystemExit(run())
