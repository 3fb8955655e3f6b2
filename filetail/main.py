#!/usr/bin/env python3
"""File Tailer — Entry Point."""

import sys
import time
import signal
import argparse
import logging

from filetail.config import load_yaml_config, load_config
from filetail.tailer import Tailer

logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, frame):
    global _running
    logger.info("Shutdown signal received, stopping...")
    _running = False


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Follow a file and print its records")
    parser.add_argument("path", help="File to follow")
    parser.add_argument(
        "--from-beginning", action="store_true",
        help="Emit records already in the file instead of starting at its end",
    )
    parser.add_argument(
        "--async", dest="emit_async", action="store_true",
        help="Deliver records on the next scheduling tick",
    )
    parser.add_argument(
        "--separator", default=None,
        help="Single-character record separator (escapes like \\n, \\t, \\0 accepted)",
    )
    parser.add_argument("--chunk-size", type=int, default=None, help="Bytes scanned per pass")
    parser.add_argument("--encoding", default=None, help="Text encoding of records (default: utf-8)")
    parser.add_argument("--polling", action="store_true", help="Poll with stat instead of native events")
    parser.add_argument("--poll-interval", type=float, default=None, help="Polling interval in seconds")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def _print_record(record: str):
    sys.stdout.write(record + "\n")
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [TAILER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args, load_yaml_config(args.config))
        tailer = Tailer(args.path, config)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except FileNotFoundError:
        logger.error("File not found: %s", args.path)
        return 1

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    tailer.on_record(_print_record)
    tailer.start()

    try:
        while _running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass

    tailer.stop()
    stats = tailer.stats.snapshot()
    logger.info("Stats: %d records, %d bytes consumed, %d reads, %d truncations",
                stats["records_emitted"], stats["bytes_consumed"],
                stats["reads_opened"], stats["truncations"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
