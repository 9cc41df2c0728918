#!/usr/bin/env python3
"""
Redeliver submissions that were queued in the outbox when the support
requests API was unavailable.

Usage:
  python scripts/drain_outbox.py [--outbox-dir <dir>]

Exits 0 when the outbox is empty afterwards, 1 when entries remain.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from application.ports.http_client import HttpClientPort
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.outbox_drainer import DrainResult, OutboxDrainer
from application.services.submission_service import SubmissionClient, SubmissionSettings
from infrastructure.config.app_config import AppConfig
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.outbox.file_submission_outbox import FileSubmissionOutbox


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Redeliver queued support requests")
    parser.add_argument("--outbox-dir", help="Outbox directory (default: OUTBOX_DIR)")
    return parser


def drain(
    config: AppConfig,
    outbox_dir: Optional[str] = None,
    http_client: Optional[HttpClientPort] = None,
) -> DrainResult:
    settings = SubmissionSettings(
        api_url=config.submission_api_url,
        api_key=config.submission_api_key,
    )
    client = SubmissionClient(
        http_client or RequestsSessionHttpClient(timeout_sec=config.submission_timeout_sec),
        settings,
    )
    logger = ConsoleLogger(level=config.log_level)
    outbox = FileSubmissionOutbox(outbox_dir or str(config.outbox_dir), logger=logger)
    drainer = OutboxDrainer(client, outbox, logger)
    return drainer.drain()


def main(argv: Optional[List[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    config = AppConfig.from_env()
    setup_console_logging(level=config.log_level)

    result = drain(config, outbox_dir=args.outbox_dir)

    print(f"Delivered: {result.delivered}")
    print(f"Remaining: {result.remaining}")
    sys.exit(0 if result.remaining == 0 else 1)


if __name__ == "__main__":
    main()
