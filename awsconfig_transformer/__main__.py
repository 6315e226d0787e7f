"""Entry point for `python -m awsconfig_transformer` and the console script.

Usage:
    AWSCONFIG_STREAM_APPLIANCE_ENDPOINT=https://... python -m awsconfig_transformer < events.jsonl
"""

from __future__ import annotations

import asyncio

from awsconfig_transformer.app import main


def run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
