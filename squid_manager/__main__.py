"""Run the management server with `python -m squid_manager`."""

from __future__ import annotations

import argparse

import uvicorn

from squid_manager.api.api_config import get_api_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    config = get_api_config()
    parser = argparse.ArgumentParser(description="Serve the squid management API and run the squid monitor.")
    parser.add_argument("--host", default=config.host)
    parser.add_argument("--port", type=int, default=config.port)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    uvicorn.run("squid_manager.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
