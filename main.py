#!/usr/bin/env python3
"""Entry point for the Hyperlane CLI when run from a checkout."""

from hyperlane_cli.cli import run

if __name__ == "__main__":
    run()
