# SPDX-License-Identifier: MIT
"""Command-line entry point for the hook and for on-demand pruning."""

from __future__ import annotations

import argparse

from editguard.hook import main


def cli() -> None:
    parser = argparse.ArgumentParser(description="editguard pre-edit security reminder hook")
    parser.add_argument(
        "--state-dir",
        default=None,
        help="State directory (overrides EDITGUARD_STATE_DIR env var)",
    )
    parser.add_argument(
        "--prune",
        action="store_true",
        help="Drop expired session state and exit without reading stdin",
    )
    args = parser.parse_args()
    main(state_dir=args.state_dir, prune_only=args.prune)


if __name__ == "__main__":
    cli()
