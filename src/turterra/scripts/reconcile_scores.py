"""Recompute every denormalized score, hot rank and comment count.

Run after an outage in which best-effort recomputes may have failed:

    python -m turterra.scripts.reconcile_scores
"""
from __future__ import annotations

import argparse
import logging
import sys

from turterra.db.session import SessionLocal
from turterra.services.scoring import reconcile_scores


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    with SessionLocal() as db:
        changed = reconcile_scores(db)
    print(f"Reconciled scores; {changed} rows changed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
