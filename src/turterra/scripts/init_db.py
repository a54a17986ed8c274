"""Create all tables for local development without running migrations."""
from __future__ import annotations

import argparse

from turterra.db.session import create_tables, drop_tables


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    args = parser.parse_args(argv)

    if args.reset:
        drop_tables()
    create_tables()
    print("Database initialized.")


if __name__ == "__main__":
    main()
