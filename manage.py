from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command
from alembic.config import Config


def get_alembic_config() -> Config:
    here = Path(__file__).resolve().parent
    cfg = Config(str(here / "alembic.ini"))
    cfg.set_main_option("script_location", str(here / "alembic"))
    return cfg


def cmd_upgrade(revision: str) -> None:
    command.upgrade(get_alembic_config(), revision)


def cmd_downgrade(revision: str) -> None:
    command.downgrade(get_alembic_config(), revision)


def cmd_reset_hunts() -> None:
    from hunterlog.core.hunts.services import reset_expired_hunts
    from hunterlog.database.session import SessionLocal

    db = SessionLocal()
    try:
        count = reset_expired_hunts(db)
    finally:
        db.close()
    print(f"reset {count} hunts")


def main() -> None:
    parser = argparse.ArgumentParser(description="HunterLog management commands")
    subparsers = parser.add_subparsers(dest="command")

    upgrade_parser = subparsers.add_parser("upgrade", help="Apply migrations")
    upgrade_parser.add_argument("revision", nargs="?", default="head")

    downgrade_parser = subparsers.add_parser(
        "downgrade", help="Downgrade to a specific revision"
    )
    downgrade_parser.add_argument("revision", help="Revision id or -1, -2, ...")

    revision_parser = subparsers.add_parser(
        "revision", help="Create new alembic revision"
    )
    revision_parser.add_argument("-m", "--message", required=True)
    revision_parser.add_argument(
        "--autogenerate",
        action="store_true",
        help="Populate revision with schema diff from models",
    )

    subparsers.add_parser("current", help="Show the applied revision")
    subparsers.add_parser(
        "reset-hunts", help="Reopen hunts whose reset date has passed"
    )

    args = parser.parse_args()

    if args.command == "upgrade" or args.command is None:
        cmd_upgrade(getattr(args, "revision", "head"))
    elif args.command == "downgrade":
        cmd_downgrade(args.revision)
    elif args.command == "revision":
        command.revision(
            get_alembic_config(),
            message=args.message,
            autogenerate=args.autogenerate,
        )
    elif args.command == "current":
        command.current(get_alembic_config(), verbose=True)
    elif args.command == "reset-hunts":
        cmd_reset_hunts()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
