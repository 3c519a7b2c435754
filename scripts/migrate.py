#!/usr/bin/env python
"""
Alembic wrapper that loads the repo .env first.

    python scripts/migrate.py upgrade
    python scripts/migrate.py revision "add cuisine index"
"""
import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("migrate")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run database migrations")
    sub = parser.add_subparsers(dest="command", required=True)
    upgrade = sub.add_parser("upgrade", help="Upgrade to a revision (default: head)")
    upgrade.add_argument("revision", nargs="?", default="head")
    revision = sub.add_parser("revision", help="Autogenerate a new revision")
    revision.add_argument("message")
    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    # Host-run migrations may need a different URL than the app container
    migrations_url = os.getenv("MIGRATIONS_DATABASE_URL")
    if migrations_url:
        os.environ["DATABASE_URL"] = migrations_url

    if args.command == "upgrade":
        cmd = ["alembic", "upgrade", args.revision]
    else:
        cmd = ["alembic", "revision", "--autogenerate", "-m", args.message]
    logger.info("Running: %s", " ".join(cmd))
    return subprocess.run(cmd, cwd=repo_root).returncode


if __name__ == "__main__":
    sys.exit(main())
