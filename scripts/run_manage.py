#!/usr/bin/env python
"""
Run Django management commands with .env values taking precedence.

A DATABASE_URL exported in the shell (often a stale localhost URL) would
otherwise win over the one in .env.

Usage:
    python scripts/run_manage.py <command> [args...]

Examples:
    python scripts/run_manage.py migrate
    python scripts/run_manage.py ingest_brand_vectors --brand-id <uuid>
    python scripts/run_manage.py runserver
"""

import os
import sys
from pathlib import Path

from dotenv import dotenv_values

PROJECT_ROOT = Path(__file__).resolve().parent.parent
os.chdir(PROJECT_ROOT)
sys.path.insert(0, str(PROJECT_ROOT))


def load_env_with_override() -> None:
    """Load .env and force-override DATABASE_URL if .env defines one."""
    env_path = PROJECT_ROOT / ".env"
    if not env_path.exists():
        return

    env_vars = dotenv_values(env_path)
    for key, value in env_vars.items():
        if value is not None:
            os.environ.setdefault(key, value)

    env_value = env_vars.get("DATABASE_URL")
    if not env_value:
        return

    current = os.environ.get("DATABASE_URL", "")
    if current and current != env_value:
        print("Overriding DATABASE_URL from shell with the value in .env", file=sys.stderr)
        print(f"   Shell had: {current[:50]}...", file=sys.stderr)
        print(f"   Using .env: {env_value[:50]}...", file=sys.stderr)
    os.environ["DATABASE_URL"] = env_value


def main():
    load_env_with_override()
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "lumora.settings")

    from django.core.management import execute_from_command_line

    execute_from_command_line(["manage.py"] + sys.argv[1:])


if __name__ == "__main__":
    main()
