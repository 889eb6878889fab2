#!/usr/bin/env python
import os
import subprocess
import sys
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent
DEV_ADMIN_EMAIL = os.getenv("DEV_ADMIN_EMAIL", "admin@local.dev")
DEV_ADMIN_PASSWORD = os.getenv("DEV_ADMIN_PASSWORD", "admin")


def run(command: list[str]) -> None:
    subprocess.check_call(command, cwd=BASE_DIR)


def main() -> None:
    # PostgreSQL unless USE_SQLITE=1 is set in the environment or .env.
    os.environ.setdefault("USE_SQLITE", os.getenv("USE_SQLITE", "0"))
    run([sys.executable, "manage.py", "migrate"])
    run(
        [
            sys.executable,
            "manage.py",
            "shell",
            "-c",
            (
                "from django.contrib.auth.models import User; "
                f"User.objects.filter(username='{DEV_ADMIN_EMAIL}').exists() or "
                f"User.objects.create_superuser('{DEV_ADMIN_EMAIL}','{DEV_ADMIN_EMAIL}','{DEV_ADMIN_PASSWORD}')"
            ),
        ]
    )
    run([sys.executable, "manage.py", "runserver", os.getenv("BIND_ADDRESS", "0.0.0.0:8000")])


if __name__ == "__main__":
    main()
