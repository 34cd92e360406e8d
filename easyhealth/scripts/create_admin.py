"""
Create the bootstrap administrator.

Idempotent: when a profile with the admin email already exists nothing is
written, whatever its role.

Usage:
    easyhealth-create-admin [--email EMAIL] [--password PASSWORD] [--full-name NAME]
"""

import argparse
import asyncio
import sys

from easyhealth.config import settings
from easyhealth.core.logging import logger
from easyhealth.database import Database
from easyhealth.features.auth.service import AuthService


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the EasyHealth administrator account")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    parser.add_argument("--full-name", dest="full_name", default=settings.ADMIN_FULL_NAME)
    return parser.parse_args(argv)


async def create_admin(email: str, password: str, full_name: str) -> bool:
    """Connect, ensure the admin exists, disconnect. Returns True if it was created."""
    await Database.connect_db()
    try:
        profile, created = await AuthService.ensure_admin(email, password, full_name)
    finally:
        await Database.close_db()

    if created:
        logger.info(f"Administrator {profile.email} created")
    else:
        logger.info(f"{profile.email} already exists ({profile.role.value}); nothing changed")
    return created


def main(argv=None) -> int:
    args = parse_args(argv)
    asyncio.run(create_admin(args.email, args.password, args.full_name))
    return 0


if __name__ == "__main__":
    sys.exit(main())
