#!/usr/bin/env python
import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from tourbook.core.config import get_settings
from tourbook.core.errors import ValidationError
from tourbook.core.logging import configure_logging
from tourbook.storage.factory import build_repository
from tourbook.services.auth_service import AuthService

logger = logging.getLogger("seed_admin")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin account.")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.mongodb_uri:
        logger.error("MONGODB_URI is not set; set ADMIN_USERNAME and ADMIN_PASSWORD to seed the in-memory store instead")
        sys.exit(1)

    password = args.password or getpass.getpass("Password: ")
    auth = AuthService(build_repository(settings), jwt_secret=settings.jwt_secret)
    try:
        admin = auth.create_admin(args.username, password)
    except ValidationError as exc:
        logger.error("Could not create admin: %s", exc.message)
        sys.exit(1)
    logger.info("Admin %s ready (id %s)", admin.username, admin.id)


if __name__ == "__main__":
    main()
