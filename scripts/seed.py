#!/usr/bin/env python3
# scripts/seed.py - Seed the permission catalogue and provision a school with its Super Admin
import argparse
import logging
import sys

from schooldesk.core.db import db_manager
from schooldesk.services.provisioning import provision_school, seed_permissions

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("seed")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Provision a school for SchoolDesk")
    parser.add_argument("--permissions-only", action="store_true", help="Only seed the permission catalogue")
    parser.add_argument("--name", help="School name")
    parser.add_argument("--code", help="Unique school code, stored upper-case")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", help="At least 6 characters")
    parser.add_argument("--admin-email")
    parser.add_argument("--email", help="School contact email")
    parser.add_argument("--phone", help="School contact phone")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if not args.permissions_only and not (args.name and args.code and args.admin_password):
        logger.error("--name, --code and --admin-password are required to provision a school")
        return 2

    try:
        with db_manager.transaction() as db:
            if args.permissions_only:
                added = seed_permissions(db)
                logger.info(f"Permission catalogue ready ({added} added)")
                return 0

            school_fields = {k: v for k, v in {"email": args.email, "phone": args.phone}.items() if v}
            school = provision_school(
                db,
                name=args.name,
                code=args.code,
                admin_username=args.admin_username,
                admin_password=args.admin_password,
                admin_email=args.admin_email,
                **school_fields,
            )
            logger.info(f"School ready: {school.name} ({school.code}), id {school.id}")
        return 0
    except ValueError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
