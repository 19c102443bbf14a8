"""
Create Admin User Script
Creates the first super_admin account (auth user + profile with the full
permission set). Requires SUPABASE_SERVICE_ROLE_KEY.

Usage: python -m ims.scripts.create_admin --email admin@example.com --password ... --name "Store Admin"
"""

import argparse
import sys
import logging

from fastapi import HTTPException

from ims.config.settings import settings
from ims.core.access import UserRole
from ims.database.supabase_client import get_service_supabase
from ims.modules.users.schemas import UserCreate
from ims.modules.users.service import UserService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create a super_admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Super Admin")
    parser.add_argument("--phone", default=None)
    return parser.parse_args(argv)


def create_admin(service: UserService, email: str, password: str, name: str, phone=None):
    """Create a super_admin user; returns the created profile"""
    user = service.create_user(UserCreate(
        full_name=name,
        email=email,
        password=password,
        phone=phone,
        role=UserRole.SUPER_ADMIN
    ))
    logger.info(f"User created successfully: {user.id} ({user.email})")
    return user


def main(argv=None):
    """Main function to create the admin user"""
    args = parse_args(argv)
    if not settings.supabase_service_role_key:
        logger.error("SUPABASE_SERVICE_ROLE_KEY is not configured")
        sys.exit(1)

    try:
        supabase = get_service_supabase()
        create_admin(UserService(supabase), args.email, args.password, args.name, args.phone)
    except HTTPException as e:
        logger.error(f"Error creating admin user: {e.detail}")
        sys.exit(1)


if __name__ == "__main__":
    main()
