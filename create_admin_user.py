#!/usr/bin/env python3
"""
Admin Account Creator
Creates a dashboard admin account in the database configured by DATABASE_URL.

Usage:
    python create_admin_user.py admin@example.com --first-name Chef --last-name Stefan
"""
import argparse
import asyncio
import getpass
import sys

from chef_site.config import settings
from chef_site.database import Database
from chef_site.errors import AppError
from chef_site.schemas import UserCreate
from chef_site.services.users import UserService


async def create_admin(email: str, password: str, first_name: str, last_name: str) -> int:
    database = Database(settings.async_database_url)
    try:
        await database.connect()
        await database.init_schema()
        users = UserService(database)

        if await users.get_by_email(email) is not None:
            print(f"Admin user '{email}' already exists.")
            return 0

        user = await users.create(UserCreate(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role="admin",
        ))
        print(f"✅ Admin user '{user.email}' created successfully with ID: {user.id}")
        return 0
    except AppError as e:
        print(f"❌ Error creating admin user: {e.message}")
        return 1
    finally:
        await database.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create a dashboard admin account")
    parser.add_argument("email", help="Login email for the new account")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    args = parser.parse_args()

    password = getpass.getpass("Enter admin password: ")
    if not password:
        print("❌ Error: Password cannot be empty")
        sys.exit(1)
    if password != getpass.getpass("Confirm password: "):
        print("❌ Error: Passwords do not match")
        sys.exit(1)

    sys.exit(asyncio.run(create_admin(args.email, password, args.first_name, args.last_name)))


if __name__ == "__main__":
    main()
