#!/usr/bin/env python3
"""
Dashboard password tool.

Without arguments, prompts for a new password and prints its bcrypt hash, for
resetting an account directly in the database:

    UPDATE users SET password_hash = '<hash>' WHERE email = '<email>';

With --check HASH, prompts for a password and reports whether it matches the
given hash.
"""
import argparse
import getpass
import sys

from chef_site.utils.auth import hash_password, verify_password


def prompt_new_password() -> int:
    password = getpass.getpass("New password: ")
    if not password:
        print("❌ Password cannot be empty")
        return 1
    if getpass.getpass("Repeat password: ") != password:
        print("❌ Passwords do not match")
        return 1

    print("⏳ Hashing...")
    print(f"\n{hash_password(password)}\n")
    print("⚠️  Treat this hash like the password itself; do not commit it.")
    return 0


def check_password(password_hash: str) -> int:
    password = getpass.getpass("Password to check: ")
    if verify_password(password, password_hash):
        print("✅ Password matches the hash")
        return 0
    print("❌ Password does not match the hash")
    return 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate or check dashboard password hashes")
    parser.add_argument("--check", metavar="HASH", help="verify a password against an existing bcrypt hash")
    args = parser.parse_args()

    if args.check:
        return check_password(args.check)
    return prompt_new_password()


if __name__ == "__main__":
    sys.exit(main())
