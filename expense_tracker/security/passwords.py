#!/usr/bin/env python3
import argparse
import getpass
import sys

from passlib.context import CryptContext

from expense_tracker.config import settings


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


pwd_context = build_password_context(settings.BCRYPT_ROUNDS)


def hash_password(plain_password: str) -> str:
    """Return a bcrypt hash for plain_password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a candidate password against a stored bcrypt hash."""
    if not stored_hash:
        return False
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except ValueError:
        # stored value is not a recognised hash
        return False


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Hash a password with the API's bcrypt settings, or check one against a stored hash."
    )
    parser.add_argument(
        "--verify", metavar="HASH", default=None,
        help="Check the entered password against HASH instead of printing a new hash"
    )
    args = parser.parse_args(argv)

    plain = getpass.getpass("Password: ")
    if not plain:
        print("No password entered. Exiting.")
        return 1

    if args.verify:
        if verify_password(plain, args.verify):
            print("[OK] Password matches.")
            return 0
        print("[ERROR] Password does not match.")
        return 3

    print(hash_password(plain))
    return 0


if __name__ == "__main__":
    sys.exit(main())
