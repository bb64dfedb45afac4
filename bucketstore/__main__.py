"""
Bucketstore: authenticated per-user file storage
"""

import argparse
import json
import logging
import os
import secrets
import string
import sys
from pathlib import Path

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from bucketstore.config import ENV_PREFIX, RESERVED_USERNAMES, get_settings, validate_settings

KEY_ALPHABET = string.ascii_letters + string.digits
KEY_LENGTH = 64


def generate_key(length: int = KEY_LENGTH) -> str:
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def log_users():
    logging.info("Registering users:")
    for username, data in get_settings().users.items():
        logging.info(f'username="{username}" and folder="{data.folder}"')


def run(args):
    settings = get_settings()
    host = args.host or settings.host
    port = int(args.port or settings.port)
    logging.info(f"Starting server at {host}:{port}, debug={not args.nodebug}")
    if warning := validate_settings():
        logging.warning(warning)
    log_users()
    settings.storage_folder.mkdir(parents=True, exist_ok=True)
    logging.info(
        "To change server config, create an .env file and/or set environment parameters,\n"
        f"{' ' * 26}see bucketstore/config.py for more information.\n"
        f"{' ' * 26}You can also run `python -m bucketstore create-env` to create an .env file with a new user\n"
    )
    log_config = "logging.yml" if Path("logging.yml").exists() else LOGGING_CONFIG
    uvicorn.run("bucketstore.api:app", host=host, reload=not args.nodebug, port=port, log_config=log_config)


def create_env(args):
    if args.username in RESERVED_USERNAMES:
        print(f"*** Username {args.username} is reserved, choose another one ***")
        sys.exit(1)
    if os.path.exists(".env"):
        print("*** File .env already exists, quitting ***")
        sys.exit(1)

    users = {args.username: dict(key=generate_key(), folder=args.username)}
    env = {
        f"{ENV_PREFIX}users": json.dumps(users),
        f"{ENV_PREFIX}default_user": args.username,
    }
    with open(".env", "w") as f:
        for key, val in env.items():
            f.write(f"{key}='{val}'\n")
    os.chmod(".env", 0o600)
    print(f"*** Created .env file with user {args.username} ***")


def list_users(_args):
    users = get_settings().users
    for username, data in users.items():
        print(f'username="{username}" and folder="{data.folder}"')
    if not users:
        print("(No users defined yet, use create-env to create a user)")


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m bucketstore")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("run", help="Run the storage server")
    p.add_argument(
        "--no-debug",
        action="store_true",
        dest="nodebug",
        help="Disable debug mode (no auto-reload)",
    )
    p.add_argument("-p", "--port", help="Port (default: from settings)")
    p.add_argument("--host", help="Host (default: from settings)")
    p.set_defaults(func=run)

    p = subparsers.add_parser("create-env", help="Create the .env file with a user with a random key")
    p.add_argument("-u", "--username", default="default_user", help="Name (and home folder) of the user")
    p.set_defaults(func=create_env)

    p = subparsers.add_parser("list-users", help="List configured users")
    p.set_defaults(func=list_users)

    args = parser.parse_args()

    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.INFO)

    args.func(args)


if __name__ == "__main__":
    main()
