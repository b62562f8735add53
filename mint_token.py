"""Mint a registry access token for a caller identity.

Reads JWT_SECRET from .env / the environment, like the service.

    python mint_token.py alice
    python mint_token.py registry-resolver --minutes 43200
"""

import argparse
from datetime import timedelta

from src.pm_gateway.auth.jwt_handler import create_access_token


def main(argv: list[str] | None = None) -> str:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("identity", help="Caller identity placed in the `sub` claim")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (default: JWT_EXPIRE_MINUTES)",
    )
    args = parser.parse_args(argv)
    if not args.identity.strip():
        parser.error("identity must be non-empty")
    if args.minutes is not None and args.minutes <= 0:
        parser.error("--minutes must be positive")

    expires_in = timedelta(minutes=args.minutes) if args.minutes else None
    token = create_access_token(args.identity, expires_in=expires_in)
    print(token)
    return token


if __name__ == "__main__":
    main()
