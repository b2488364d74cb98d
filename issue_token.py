"""Seed an access token into Redis for local testing.

Usage:
    python issue_token.py --user-id u1 --app-id 7 [--role admin] [--ttl 3600]

Writes access:<token> → {"userId", "role", "appId", "expiresAt"} and prints
the token. The gateway itself never writes tokens; in production they come
from the identity provider.
"""
import argparse
import asyncio
import json
import os
import secrets
import time

from dotenv import load_dotenv
from redis.asyncio import Redis

load_dotenv()

from filegate.ports.token_store_port import TOKEN_PREFIX  # noqa: E402


async def issue(user_id: str, app_id: int, role: str, ttl: int) -> str:
    client = Redis(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=int(os.getenv("REDIS_PORT", "6379")),
        password=os.getenv("REDIS_PASSWORD") or None,
        decode_responses=True,
    )
    token = secrets.token_urlsafe(32)
    record = {
        "userId": user_id,
        "role": role,
        "appId": app_id,
        "expiresAt": int(time.time() * 1000) + ttl * 1000,
    }
    try:
        # Store TTL mirrors expiresAt so stale records clean themselves up
        await client.set(f"{TOKEN_PREFIX}{token}", json.dumps(record), ex=ttl)
    finally:
        await client.aclose()
    return token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a filegate access token")
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--app-id", required=True, type=int)
    parser.add_argument("--role", default="")
    parser.add_argument("--ttl", default=3600, type=int, help="seconds")
    args = parser.parse_args()

    token = asyncio.run(issue(args.user_id, args.app_id, args.role, args.ttl))
    print(token)


if __name__ == "__main__":
    main()
