from __future__ import annotations

import redis


def create_redis(url: str) -> redis.Redis:
    """Client for the session and character records.

    Connecting is lazy: an unreachable server only shows up as `redis.RedisError`
    on first use, which the stores log and ride out.
    """

    # decode_responses=True => strings in/out instead of bytes
    return redis.Redis.from_url(url, decode_responses=True)
