import os

import redis

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Seconds before an unreleased event lock expires on its own
EVENT_LOCK_TIMEOUT = float(os.getenv("EVENT_LOCK_TIMEOUT", "10"))

# Seconds a registration waits for the event lock before giving up
EVENT_LOCK_WAIT = float(os.getenv("EVENT_LOCK_WAIT", "5"))


def get_redis_url():
    return REDIS_URL


def get_redis_client():
    """Get Redis client for locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)
