# ============================================================================
# app/services/appointment/booking_lock.py
# Serialization point for "read existing, check capacity, insert"
# ============================================================================
import logging
from contextlib import contextmanager
from datetime import date
from typing import Optional

import redis

from app.config.redis import RedisKeys, get_redis
from app.config.settings import get_settings
from app.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

DATABASE_BACKEND = "database"
REDIS_BACKEND = "redis"


def uses_row_lock(backend: Optional[str] = None) -> bool:
    """True when the professional row lock is the serialization point"""
    return (backend or get_settings().BOOKING_LOCK_BACKEND) != REDIS_BACKEND


@contextmanager
def booking_lock(
        owner: str,
        professional_id,
        day: date,
        backend: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None
):
    """
    Hold the per-(owner, professional, day) booking lock.

    With the database backend this is a no-op: the caller loads the
    professional row FOR UPDATE inside its transaction instead. With the
    redis backend a distributed lock guards the key across app instances.
    """
    settings = get_settings()
    if uses_row_lock(backend):
        yield
        return

    client = redis_client or get_redis()
    key = RedisKeys.BOOKING_LOCK.format(
        owner=owner, professional_id=professional_id, day=day.isoformat()
    )
    lock = client.lock(
        key,
        timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS,
        blocking_timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS,
    )

    try:
        acquired = lock.acquire()
    except redis.exceptions.RedisError as e:
        logger.error(f"Booking lock {key} unavailable: {e}")
        raise StoreUnavailable("Booking lock backend is unavailable") from e

    if not acquired:
        logger.warning(f"Timed out waiting for booking lock {key}")
        raise StoreUnavailable("Booking lock is busy, retry with the same idempotency key")

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockError:
            # Expired while held; the insert-then-verify step still ran
            logger.warning(f"Booking lock {key} expired before release")
