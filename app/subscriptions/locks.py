"""
Per-customer distributed locking for subscription operations.

Subscribe, pause, resume and cancel for one customer are serialized with a
Redis lock so the check-charge-create sequence never interleaves with
another request for the same customer. Different customers use different
keys and never contend.

The lock is the first layer only: the ledger re-checks under
select_for_update and the database enforces a partial unique constraint,
so the one-non-terminal-subscription invariant holds even if the lock
expires or Redis is unavailable.

Usage:
    from subscriptions.locks import customer_lock

    with customer_lock(customer_id):
        orchestrate_subscribe(...)
"""

from __future__ import annotations

import logging
import time
import uuid as uuid_module
from typing import TYPE_CHECKING

from django.conf import settings
from django_redis import get_redis_connection

from subscriptions.exceptions import LockAcquisitionError

if TYPE_CHECKING:
    from typing import Any

    from redis import Redis

logger = logging.getLogger(__name__)


class DistributedLock:
    """
    Redis-based distributed lock with TTL.

    Features:
        - Automatic TTL prevents deadlocks from crashed processes
        - Token-based ownership prevents release by other holders
        - Blocking (bounded by timeout) and non-blocking acquisition
        - Context manager support

    Example:
        with DistributedLock("subscription:customer:42", ttl=30, timeout=5.0):
            orchestrator.subscribe(...)

    Args:
        key: Lock identifier (will be prefixed with "lock:")
        ttl: Lock TTL in seconds (auto-releases after this time)
        blocking: If True, acquire() waits until the lock is available
        timeout: Maximum wait time in seconds (only if blocking=True)
    """

    # Atomic check-and-delete so only the token holder releases
    RELEASE_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    RETRY_INTERVAL_SECONDS = 0.05

    def __init__(
        self,
        key: str,
        ttl: int = 30,
        blocking: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.key = f"lock:{key}"
        self.ttl = ttl
        self.blocking = blocking
        self.timeout = timeout
        self._token: str | None = None
        self._redis: Redis | None = None

    def _get_redis(self) -> Redis:
        """Get Redis connection (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis_connection("default")
        return self._redis

    def acquire(self) -> bool:
        """
        Acquire the lock.

        Returns:
            True once the lock is held

        Raises:
            LockAcquisitionError: If the lock couldn't be acquired
        """
        token = str(uuid_module.uuid4())
        redis = self._get_redis()

        if self.blocking:
            deadline = time.monotonic() + self.timeout
            while time.monotonic() < deadline:
                if self._try_acquire(redis, token):
                    return True
                time.sleep(self.RETRY_INTERVAL_SECONDS)

            logger.warning(
                "Lock acquisition timed out",
                extra={"lock_key": self.key, "timeout": self.timeout},
            )
            raise LockAcquisitionError(
                f"Failed to acquire lock '{self.key}' within {self.timeout}s",
                details={"key": self.key, "timeout": self.timeout},
            )

        if not self._try_acquire(redis, token):
            raise LockAcquisitionError(
                f"Lock '{self.key}' is already held",
                details={"key": self.key},
            )
        return True

    def _try_acquire(self, redis: Redis, token: str) -> bool:
        if redis.set(self.key, token, nx=True, ex=self.ttl):
            self._token = token
            return True
        return False

    def release(self) -> bool:
        """
        Release the lock if we hold it.

        Returns:
            True if the lock was released, False if we didn't hold it
        """
        if self._token is None:
            return False

        redis = self._get_redis()
        result = redis.eval(self.RELEASE_SCRIPT, 1, self.key, self._token)
        self._token = None
        if not result:
            logger.warning(
                "Lock expired before release",
                extra={"lock_key": self.key, "ttl": self.ttl},
            )
        return bool(result)

    @property
    def is_held(self) -> bool:
        return self._token is not None

    def __enter__(self) -> DistributedLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> bool:
        self.release()
        return False


def customer_lock_key(customer_id) -> str:
    return f"subscription:customer:{customer_id}"


def customer_lock(customer_id) -> DistributedLock:
    """
    Build the lock serializing lifecycle operations for one customer.

    TTL and wait timeout come from SUBSCRIPTION_LOCK_TTL_SECONDS and
    SUBSCRIPTION_LOCK_TIMEOUT_SECONDS.
    """
    return DistributedLock(
        customer_lock_key(customer_id),
        ttl=settings.SUBSCRIPTION_LOCK_TTL_SECONDS,
        blocking=True,
        timeout=settings.SUBSCRIPTION_LOCK_TIMEOUT_SECONDS,
    )
