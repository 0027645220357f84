"""Concurrency control for wallet provisioning.

Provides per-(user, symbol) locking so that duplicate concurrent requests
for the same wallet generate it only once within this process.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

logger = logging.getLogger(__name__)

LockKey = tuple[str, str]

# Global lock registry: (user_id, symbol) -> asyncio.Lock
_wallet_locks: dict[LockKey, asyncio.Lock] = {}

# Coroutines holding or waiting on each lock
_lock_users: dict[LockKey, int] = {}


class LockTimeoutError(Exception):
    """Raised when a lock cannot be acquired within the timeout period."""

    pass


def get_wallet_lock(user_id: str, symbol: str) -> asyncio.Lock:
    """Get or create the lock for a (user, symbol) pair.

    Runs without awaiting, so lookup and creation cannot interleave with
    another coroutine.
    """
    key = (user_id, symbol)
    lock = _wallet_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _wallet_locks[key] = lock
    return lock


def _release_user(key: LockKey) -> None:
    remaining = _lock_users.get(key, 0) - 1
    if remaining > 0:
        _lock_users[key] = remaining
        return
    # Last holder or waiter gone
    _lock_users.pop(key, None)
    _wallet_locks.pop(key, None)


@asynccontextmanager
async def wallet_lock(
    user_id: str,
    symbol: str,
    timeout: Optional[float] = 30.0,
):
    """Hold exclusive access to one user's wallet for one symbol.

    The lock is dropped from the registry once nothing holds or awaits it.

    Args:
        user_id: Identity provider user ID
        symbol: Asset symbol
        timeout: Maximum time to wait for lock (None = wait forever)

    Example:
        async with wallet_lock(user_id, "BTC"):
            # read, generate and persist atomically
            pass
    """
    key = (user_id, symbol)
    lock = get_wallet_lock(user_id, symbol)
    _lock_users[key] = _lock_users.get(key, 0) + 1

    try:
        if timeout:
            await asyncio.wait_for(lock.acquire(), timeout=timeout)
        else:
            await lock.acquire()
    except asyncio.TimeoutError:
        _release_user(key)
        logger.warning(f"Lock timeout for user {user_id} {symbol} after {timeout}s")
        raise LockTimeoutError(
            f"Could not acquire wallet lock for user {user_id} {symbol} within {timeout}s"
        )
    except BaseException:
        _release_user(key)
        raise

    logger.debug(f"Lock acquired for user {user_id}: {symbol}")
    try:
        yield
    finally:
        lock.release()
        _release_user(key)
        logger.debug(f"Lock released for user {user_id}: {symbol}")


def active_lock_count() -> int:
    """Number of (user, symbol) locks currently registered."""
    return len(_wallet_locks)


def clear_wallet_locks() -> None:
    """Clear all wallet locks (useful for testing)."""
    _wallet_locks.clear()
    _lock_users.clear()
