import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager


class KeyedLocks:
    """
    In-process asyncio locks keyed by entity ("user:7", "product:3").

    Several keys are always acquired in sorted order so two holders of
    overlapping key sets cannot deadlock. A lock is dropped once nobody
    holds or waits on it.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, *keys: str):
        registered = []
        acquired = []
        try:
            for key in sorted(set(keys)):
                lock = self._locks.setdefault(key, asyncio.Lock())
                self._waiters[key] += 1
                registered.append(key)
                await lock.acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
            for key in registered:
                self._waiters[key] -= 1
                if not self._waiters[key]:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


def user_key(user_id: int) -> str:
    return f"user:{user_id}"


def product_key(product_id: int) -> str:
    return f"product:{product_id}"


entity_locks = KeyedLocks()
