import os
import threading
import time
from collections import deque

import pytest  # noqa

# Provide a simple marker skip for live network calls if user explicitly disables them.
LIVE_NETWORK_DISABLED = os.environ.get('DISABLE_LIVE_INTEGRATION') in ('1', 'true', 'TRUE')


def pytest_configure(config):
    config.addinivalue_line("markers", "live_integration: needs a reachable Redis at REDIS_URL")


def pytest_runtest_setup(item):
    if LIVE_NETWORK_DISABLED and 'live_integration' in item.keywords:
        pytest.skip('Live integration tests disabled by DISABLE_LIVE_INTEGRATION env flag')


class FakeRedis:
    """The four list commands RedisJobQueue uses, with a real blocking BLPOP.

    Values are stored as bytes and replies are decoded only when
    decode_responses=True, the way redis-py does it.
    """

    def __init__(self, decode_responses=False):
        self.decode_responses = decode_responses
        self.lists = {}
        self.calls = []
        self._cond = threading.Condition()

    def _reply(self, value):
        if self.decode_responses and isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def ping(self):
        return True

    def rpush(self, name, *values):
        self.calls.append(("rpush", name))
        with self._cond:
            lst = self.lists.setdefault(name, deque())
            lst.extend(v.encode("utf-8") if isinstance(v, str) else v for v in values)
            self._cond.notify_all()
            return len(lst)

    def blpop(self, keys, timeout=0):
        self.calls.append(("blpop", tuple(keys), timeout))
        end = time.monotonic() + timeout
        with self._cond:
            while True:
                for k in keys:
                    if self.lists.get(k):
                        value = self.lists[k].popleft()
                        if not self.lists[k]:
                            del self.lists[k]
                        return (self._reply(k.encode("utf-8")), self._reply(value))
                remaining = end - time.monotonic()
                if remaining <= 0:
                    return None
                self._cond.wait(timeout=remaining)

    def delete(self, *names):
        self.calls.append(("delete",) + names)
        with self._cond:
            return sum(1 for n in names if self.lists.pop(n, None) is not None)

    def llen(self, name):
        self.calls.append(("llen", name))
        with self._cond:
            return len(self.lists.get(name, ()))

    def lindex(self, name, index):
        with self._cond:
            lst = self.lists.get(name)
            return self._reply(lst[index]) if lst else None

    def close(self):
        pass


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_redis_factory():
    return FakeRedis


@pytest.fixture
def redis_queue(fake_redis):
    from taskline.queue.adapters.redis_queue import RedisConfig, RedisJobQueue

    return RedisJobQueue(RedisConfig(url="redis://127.0.0.1:6379/0", namespace="test"), client=fake_redis)


@pytest.fixture
def live_redis_queue():
    """RedisJobQueue against REDIS_URL with a throwaway namespace; skipped when unreachable."""
    url = os.environ.get('REDIS_URL')
    if not url:
        pytest.skip('REDIS_URL not set')
    from taskline.queue import QueueError, QueueIdentifier
    from taskline.queue.adapters.redis_queue import RedisConfig, RedisJobQueue

    try:
        q = RedisJobQueue.new(RedisConfig(url=url, namespace=f"taskline_test_{os.getpid()}"))
    except QueueError as e:
        pytest.skip(f'redis not reachable: {e}')
    for iden in QueueIdentifier:
        q.delete_all(iden)
    yield q
    for iden in QueueIdentifier:
        q.delete_all(iden)
    q.close()
