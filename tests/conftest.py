"""Shared fixtures: fake evaluation service and a manual clock."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

from evalproxy.core.exceptions.exceptions import UpstreamUnavailable
from evalproxy.services.analytics_service import AnalyticsService
from evalproxy.services.cache_store import CacheStore


class ManualClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEvaluationClient:
    """In-memory stand-in for EvaluationClient that records every call."""

    def __init__(self, users=None, posts=None, comments=None, numbers=None):
        self.users = users or []
        self.posts = posts or {}
        self.comments = comments or {}
        self.numbers = numbers or {}
        self.calls = []
        self.fail_on = set()
        self.error = lambda call: UpstreamUnavailable(str(call), "boom", status_code=503)
        self._lock = threading.Lock()

    def _record(self, call):
        with self._lock:
            self.calls.append(call)
        if call in self.fail_on or call[0] in self.fail_on:
            raise self.error(call)

    def count(self, name, key=None):
        return sum(1 for c in self.calls if c[0] == name and (key is None or c[1] == key))

    def get_numbers(self, category):
        self._record(("numbers", category))
        batches = self.numbers.get(category, [])
        return batches.pop(0) if batches else []

    def get_users(self):
        self._record(("users", None))
        return list(self.users)

    def get_user_posts(self, user_id):
        self._record(("posts", str(user_id)))
        return list(self.posts.get(str(user_id), []))

    def get_post_comments(self, post_id):
        self._record(("comments", post_id))
        return list(self.comments.get(post_id, []))

    def close(self):
        pass


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)


class StubSession(requests.Session):
    """Session whose request() returns canned responses and records calls."""

    def __init__(self, outcome):
        super().__init__()
        self.outcome = outcome
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def make_comments(n):
    return [{"id": i, "content": f"c{i}"} for i in range(n)]


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return CacheStore(ttl_seconds=300, clock=clock)


@pytest.fixture
def social_client():
    """Users A(3 comments), B(5), C(5), D(1) across their posts."""
    users = [("1", "A"), ("2", "B"), ("3", "C"), ("4", "D")]
    posts = {
        "1": [{"id": 10, "userid": 1, "content": "a1"}, {"id": 11, "userid": 1, "content": "a2"}],
        "2": [{"id": 20, "userid": 2, "content": "b1"}],
        "3": [{"id": 30, "userid": 3, "content": "c1"}, {"id": 31, "userid": 3, "content": "c2"}],
        "4": [{"id": 40, "userid": 4, "content": "d1"}],
    }
    comments = {
        10: make_comments(2),
        11: make_comments(1),
        20: make_comments(5),
        30: make_comments(5),
        31: make_comments(0),
        40: make_comments(1),
    }
    return FakeEvaluationClient(users=users, posts=posts, comments=comments)


@pytest.fixture
def analytics(social_client, cache):
    executor = ThreadPoolExecutor(max_workers=4)
    service = AnalyticsService(social_client, cache, executor=executor)
    yield service
    executor.shutdown(wait=True)
