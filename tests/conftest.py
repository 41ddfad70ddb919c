"""
Shared fixtures and test doubles for resource_pool tests.
"""
from typing import List, Optional

import pytest

from resource_pool.errors import ResourceCreationError


class MockResource:
    """In-memory resource that can be closed externally or made to misbehave"""

    def __init__(
        self,
        number: int = 0,
        *,
        fail_is_closed: bool = False,
        fail_close: bool = False,
        close_log: Optional[List[int]] = None,
    ) -> None:
        self.number = number
        self.close_log = close_log
        self.closed = False
        self.close_calls = 0
        self.fail_is_closed = fail_is_closed
        self.fail_close = fail_close

    def is_closed(self) -> bool:
        if self.fail_is_closed:
            raise ConnectionError("transport is gone")
        return self.closed

    def close(self) -> None:
        self.close_calls += 1
        if self.close_log is not None:
            self.close_log.append(self.number)
        if self.fail_close:
            raise ConnectionError("close failed")
        self.closed = True

    def __repr__(self) -> str:
        return f"<MockResource #{self.number} closed={self.closed}>"


class MockResourceFactory:
    """
    Factory double that counts how many resources it has created.

    With ``fail_after`` set, creation fails once that many resources exist.
    With ``close_log`` set, each resource appends its number there on close.
    """

    def __init__(
        self,
        fail_after: Optional[int] = None,
        error: Optional[Exception] = None,
        close_log: Optional[List[int]] = None,
    ) -> None:
        self.created: List[MockResource] = []
        self.close_log = close_log
        self.fail_after = fail_after
        self.error = error or ResourceCreationError("database unavailable")

    @property
    def count(self) -> int:
        return len(self.created)

    def create_connection(self) -> MockResource:
        if self.fail_after is not None and self.count >= self.fail_after:
            raise self.error
        resource = MockResource(self.count + 1, close_log=self.close_log)
        self.created.append(resource)
        return resource


@pytest.fixture
def factory():
    """Fresh counting factory for each test"""
    return MockResourceFactory()
