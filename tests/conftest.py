import pytest

from tests.fakes import FakeUnitOfWork, FixedClock, InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow(store):
    return FakeUnitOfWork(store)


@pytest.fixture
def clock():
    return FixedClock()
