"""
Shared fixtures: fake generation provider, stores and an app client.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from codegen_cache.api.app import create_app
from codegen_cache.config import Settings
from codegen_cache.entities import EntryEntity
from codegen_cache.errors import StorageError
from codegen_cache.repositories import InMemoryEntryRepository
from codegen_cache.services import MemoService

API_KEY = "test-secret"


class FakeGenerationProvider:
    """Returns queued outputs (or raises queued errors) and records prompts."""

    def __init__(self, *outputs, delay: float = 0.0) -> None:
        self.outputs = list(outputs) or ["generated"]
        self.prompts: list[str] = []
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def model_name(self) -> str:
        return "fake-model"

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        result = self.outputs.pop(0) if len(self.outputs) > 1 else self.outputs[0]
        if isinstance(result, Exception):
            raise result
        return result

    async def is_available(self) -> bool:
        return True


class FailingWriteStore(InMemoryEntryRepository):
    """Memory store whose writes always fail."""

    def put(self, entry: EntryEntity) -> None:
        raise StorageError("disk full")


class FailingReadStore(InMemoryEntryRepository):
    """Memory store whose reads always fail."""

    def get(self, device_name: str) -> EntryEntity | None:
        raise StorageError("database is locked")


@pytest.fixture
def store():
    return InMemoryEntryRepository()


@pytest.fixture
def provider():
    return FakeGenerationProvider("import machine\nled.on()")


@pytest.fixture
def service(store, provider):
    return MemoService.create(store=store, provider=provider, single_flight=True)


@pytest.fixture
def test_settings():
    return Settings(service_api_key=API_KEY, store_backend="memory")


@pytest.fixture
def client(test_settings, store, provider):
    """Create a test client with the lifespan running."""
    app = create_app(config=test_settings, store=store, provider=provider)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-API-Key": API_KEY}
