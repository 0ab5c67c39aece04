"""Pytest configuration and fixtures."""

# pylint: disable=redefined-outer-name

import threading
from dataclasses import dataclass, field
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from external_dns_plugin.app import create_app
from external_dns_plugin.core.config import Settings
from external_dns_plugin.core.models import Changes, Endpoint
from external_dns_plugin.core.provider import Provider


@dataclass
class FakeProvider(Provider):
    """Fake provider that records calls and returns canned results."""

    endpoints: list[Endpoint] = field(default_factory=list)
    fail_with: Optional[Exception] = None
    applied: list[Changes] = field(default_factory=list)
    adjusted: list[list[Endpoint]] = field(default_factory=list)
    compared: list[tuple[str, str, str]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def records(self) -> list[Endpoint]:
        if self.fail_with:
            raise self.fail_with
        with self.lock:
            return list(self.endpoints)

    def apply_changes(self, changes: Changes) -> None:
        if self.fail_with:
            raise self.fail_with
        with self.lock:
            self.applied.append(changes)
            self.endpoints = [
                e for e in self.endpoints if e not in changes.delete
            ] + list(changes.create)

    def adjust_endpoints(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        self.adjusted.append(endpoints)
        return endpoints

    def property_values_equal(self, name: str, previous: str, current: str) -> bool:
        self.compared.append((name, previous, current))
        return previous == current


@pytest.fixture
def test_settings():
    """Create test settings."""
    return Settings(
        dry_run=False,
        log_level="debug",
        webhook_read_timeout=5,
        webhook_write_timeout=10,
        sentry_dsn=None,
        _env_file=None,
    )


@pytest.fixture
def fake_provider():
    """Create a fake provider."""
    return FakeProvider()


@pytest.fixture
def app(test_settings, fake_provider):
    """Create a test application bound to the fake provider."""
    return create_app(test_settings, fake_provider)


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def www_a():
    """An A record endpoint."""
    return Endpoint(
        dns_name="www.example.com",
        targets=["192.0.2.1"],
        record_type="A",
        record_ttl=300,
        labels={"owner": "default"},
    )


@pytest.fixture
def mail_mx():
    """An MX record endpoint."""
    return Endpoint(
        dns_name="example.com",
        targets=["10 mx1.example.com", "20 mx2.example.com"],
        record_type="MX",
    )
