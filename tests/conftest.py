"""Fixtures and configuration for pytest."""

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "backend: mark test as a backend test")
    config.addinivalue_line("markers", "pydantic: mark test as importing generated models")
