"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Converter factories (default and with heuristics enabled)
- Parsed-node helpers for unit tests of single passes
- Test client (FastAPI TestClient)
- Authentication helpers
"""

from typing import Callable, Generator

import pytest
from bs4 import BeautifulSoup, Tag
from fastapi.testclient import TestClient

from oxy_converter.converter import (
    ConversionResult,
    ConverterConfig,
    HeuristicFlags,
    HtmlConverter,
)
from oxy_converter.core.config import settings
from oxy_converter.core.security import create_access_token
from oxy_converter.main import app


# ---------------------------------------------------------------------------
# CONVERTER FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def converter() -> HtmlConverter:
    """Converter with default configuration."""
    return HtmlConverter()


@pytest.fixture
def convert(converter: HtmlConverter) -> Callable[..., ConversionResult]:
    """
    Convert HTML and assert success.

    Usage:
        result = convert("<div>...</div>", starting_node_id=10)
    """
    def _convert(html: str, **options) -> ConversionResult:
        result = converter.convert(html, options)
        assert result.success, result.error
        return result

    return _convert


@pytest.fixture
def heuristic_converter() -> Callable[..., HtmlConverter]:
    """Factory for converters with selected heuristics enabled."""
    def _factory(**flags) -> HtmlConverter:
        return HtmlConverter(ConverterConfig(heuristics=HeuristicFlags(**flags)))

    return _factory


# ---------------------------------------------------------------------------
# NODE HELPERS
# ---------------------------------------------------------------------------

@pytest.fixture
def node() -> Callable[[str], Tag]:
    """Parse a fragment and return its first element."""
    def _node(html: str) -> Tag:
        soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
        return soup.find(True)

    return _node


# ---------------------------------------------------------------------------
# API FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """Test client with auth disabled (the default)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_required(monkeypatch):
    """Require Bearer tokens for the duration of a test."""
    monkeypatch.setattr(settings, "AUTH_REQUIRED", True)


@pytest.fixture
def auth_headers() -> dict:
    """
    Authorization headers with a valid token.

    Returns:
        Dict with Authorization header
    """
    token = create_access_token(subject="test-client")
    return {"Authorization": f"Bearer {token}"}
