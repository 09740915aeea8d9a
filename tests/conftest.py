"""Pytest configuration and shared fixtures for the layoutslots test suite.

This module provides shared fixtures, test configuration, and sample
templates used across the unit and integration tests.
"""

from pathlib import Path
from typing import Generator

import pytest

from layoutslots.options import SessionOptions
from layoutslots.session import DocumentSession

PERSISTED_TEMPLATE = (
    "<mjml><mj-body>"
    '<mj-section css-class="header-section"><mj-column>'
    '<mj-image src="{{logo}}" alt="Logo" width="140px" />'
    '<mj-text align="center">{{content:headline}}</mj-text>'
    "</mj-column></mj-section>"
    "<mj-section><mj-column>"
    '<mj-image src="{{image:hero-banner}}" alt="Hero" />'
    "<mj-text>{{content:body-text}}</mj-text>"
    '<mj-button href="https://example.com">{{content:cta-text}}</mj-button>'
    "</mj-column></mj-section>"
    '<mj-section css-class="spotlight"><mj-column>'
    '<mj-image src="{{product:spotlight:0:image}}" alt="Product" />'
    "<mj-text>{{product:spotlight:0:name}}</mj-text>"
    "<mj-text>{{product:spotlight:0:price}}</mj-text>"
    '<mj-button href="{{product:spotlight:0:url}}">Shop Now</mj-button>'
    "</mj-column></mj-section>"
    '<mj-section css-class="footer-section"><mj-column>'
    "<mj-text>{{footer}}</mj-text>"
    "</mj-column></mj-section>"
    "</mj-body></mjml>"
)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def persisted_template() -> str:
    """Provide a persisted template using every marker kind."""
    return PERSISTED_TEMPLATE


@pytest.fixture
def template_file(tmp_path: Path, persisted_template: str) -> Generator[Path, None, None]:
    """Write the persisted template to a temporary file."""
    path = tmp_path / "template.mjml"
    path.write_text(persisted_template, encoding="utf-8")
    yield path


@pytest.fixture
def session() -> DocumentSession:
    """Provide a session loaded with the default layout."""
    doc_session = DocumentSession(SessionOptions())
    doc_session.load()
    return doc_session
