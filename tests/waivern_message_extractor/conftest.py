"""Pytest configuration for waivern-message-extractor tests."""

import pytest

from waivern_message_extractor import PHPTokeniser


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that tokenise real PHP source with tree-sitter",
    )


@pytest.fixture(scope="session")
def php_tokeniser() -> PHPTokeniser:
    """Provide a shared tree-sitter PHP tokeniser."""
    return PHPTokeniser()
