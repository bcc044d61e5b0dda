"""
Global test configuration and fixtures
"""

import pytest

from helpers.tree_sitter_helpers import get_python_language, parse_python_document


@pytest.fixture
def python_language():
    """Python grammar handle"""
    return get_python_language()


@pytest.fixture
def make_document():
    """Factory: parse code into (document, source); documents are closed after the test"""
    documents = []

    def _make(code: str, **kwargs):
        document, source = parse_python_document(code, **kwargs)
        documents.append(document)
        return document, source

    yield _make

    for document in documents:
        document.close()


# Pytest hooks
def pytest_configure(config):
    """Register markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real grammar)")


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory"""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)
