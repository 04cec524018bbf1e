"""
Shared pytest fixtures for the intl_extract test suite.

Usage in tests:
    def test_something(session, printed):
        session.extract_unit(build_unit(...))
        assert printed == session.warnings
"""

import pytest

from intl_extract.config import ExtractionConfig
from intl_extract.extraction import ExtractionSession


@pytest.fixture
def printed():
    """List that collects everything passed to on_message."""
    return []


@pytest.fixture
def config():
    """Default extraction config; tests may change flags before use."""
    return ExtractionConfig()


@pytest.fixture
def session(config, printed):
    """
    ExtractionSession reporting into ``printed`` instead of stdout.

    Example:
        def test_strict(config, session):
            config.allow_embedded_plurals_and_genders = False
            session.extract_unit(unit)
    """
    session = ExtractionSession(config, on_message=printed.append)
    session.origin = "test.dart"
    return session
