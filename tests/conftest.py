"""
Pytest configuration and shared fixtures for all ttcall tests.

The lexer builds its lark grammar once, so the driver and lexer are shared
across the whole session. Both are stateless between calls.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from ttcall.compiler.driver import ExpansionDriver
from ttcall.frontend.lexer import Lexer


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_lexer():
    """Session-scoped lexer; lark grammar is loaded once with caching disabled."""
    return Lexer(cache_file=None)


@pytest.fixture(scope="session")
def session_driver():
    """Session-scoped expansion driver shared across ALL tests."""
    return ExpansionDriver()


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def driver(session_driver):
    """Class-scoped driver - returns session driver (stateless, safe to share)."""
    return session_driver


@pytest.fixture(scope="class")
def lexer(session_lexer):
    return session_lexer


# =============================================================================
# Test markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Environment isolation
# =============================================================================

@pytest.fixture(autouse=True)
def plain_diagnostics(monkeypatch):
    """Render diagnostics without ANSI colour so assertions can match text."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("TTCALL_RECURSION_LIMIT", raising=False)
    monkeypatch.delenv("TTCALL_STEP_LIMIT", raising=False)
    yield
