"""Pytest configuration for llm2ui tests.

Provides the schemas, catalog and design tokens the validation and retry
tests share. Generators are always MockProvider or AsyncMock instances;
no test touches the network.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to the path for imports
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from llm2ui.catalog import create_default_catalog
from llm2ui.design_tokens import get_default_design_tokens


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (may use mocks)"
    )


# =============================================================================
# SCHEMA FIXTURES
# =============================================================================

@pytest.fixture
def valid_schema():
    """A small schema that passes every validation layer."""
    return {
        "version": "1.0",
        "root": {
            "id": "root",
            "type": "Container",
            "props": {"className": "flex flex-col gap-4 p-4"},
            "children": [
                {"id": "title", "type": "Text", "props": {"content": "Sign in"}},
                {"id": "email", "type": "Input", "props": {"type": "email", "placeholder": "Email"}},
                {"id": "submit", "type": "Button", "props": {"variant": "default"}},
            ],
        },
    }


@pytest.fixture
def catalog():
    """Fresh built-in component catalog."""
    return create_default_catalog()


@pytest.fixture
def tokens():
    """Fresh built-in design tokens."""
    return get_default_design_tokens()
