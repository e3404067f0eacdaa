"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest
from tree_sitter_language_pack import get_parser

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def go_parser():
    """Create a Go tree-sitter parser."""
    return get_parser("go")


@pytest.fixture
def provider_root():
    """Root of the fixture provider module (holds go.mod)."""
    return FIXTURES_DIR / "go" / "provider"


@pytest.fixture
def services_dir(provider_root):
    """Fixture provider services directory: network, secrets, docs, empty."""
    return provider_root / "internal" / "services"
