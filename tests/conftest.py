"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.test_inputs import (
    get_benchmark_base_inputs,
    get_pref_and_split_promote_inputs,
    get_scenario_a_inputs,
    get_structure_base_inputs,
)


@pytest.fixture
def deal_inputs():
    """Reference 16-unit deal for the base engine."""
    return get_scenario_a_inputs()


@pytest.fixture
def structure_base():
    """Property assumptions for structure comparisons."""
    return get_structure_base_inputs()


@pytest.fixture
def benchmark_base():
    """Structure inputs with collaborator values supplied."""
    return get_benchmark_base_inputs()


@pytest.fixture
def promote_inputs():
    """Pref-then-split waterfall with a 90/10 equity split."""
    return get_pref_and_split_promote_inputs()
