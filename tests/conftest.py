"""
Pytest Configuration and Fixtures
==================================

Shared test configuration and fixtures for all test modules.
Handles path setup for importing src modules.

Author: Robot Programming Project Team
License: MIT
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import numpy as np

from src.control.config import RobotConfig
from src.control.controller import RobotSession
from src.control.transport import SimulatedTransport


# =============================================================================
# Global Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def random_seed():
    """Set random seed for reproducibility."""
    np.random.seed(42)
    return 42


@pytest.fixture(scope="session")
def project_root_path():
    """Get project root path."""
    return project_root


@pytest.fixture
def robot_config():
    """Nominal AL5D configuration."""
    return RobotConfig.default()


@pytest.fixture
def simulated_transport():
    """Simulated servo controller."""
    return SimulatedTransport()


@pytest.fixture
def robot(robot_config, simulated_transport):
    """Open session on the simulated transport."""
    session = RobotSession(robot_config, simulated_transport)
    session.open()
    yield session
    session.close()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "hardware: marks tests requiring hardware")
