"""Shared pytest configuration and fixtures for the gps_stream test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from gps_stream.gps_core.parsers.nmea_parser import build_sentence  # noqa: E402


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "hardware: mark test as requiring physical hardware"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require physical hardware",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

RMC_EXAMPLE = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A\r\n"


@pytest.fixture
def rmc_sentence() -> bytes:
    """The canonical RMC example sentence."""
    return RMC_EXAMPLE


@pytest.fixture
def gga_sentence() -> bytes:
    return build_sentence("GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,")


@pytest.fixture
def sample_stream(rmc_sentence, gga_sentence) -> bytes:
    """A few sentences with line noise between them."""
    return (
        b"\x00\xffgarbage"
        + gga_sentence
        + rmc_sentence
        + b"noise\r\n"
        + build_sentence("GPVTG,054.7,T,034.4,M,005.5,N,010.2,K")
        + build_sentence("GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1")
    )


@pytest.fixture
def nmea_capture(tmp_path, sample_stream) -> Path:
    """sample_stream written to a capture file."""
    path = tmp_path / "capture.nmea"
    path.write_bytes(sample_stream)
    return path


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_serial_device():
    """Create a mock serial device for testing."""
    from tests.infrastructure.mocks.serial_mocks import MockSerialDevice
    return MockSerialDevice()


@pytest.fixture
def mock_gps_device():
    """Create a mock GPS device for testing."""
    from tests.infrastructure.mocks.serial_mocks import MockGPSDevice
    return MockGPSDevice()
