import json
import pytest
from pathlib import Path
from unittest.mock import Mock

from launchkit.modules.cancellation import CancellationSource
from tests.utils.test_logger import create_test_logger


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.log_info = Mock()
    logger.log_error = Mock()
    logger.log_warning = Mock()
    logger.log_fatal = Mock()
    logger.log_debug = Mock()
    logger.is_info_enabled = True
    logger.is_fatal_enabled = True
    logger.is_debug_enabled = False
    return logger

@pytest.fixture
def test_logger():
    """Create a logger capturing messages in order."""
    return create_test_logger()

@pytest.fixture
def token():
    """An active cancellation token."""
    return CancellationSource().token

@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document into the temporary directory and return its path."""
    def write(name: str, data: dict) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return write
