"""
Shared test fixtures and configuration for pytest
"""
import logging
import tempfile
from pathlib import Path

import pytest

from smallpop3.utils import logging as log_module
from smallpop3.utils.config import ClientOptions

from .test_helpers import MessageTestHelper, POP3TestHelper


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def client_options():
    """Client options with a short timeout"""
    return ClientOptions(default_timeout=0.5)


@pytest.fixture
def sample_message():
    """Sample message text with a folded Subject header"""
    return (
        "Return-Path: <alice@example.com>\r\n"
        "From: Alice <alice@example.com>\r\n"
        "To: bob@example.com\r\n"
        "Subject: Quarterly\r\n"
        " report\r\n"
        "Date: Mon, 19 Oct 2026 10:30:00 +0000\r\n"
        "Content-Type: text/plain; charset=utf-8\r\n"
        "Content-Transfer-Encoding: 7bit\r\n"
        "\r\n"
        "Numbers attached.\r\n"
        "\r\n"
        "Alice"
    )


@pytest.fixture
def fake_socket():
    """FakeSocket preloaded with a successful login"""
    return POP3TestHelper.create_fake_socket()


@pytest.fixture
def message_helper():
    return MessageTestHelper


@pytest.fixture
def isolated_logging():
    """Rebuild the package logger with default handlers after the test"""
    yield
    root = logging.getLogger(log_module.ROOT_LOGGER_NAME)
    for handler in root.handlers:
        handler.close()
    log_module._log_manager = None
    log_module.init_logging()
