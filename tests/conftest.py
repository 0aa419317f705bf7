"""
Pytest configuration and shared fixtures
"""
import pytest
import sys
import os
from unittest.mock import Mock

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from statslite.config import Config
from statslite.hosts.base import HostAdapter
from statslite.settings import Settings
from fixtures.report_server import RawReplyServer, StubReportServer


class FakeHost(HostAdapter):
    """Host adapter that records scheduling and log calls"""

    def __init__(self, name="TestPlugin", version="1.0.0"):
        self.name = name
        self.version = version
        self.users = 3
        self.online_mode = True
        self.scheduled = []
        self.cancelled = []
        self.logs = []

    def get_process_name(self):
        return self.name

    def get_process_version(self):
        return self.version

    def get_host_version_string(self):
        return "TestServer 2.0 (MC: 1.8.9)"

    def get_active_user_count(self):
        return self.users

    def is_authenticated_mode(self):
        return self.online_mode

    def schedule_repeating(self, interval_seconds, callback):
        handle = object()
        self.scheduled.append((interval_seconds, callback, handle))
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)

    def log(self, level, message, error=None):
        self.logs.append((level, message, error))


@pytest.fixture(scope="session")
def qapp():
    """Create QCoreApplication instance for Qt tests"""
    QtCore = pytest.importorskip("PyQt6.QtCore")
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication(sys.argv)
    yield app
    # Don't quit - let pytest handle cleanup


@pytest.fixture
def fake_host():
    """Recording host adapter"""
    return FakeHost()


@pytest.fixture
def mock_backend():
    """Backend whose submit() succeeds unless told otherwise"""
    backend = Mock()
    backend.submit.return_value = None
    return backend


@pytest.fixture
def settings(tmp_path):
    """Settings isolated to a temporary config directory"""
    return Settings(debug=False, config_dir=tmp_path)


@pytest.fixture
def config_path(tmp_path):
    """Path for a statslite.properties file that does not exist yet"""
    return tmp_path / "statslite.properties"


@pytest.fixture
def fixed_config():
    """Static config provider"""
    provider = Mock()
    provider.reload.return_value = Config(opt_out=False, unique_id="00000000-0000-0000-0000-000000000000")
    return provider


@pytest.fixture
def report_server():
    """Local stub of the MCStats report endpoint"""
    server = StubReportServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def raw_reply_server():
    """Factory for servers that answer with fixed raw bytes"""
    servers = []

    def _create(reply):
        server = RawReplyServer(reply)
        server.start()
        servers.append(server)
        return server

    yield _create
    for server in servers:
        server.stop()
