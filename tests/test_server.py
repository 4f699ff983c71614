"""
Tests for the process entry point (server.py).
The Flask app is never actually served: create_app is replaced.
"""
import logging

import pytest

from scorecard_report import server


class _FakeApp:
    def __init__(self):
        self.runs = []

    def run(self, host=None, port=None):
        self.runs.append((host, port))


class TestMain:
    def test_missing_config_exits_before_binding(self, smtp_env):
        smtp_env.delenv("SMTP_HOST")

        def never(settings):
            raise AssertionError("create_app must not be called")
        smtp_env.setattr(server, "create_app", never)

        with pytest.raises(SystemExit) as info:
            server.main()
        assert info.value.code == 1

    def test_invalid_port_exits(self, smtp_env):
        smtp_env.setenv("PORT", "eighty")
        smtp_env.setattr(server, "create_app", lambda settings: _FakeApp())
        with pytest.raises(SystemExit):
            server.main()

    def test_serves_on_configured_host_and_port(self, smtp_env):
        smtp_env.setenv("HOST", "127.0.0.1")
        smtp_env.setenv("PORT", "8081")
        app = _FakeApp()
        built = []

        def fake_create_app(settings):
            built.append(settings)
            return app
        smtp_env.setattr(server, "create_app", fake_create_app)

        assert server.main() == 0
        assert app.runs == [("127.0.0.1", 8081)]
        assert built[0].smtp.host == "smtp.test.local"


class TestConfigureLogging:
    def test_level_applied_to_root(self):
        server.configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG
        server.configure_logging("INFO")

    def test_unknown_level_falls_back_to_info(self):
        server.configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO
