"""Tests for configuration loading."""

import os
from pathlib import Path
from unittest import mock

from graph_commands import config


class TestConfig:
    def test_default_tenant_id(self):
        """TENANT_ID defaults to 'common' when not set."""
        assert config.TENANT_ID is not None

    def test_scopes_include_onenote(self):
        """Scopes should include OneNote permissions."""
        assert "Notes.ReadWrite" in config.SCOPES
        assert "Notes.Create" in config.SCOPES
        assert "Notes.Read" in config.SCOPES
        assert "User.Read" in config.SCOPES

    def test_scopes_include_service_principal_read(self):
        assert "Application.Read.All" in config.SCOPES

    def test_auth_dir_is_in_home(self):
        """AUTH_DIR should be under the user's home directory."""
        assert str(config.AUTH_DIR).startswith(str(Path.home()))
        assert ".graph-commands" in str(config.AUTH_DIR)

    def test_graph_base_has_no_trailing_slash(self):
        assert not config.GRAPH_BASE.endswith("/")

    def test_validate_raises_without_client_id(self):
        """validate() should raise SystemExit if CLIENT_ID is empty."""
        with mock.patch.object(config, "CLIENT_ID", ""):
            try:
                config.validate()
                assert False, "Should have raised SystemExit"
            except SystemExit as e:
                assert "MSGRAPH_CLIENT_ID" in str(e)

    def test_validate_passes_with_client_id(self):
        """validate() should not raise if CLIENT_ID is set."""
        with mock.patch.object(config, "CLIENT_ID", "test-client-id"):
            config.validate()


class TestDefaultSection:
    def test_reads_environment(self):
        with mock.patch.dict(os.environ, {"MSGRAPH_DEFAULT_SECTION": "Quick Notes"}):
            assert config.default_section() == "Quick Notes"

    def test_blank_is_none(self):
        with mock.patch.dict(os.environ, {"MSGRAPH_DEFAULT_SECTION": "   "}):
            assert config.default_section() is None

    def test_unset_is_none(self):
        env = os.environ.copy()
        env.pop("MSGRAPH_DEFAULT_SECTION", None)
        with mock.patch.dict(os.environ, env, clear=True):
            assert config.default_section() is None
