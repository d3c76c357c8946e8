"""
CLI smoke tests with a fake store.

Tests CLI wiring, connection option precedence and exit codes without
requiring a real Azure storage account.
"""
from __future__ import annotations

import hashlib

import pytest
from typer.testing import CliRunner

from blobcopy.cli import app
from tests.storage.fakes.fake_store import FakeObjectStore

CONNECTION_ARGS = ["--account-name", "acct", "--account-key", "a2V5", "--container", "backups"]


@pytest.fixture
def fake_store(monkeypatch):
    """Route every CLI store construction to one in-memory fake."""
    store = FakeObjectStore()
    built_with = []

    def build(*, settings):
        built_with.append(settings)
        return store

    monkeypatch.setattr("blobcopy.cli_context.AzureBlobStore", build)
    monkeypatch.setattr("blobcopy.operations.printers._RICH", False)
    store.built_with = built_with
    return store


class TestCopyCommand:
    """Smoke tests for the copy command."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_copy_success(self, fake_store, staging_dir):
        data = b"x" * 1024
        fake_store.put("src.bin", data)

        result = self.runner.invoke(app, [
            "copy", "--source", "src.bin", "--destination", "dst.bin",
            "--staging-dir", str(staging_dir), *CONNECTION_ARGS,
        ])

        assert result.exit_code == 0, result.output
        assert "OK src.bin -> dst.bin" in result.output
        assert hashlib.sha256(data).hexdigest() in result.output
        assert fake_store.get("dst.bin") == data

    def test_short_options(self, fake_store, staging_dir):
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "-n", "acct", "-k", "a2V5", "-b", "backups",
            "--staging-dir", str(staging_dir),
        ])

        assert result.exit_code == 0, result.output

    def test_missing_source_exit_code(self, fake_store):
        result = self.runner.invoke(app, ["copy", "-s", "missing", "-d", "b", *CONNECTION_ARGS])

        assert result.exit_code == 1
        assert "FAILED" in result.output
        assert "missing" in result.output
        assert fake_store.methods_called() == ["exists"]

    def test_size_mismatch_exit_code(self, fake_store):
        fake_store.put("a", b"x" * 2048)
        fake_store.reported_sizes["b"] = 2047

        result = self.runner.invoke(app, ["copy", "-s", "a", "-d", "b", *CONNECTION_ARGS])

        assert result.exit_code == 5
        assert "2048" in result.output and "2047" in result.output

    def test_content_mismatch_shows_hex_digests(self, fake_store, staging_dir):
        fake_store.put("a", b"a" * 500)
        fake_store.copy_transform = lambda data: b"b" + data[1:]

        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "--staging-dir", str(staging_dir), *CONNECTION_ARGS,
        ])

        assert result.exit_code == 6
        assert hashlib.sha256(b"a" * 500).hexdigest() in result.output
        assert hashlib.sha256(b"b" + b"a" * 499).hexdigest() in result.output

    def test_parallel_flag(self, fake_store, staging_dir):
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "--parallel", "--staging-dir", str(staging_dir), *CONNECTION_ARGS,
        ])

        assert result.exit_code == 0, result.output
        assert fake_store.built_with[0].parallel_verify is True

    def test_source_and_destination_required(self, fake_store):
        result = self.runner.invoke(app, ["copy", "-s", "a", *CONNECTION_ARGS])

        assert result.exit_code == 2
        assert fake_store.calls == []

    def test_missing_connection_values(self, fake_store):
        result = self.runner.invoke(app, ["copy", "-s", "a", "-d", "b"])

        assert result.exit_code == 2
        assert fake_store.built_with == []

    def test_invalid_container(self, fake_store):
        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "-n", "acct", "-k", "key", "-b", "Not_Valid",
        ])

        assert result.exit_code == 2
        assert "Invalid container name" in result.output

    @pytest.mark.parametrize("keys", [["-s", "", "-d", "b"], ["-s", "a", "-d", "  "]])
    def test_empty_keys_rejected(self, fake_store, keys):
        result = self.runner.invoke(app, ["copy", *keys, *CONNECTION_ARGS])

        assert result.exit_code == 2
        assert "must not be empty" in result.output
        assert fake_store.calls == []


class TestConnectionSources:
    """Connection values from config file and environment."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_config_file(self, fake_store, tmp_path, staging_dir):
        config = tmp_path / "blobcopy.yaml"
        config.write_text("account-name: fileacct\naccount-key: ZmlsZWtleQ==\ncontainer: filecontainer\n")
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "-c", str(config), "--staging-dir", str(staging_dir),
        ])

        assert result.exit_code == 0, result.output
        settings = fake_store.built_with[0]
        assert settings.az_account == "fileacct"
        assert settings.container == "filecontainer"

    def test_flags_override_config_file(self, fake_store, tmp_path, staging_dir):
        config = tmp_path / "blobcopy.yaml"
        config.write_text("account-name: fileacct\naccount-key: ZmlsZWtleQ==\ncontainer: filecontainer\n")
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, [
            "copy", "-s", "a", "-d", "b", "-c", str(config), "-b", "flagcontainer",
            "--staging-dir", str(staging_dir),
        ])

        assert result.exit_code == 0, result.output
        settings = fake_store.built_with[0]
        assert settings.az_account == "fileacct"
        assert settings.container == "flagcontainer"

    def test_missing_config_file(self, fake_store, tmp_path):
        result = self.runner.invoke(app, ["copy", "-s", "a", "-d", "b", "-c", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 2
        assert "Config file not found" in result.output

    def test_malformed_config_file(self, fake_store, tmp_path):
        config = tmp_path / "blobcopy.yaml"
        config.write_text("account-name: [unclosed\n")

        result = self.runner.invoke(app, ["copy", "-s", "a", "-d", "b", "-c", str(config)])

        assert result.exit_code == 2
        assert fake_store.built_with == []

    def test_environment(self, fake_store, monkeypatch, staging_dir):
        monkeypatch.setenv("AZURE_STORAGE_ACCOUNT", "envacct")
        monkeypatch.setenv("AZURE_STORAGE_KEY", "ZW52a2V5")
        monkeypatch.setenv("BLOBCOPY_CONTAINER", "envcontainer")
        monkeypatch.setenv("BLOBCOPY_STAGING_DIR", str(staging_dir))
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, ["copy", "-s", "a", "-d", "b"])

        assert result.exit_code == 0, result.output
        assert fake_store.built_with[0].container == "envcontainer"


class TestVerifyCommand:
    """Smoke tests for the verify command."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_verify_matching(self, fake_store, staging_dir):
        fake_store.put("a", b"same")
        fake_store.put("b", b"same")

        result = self.runner.invoke(app, [
            "verify", "-s", "a", "-d", "b", "--staging-dir", str(staging_dir), *CONNECTION_ARGS,
        ])

        assert result.exit_code == 0, result.output
        assert "copy" not in fake_store.methods_called()

    def test_verify_mismatch(self, fake_store, staging_dir):
        fake_store.put("a", b"same1")
        fake_store.put("b", b"same2")

        result = self.runner.invoke(app, [
            "verify", "-s", "a", "-d", "b", "--staging-dir", str(staging_dir), *CONNECTION_ARGS,
        ])

        assert result.exit_code == 6

    def test_verify_missing_destination(self, fake_store):
        fake_store.put("a", b"data")

        result = self.runner.invoke(app, ["verify", "-s", "a", "-d", "b", *CONNECTION_ARGS])

        assert result.exit_code == 3


class TestHelp:
    """Help output."""

    def test_no_args_shows_help(self):
        result = CliRunner().invoke(app, [])
        assert "copy" in result.output
        assert "verify" in result.output

    def test_copy_help_lists_options(self):
        result = CliRunner().invoke(app, ["copy", "--help"])
        assert result.exit_code == 0
        for option in ["--source", "--destination", "--config", "--account-name", "--account-key", "--container"]:
            assert option in result.output
