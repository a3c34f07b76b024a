"""Tests for the command line entry point."""

import logging

import pytest
import yaml

from unitsync import __version__
from unitsync.core.config_manager import ConfigManager
from unitsync.main import main, resolve_log_level, setup_logging
from unitsync.utils.constants import EXIT_OK, EXIT_USAGE


@pytest.fixture(autouse=True)
def logging_config(monkeypatch) -> dict:
    """Capture basicConfig calls so tests leave root logging alone."""
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))
    return seen


@pytest.fixture
def config_file(tmp_path, host):
    """Config pointing at the fake host."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "version": "1.0",
        "units": ["tedge-file-transfer.socket"],
        "settings": {
            "control_dir": str(host.control_dir),
            "helper_path": str(host.helper_path),
        },
    }))
    return path


class TestMain:
    def test_remove(self, config_file, host) -> None:
        assert main(["--config", str(config_file), "remove"]) == EXIT_OK
        assert host.calls == [("daemon-reload",), ("mask", "tedge-file-transfer.socket")]

    def test_purge_with_version_argument(self, config_file, host) -> None:
        assert main(["--config", str(config_file), "purge", "1.0.0-1"]) == EXIT_OK
        assert host.operations == ["daemon-reload", "purge", "unmask"]

    def test_cli_units_override_config(self, config_file, host) -> None:
        assert main(["-c", str(config_file), "--unit", "tedge-agent", "--user", "remove"]) == EXIT_OK
        assert host.calls == [("daemon-reload",), ("mask", "tedge-agent.service")]

    def test_missing_action_is_usage_error(self, config_file, host) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--config", str(config_file)])

        assert exc.value.code == EXIT_USAGE
        assert host.calls == []

    def test_invalid_unit_is_usage_error(self, config_file, host) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(config_file), "--unit", "bad unit", "remove"])

        assert exc.value.code == EXIT_USAGE
        assert host.calls == []

    def test_strict_rejects_unknown_action(self, config_file, host) -> None:
        assert main(["-c", str(config_file), "--strict", "frobnicate"]) == EXIT_USAGE
        assert host.calls == []

    def test_unknown_action_is_noop(self, config_file, host) -> None:
        assert main(["-c", str(config_file), "frobnicate"]) == EXIT_OK
        assert host.calls == [("daemon-reload",)]

    def test_helper_failures_do_not_fail_hook(self, config_file, host) -> None:
        host.fail_on.update({"daemon-reload", "purge", "unmask"})

        assert main(["-c", str(config_file), "purge"]) == EXIT_OK

    def test_missing_config_has_no_units(self, tmp_path, host) -> None:
        # Default control dir and helper are not on the fake host
        assert main(["-c", str(tmp_path / "absent.yaml"), "remove"]) == EXIT_OK
        assert ("mask", "tedge-file-transfer.socket") not in host.calls

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--version"])

        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestLogging:
    def test_default_is_quiet(self, logging_config) -> None:
        setup_logging()
        assert logging_config["level"] == logging.WARNING
        assert logging_config["force"] is True

    def test_log_file(self, tmp_path, logging_config) -> None:
        setup_logging("DEBUG", str(tmp_path / "unitsync.log"))

        handlers = logging_config["handlers"]
        assert logging_config["level"] == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in handlers)
        for handler in handlers:
            handler.close()

    def test_unwritable_log_file_falls_back_to_stderr(self, tmp_path, logging_config, capsys) -> None:
        setup_logging("INFO", str(tmp_path / "missing" / "unitsync.log"))

        assert len(logging_config["handlers"]) == 1
        assert "cannot open log file" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "verbose,configured,expected",
        [(0, None, "WARNING"), (0, "ERROR", "ERROR"), (1, "ERROR", "INFO"), (2, None, "DEBUG")],
    )
    def test_resolve_log_level(self, verbose, configured, expected) -> None:
        assert resolve_log_level(verbose, configured) == expected


class TestBrokenConfig:
    """A bad config file never fails the package transaction."""

    def write(self, tmp_path, host, **settings):
        path = tmp_path / "config.yaml"
        base = {"control_dir": str(host.control_dir), "helper_path": str(host.helper_path)}
        base.update(settings)
        path.write_text(yaml.safe_dump({"units": ["tedge-file-transfer.socket"], "settings": base}))
        return path

    def test_invalid_encoding(self, tmp_path, host, caplog) -> None:
        path = tmp_path / "config.yaml"
        path.write_bytes(b"units: [\xff\xfe]\n")

        with caplog.at_level("ERROR"):
            assert main(["-c", str(path), "remove"]) == EXIT_OK

        assert ("mask", "tedge-file-transfer.socket") not in host.calls
        assert "not valid UTF-8" in caplog.text

    def test_null_helper_path(self, tmp_path, host) -> None:
        path = self.write(tmp_path, host, helper_path=None)

        assert main(["-c", str(path), "remove"]) == EXIT_OK
        assert host.calls[0] == ("daemon-reload",)

    def test_wrong_typed_control_dir(self, tmp_path, host) -> None:
        path = self.write(tmp_path, host, control_dir=5)

        assert main(["-c", str(path), "remove"]) == EXIT_OK
        assert ("mask", "tedge-file-transfer.socket") in host.calls

    def test_non_numeric_timeout(self, tmp_path, host, monkeypatch) -> None:
        timeouts = []
        original = host.run

        def recording_run(argv, **kwargs):
            timeouts.append(kwargs["timeout"])
            return original(argv, **kwargs)

        monkeypatch.setattr("unitsync.core.service_manager.subprocess.run", recording_run)
        path = self.write(tmp_path, host, command_timeout="30")

        assert main(["-c", str(path), "purge"]) == EXIT_OK
        assert host.operations == ["daemon-reload", "purge", "unmask"]
        assert timeouts == [None, None, None]

    def test_logging_is_configured_before_config_load(self, tmp_path, host, monkeypatch) -> None:
        events = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: events.append("logging"))
        original_load = ConfigManager.load_config

        def recording_load(self):
            events.append("load")
            return original_load(self)

        monkeypatch.setattr(ConfigManager, "load_config", recording_load)

        main(["-c", str(self.write(tmp_path, host)), "configure"])

        assert events == ["logging", "load", "logging"]
