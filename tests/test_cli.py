import logging

import pytest

from xoso_digest import cli
from xoso_digest.config import SCHEDULE_CRON, SCHEDULE_TIMEZONE, ConfigError


@pytest.fixture
def quiet_cli(monkeypatch):
    monkeypatch.setattr(cli, "load_env_file", lambda *args, **kwargs: False)
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setenv("TELEGRAM_TOKEN", "123:abc")
    monkeypatch.setenv("TELEGRAM_TO", "-42")


class FakeRunner:
    instances = []

    def __init__(self, settings, sources):
        self.settings = settings
        self.sources = sources
        self.runs = 0
        FakeRunner.instances.append(self)

    def run(self):
        self.runs += 1


def test_configure_logging_defaults_to_console_only():
    original_handlers = list(logging.getLogger().handlers)
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)

    try:
        cli.configure_logging("INFO")

        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
        assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        for handler in logging.getLogger().handlers[:]:
            logging.getLogger().removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            logging.getLogger().addHandler(handler)


def test_configure_logging_with_log_file_creates_file_handler(tmp_path):
    original_handlers = list(logging.getLogger().handlers)
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)

    try:
        log_path = tmp_path / "logs" / "xoso.log"
        cli.configure_logging("DEBUG", str(log_path))

        assert log_path.exists()
        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        for handler in logging.getLogger().handlers[:]:
            logging.getLogger().removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            logging.getLogger().addHandler(handler)


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unsupported log level"):
        cli.configure_logging("CHATTY")


def test_main_now_runs_once(monkeypatch, quiet_cli):
    FakeRunner.instances.clear()
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)
    monkeypatch.setattr(
        cli,
        "build_scheduler",
        lambda *args, **kwargs: pytest.fail("scheduler must not start with --now"),
    )

    exit_code = cli.main(["--now"])

    assert exit_code == 0
    (runner,) = FakeRunner.instances
    assert runner.runs == 1
    assert runner.settings.telegram_token == "123:abc"
    assert runner.settings.telegram_chat_id == "-42"


def test_main_starts_scheduler_by_default(monkeypatch, quiet_cli):
    FakeRunner.instances.clear()
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)
    captured = {}

    def fake_build(job, cron, timezone):
        captured.update(job=job, cron=cron, timezone=timezone)
        return "scheduler"

    monkeypatch.setattr(cli, "build_scheduler", fake_build)
    monkeypatch.setattr(cli, "run_forever", lambda scheduler: captured.update(started=scheduler))

    exit_code = cli.main([])

    assert exit_code == 0
    assert captured["cron"] == SCHEDULE_CRON
    assert captured["timezone"] == SCHEDULE_TIMEZONE
    assert captured["started"] == "scheduler"
    assert FakeRunner.instances[0].runs == 0


def test_main_missing_credentials_exits_non_zero(monkeypatch, quiet_cli, caplog):
    monkeypatch.delenv("TELEGRAM_TOKEN")
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)

    exit_code = cli.main(["--now"])

    assert exit_code == 1
    assert "TELEGRAM_TOKEN" in caplog.text


def test_main_schedule_failure_exits_non_zero(monkeypatch, quiet_cli):
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)

    def broken_build(job, cron, timezone):
        raise ConfigError("Cannot load timezone 'Asia/Ho_Chi_Minh'")

    monkeypatch.setattr(cli, "build_scheduler", broken_build)

    assert cli.main([]) == 1


def test_main_masks_token_in_logged_configuration(monkeypatch, quiet_cli, caplog):
    caplog.set_level("INFO")
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)

    cli.main(["--now"])

    assert "Active Configuration" in caplog.text
    assert "123:abc" not in caplog.text


def test_main_rejects_extra_flags(quiet_cli):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", "x.xml"])

    assert excinfo.value.code != 0


def test_main_logs_env_file_outcome_after_logging_setup(monkeypatch, quiet_cli, caplog):
    caplog.set_level("INFO")
    order = []
    monkeypatch.setattr(cli, "load_env_file", lambda path: order.append("env") or False)
    monkeypatch.setattr(
        cli, "configure_logging", lambda level, log_file=None: order.append("logging")
    )
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)

    assert cli.main(["--now"]) == 0

    assert order == ["env", "logging"]
    record = next(
        r for r in caplog.records if "using system environment variables" in r.message
    )
    assert record.levelname == "WARNING"
    assert record.name == "xoso_digest.cli"


def test_main_logs_loaded_env_file(monkeypatch, quiet_cli, caplog):
    caplog.set_level("INFO")
    monkeypatch.setattr(cli, "load_env_file", lambda path: True)
    monkeypatch.setattr(cli, "JobRunner", FakeRunner)

    cli.main(["--now"])

    assert "Loaded environment configuration from .env" in caplog.text
