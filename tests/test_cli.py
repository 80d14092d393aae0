import pytest

from trackpad_relay import cli
from trackpad_relay.server.pointer import DryRunPointerDevice


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("TRACKPAD_RELAY_PORT", "TRACKPAD_RELAY_HOST", "TRACKPAD_RELAY_AUTH_TOKEN", "TRACKPAD_RELAY_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = cli.settings_from_args(cli.build_parser().parse_args([]))
    assert settings.port == 8080
    assert settings.host == "0.0.0.0"
    assert settings.auth_token is None
    assert settings.verbose is False
    assert settings.rate_limit_scope == "server"


def test_flags_override_env(monkeypatch):
    monkeypatch.setenv("TRACKPAD_RELAY_PORT", "7000")
    monkeypatch.setenv("TRACKPAD_RELAY_AUTH_TOKEN", "from-env")

    assert cli.settings_from_args(cli.build_parser().parse_args([])).port == 7000

    args = cli.build_parser().parse_args(["--port", "9001", "--token", "abc", "--verbose"])
    settings = cli.settings_from_args(args)
    assert settings.port == 9001
    assert settings.auth_token == "abc"
    assert settings.verbose is True


def test_main_runs_uvicorn(monkeypatch, capsys):
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)

    assert cli.main(["--dry-run", "--token", "tok", "--port", "9999"]) == 0
    assert calls["port"] == 9999
    assert calls["host"] == "0.0.0.0"
    assert calls["app"].state.auth.current_token == "tok"

    out = capsys.readouterr().out
    assert '{"type":"auth","token":"tok"}' in out


def test_dry_run_selects_logging_device():
    assert isinstance(cli._pointer_device(True), DryRunPointerDevice)
