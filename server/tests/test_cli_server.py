import logging

import pytest

from ovaldict import cli, config


@pytest.fixture(autouse=True)
def _restore_settings(monkeypatch):
    # cmd_server swaps in its own Settings object.
    monkeypatch.setattr(config, "settings", config.settings)
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, (logging.FileHandler, logging.NullHandler)):
            root.removeHandler(h)
            h.close()


def test_invalid_dbtype_is_usage_error(tmp_path):
    rc = cli.main(["server", "--dbtype", "mysql", "--dbpath", str(tmp_path / "x"), "--log-dir", str(tmp_path / "log"), "--quiet"])
    assert rc == cli.EXIT_USAGE_ERROR


def test_storage_failure_is_failure(tmp_path):
    bad = str(tmp_path / "no-such-dir" / "oval.sqlite3")
    rc = cli.main(["server", "--dbpath", bad, "--log-dir", str(tmp_path / "log"), "--quiet"])
    assert rc == cli.EXIT_FAILURE


def test_server_runs_uvicorn_with_opened_db(tmp_path, monkeypatch):
    import uvicorn

    seen = {}

    def fake_run(app, host, port, **kwargs):
        seen["db"] = app.state.db
        seen["bind"] = (host, port)

    monkeypatch.setattr(uvicorn, "run", fake_run)
    rc = cli.main([
        "server", "--dbpath", str(tmp_path / "oval.sqlite3"), "--log-dir", str(tmp_path / "log"),
        "--bind", "0.0.0.0", "--port", "8000", "--quiet",
    ])
    assert rc == cli.EXIT_SUCCESS
    assert seen["bind"] == ("0.0.0.0", 8000)
    assert seen["db"].closed
    assert (tmp_path / "log" / "ovaldict.log").exists()


def test_no_command_prints_help(capsys):
    assert cli.main([]) == cli.EXIT_USAGE_ERROR
    assert "server" in capsys.readouterr().out
