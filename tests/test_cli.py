"""Tests for r2uploader CLI helpers."""
import argparse
import logging

import pytest

from fakes import FakeStore
from r2uploader.errors import StoreError
from r2uploader.cli import _build_parser, _parse_bool, _setup_logging, run_cli


ENV = {
    "CFR2_BUCKET": "assets",
    "CFR2_ACCOUNT_ID": "acct",
    "CFR2_ACCESSKEY": "ak",
    "CFR2_SECRETKEY": "sk",
}


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ENV:
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


@pytest.fixture
def configured_env(clean_env, monkeypatch):
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    return clean_env


def test_parse_bool():
    assert _parse_bool("true") is True
    assert _parse_bool("YES") is True
    assert _parse_bool("0") is False
    assert _parse_bool("off") is False
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_bool("maybe")


@pytest.mark.parametrize(
    "extra, expected",
    [([], True), (["--force"], True), (["--force=false"], False), (["--force", "no"], False)],
)
def test_force_flag(extra, expected):
    args = _build_parser().parse_args(["upload", "dir", "/prefix", *extra])
    assert args.force is expected
    assert args.remote_path == "/prefix"


def test_setup_logging_debug_mode():
    mode = _setup_logging(debug=True, silent=False, log_level=None)
    assert mode == "DEBUG"
    assert logging.getLogger().isEnabledFor(logging.DEBUG) is True
    assert logging.getLogger("botocore").level == logging.WARNING


def test_setup_logging_silent():
    mode = _setup_logging(debug=False, silent=True, log_level=None)
    assert mode == "silent"
    assert logging.getLogger().isEnabledFor(logging.INFO) is False


def test_no_command_prints_help(clean_env, capsys):
    assert run_cli([]) == 0
    assert "usage" in capsys.readouterr().out


def test_missing_config_is_fatal(clean_env, capsys):
    (clean_env / "a.txt").write_text("a")

    code = run_cli(["upload", "a.txt", "a.txt"], storage_factory=lambda config: FakeStore())

    assert code == 1
    assert "CFR2_BUCKET" in capsys.readouterr().err


def test_env_file_supplies_config(clean_env):
    env_file = clean_env / "custom.env"
    env_file.write_text("\n".join(f"{k}={v}" for k, v in ENV.items()), encoding="utf-8")
    (clean_env / "a.txt").write_text("a")
    store = FakeStore()
    seen = {}

    def factory(config):
        seen["bucket"] = config.bucket
        return store

    code = run_cli(["--env-file", str(env_file), "upload", "a.txt", "/x/a.txt"], storage_factory=factory)

    assert code == 0
    assert seen["bucket"] == "assets"
    assert store.uploaded_keys == ["x/a.txt"]


def test_directory_upload(configured_env):
    site = configured_env / "site"
    (site / "css").mkdir(parents=True)
    (site / "index.html").write_text("<html></html>")
    (site / "css" / "main.css").write_text("body {}")
    store = FakeStore(existing=["www/index.html"])

    code = run_cli(["upload", str(site), "/www", "--force=false"], storage_factory=lambda config: store)

    assert code == 0
    assert store.uploaded_keys == ["www/css/main.css"]


def test_upload_failure_exits_non_zero(configured_env, capsys):
    (configured_env / "a.txt").write_text("a")
    store = FakeStore(fail_put_on=1)

    code = run_cli(["upload", "a.txt", "a.txt"], storage_factory=lambda config: store)

    assert code == 1
    assert "simulated failure" in capsys.readouterr().err


def test_missing_source_exits_non_zero(configured_env, capsys):
    code = run_cli(["upload", "nope", "x"], storage_factory=lambda config: FakeStore())

    assert code == 1
    assert "cannot stat" in capsys.readouterr().err


def test_invalid_timeout(configured_env):
    (configured_env / "a.txt").write_text("a")

    assert run_cli(["upload", "a.txt", "a", "--timeout", "0"], storage_factory=lambda c: FakeStore()) == 1


def test_force_equals_form_before_positionals():
    args = _build_parser().parse_args(["upload", "--force=false", "dir", "prefix"])
    assert args.force is False
    assert str(args.local_path) == "dir"
    assert args.remote_path == "prefix"


def test_ctrl_c_exits_130(configured_env, capsys):
    (configured_env / "a.txt").write_text("a")

    class InterruptedStore(FakeStore):
        async def put(self, key, body, content_type, content_length):
            raise KeyboardInterrupt

    code = run_cli(["upload", "a.txt", "a"], storage_factory=lambda config: InterruptedStore())

    assert code == 130
    assert "Cancelled." in capsys.readouterr().err


@pytest.mark.parametrize(
    "policy_args, expected_code, expected_skips",
    [([], 0, 1), (["--on-head-error", "skip"], 0, 1), (["--on-head-error", "fail"], 1, 0)],
)
def test_on_head_error_flag(configured_env, policy_args, expected_code, expected_skips, capsys):
    (configured_env / "a.txt").write_text("a")
    store = FakeStore(head_error=StoreError("head", "a", "forbidden", code="403"))

    code = run_cli(
        ["upload", "a.txt", "a", "--force=false", *policy_args],
        storage_factory=lambda config: store,
    )

    assert code == expected_code
    assert store.heads == ["a"]
    assert store.put_attempts == []
    out = capsys.readouterr().out
    if expected_code == 0:
        assert f"uploaded=0 skipped={expected_skips}" in out
    else:
        assert "Finished" not in out
