import io
from contextlib import redirect_stderr, redirect_stdout

import fncli
import pytest

from tally import config
from tally.cli import run
from tally.lib import ansi
from tally.lib.ids import CounterIds
from tally.state import build_app
from tally.storage import MemoryStore

TODAY = "2026-10-19"


class Day:
    """Settable date key standing in for the local clock."""

    def __init__(self, value: str = TODAY) -> None:
        self.value = value

    def __call__(self) -> str:
        return self.value


class FnCLIRunner:
    def invoke(self, args: list[str]) -> fncli.Result:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            try:
                code = run(args)
            except SystemExit as e:
                code = int(e.code) if e.code is not None else 1
        return fncli.Result(code, out.getvalue(), err.getvalue())


@pytest.fixture(autouse=True)
def plain_output():
    ansi.use(ansi.PLAIN)
    yield
    ansi.use(ansi.DEFAULT)


@pytest.fixture
def tmp_tally_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "TALLY_DIR", tmp_path)
    monkeypatch.setattr(config, "STORE_PATH", tmp_path / "store.json")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr(config, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(fncli, "_TIMING_LOG", tmp_path / "cli_timings.jsonl", raising=False)
    config.Config.reset()
    yield tmp_path
    config.Config.reset()


@pytest.fixture
def day() -> Day:
    return Day()


@pytest.fixture
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def app(kv, day):
    return build_app(kv, new_id=CounterIds(), today=day)
