"""Safe runner and environment configuration tests."""
import os
import pytest

from bf_sandbox import config
from bf_sandbox.config import RunnerSettings, get_settings, load_settings
from bf_sandbox.runner import RunResult, run_once, run_program

ENV_VARS = ("BF_STEP_LIMIT", "BF_OUTPUT_LIMIT", "BF_EVAL_PARALLEL", "BF_EVAL_PROCESSES")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep load_dotenv() away from any .env in the checkout
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        s = load_settings()
        assert s.step_limit == 1000000
        assert s.output_limit == 1000000
        assert s.parallel is True
        assert s.processes >= 1

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BF_STEP_LIMIT", "5000")
        monkeypatch.setenv("BF_OUTPUT_LIMIT", "16")
        monkeypatch.setenv("BF_EVAL_PARALLEL", "no")
        monkeypatch.setenv("BF_EVAL_PROCESSES", "3")
        s = load_settings()
        assert s == RunnerSettings(step_limit=5000, output_limit=16, parallel=False, processes=3)

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("BF_STEP_LIMIT=42\n")
        try:
            assert load_settings().step_limit == 42
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("BF_STEP_LIMIT", None)

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("BF_STEP_LIMIT", "lots")
        with pytest.raises(ValueError, match="BF_STEP_LIMIT"):
            load_settings()

    def test_negative_integer(self, monkeypatch):
        monkeypatch.setenv("BF_OUTPUT_LIMIT", "-5")
        with pytest.raises(ValueError, match="BF_OUTPUT_LIMIT"):
            load_settings()

    def test_bad_flag(self, monkeypatch):
        monkeypatch.setenv("BF_EVAL_PARALLEL", "maybe")
        with pytest.raises(ValueError, match="BF_EVAL_PARALLEL"):
            load_settings()


class TestCachedSettings:
    def test_dotenv_read_once_across_runs(self, monkeypatch):
        calls = []
        real_load = config.load_dotenv

        def counting_load(*args, **kwargs):
            calls.append(args)
            return real_load(*args, **kwargs)

        monkeypatch.setattr(config, "load_dotenv", counting_load)
        for _ in range(5):
            assert run_program('+.').output == b'\x01'
        assert run_once(',+.', 1) == 2
        assert len(calls) == 1

    def test_cache_clear_rereads(self, monkeypatch):
        monkeypatch.setenv("BF_STEP_LIMIT", "7")
        assert get_settings().step_limit == 7
        monkeypatch.setenv("BF_STEP_LIMIT", "9")
        assert get_settings().step_limit == 7
        get_settings.cache_clear()
        assert get_settings().step_limit == 9


class TestRunProgram:
    def test_success(self):
        result = run_program(',+.', b'a')
        assert result == RunResult(output=b'b', steps=3, input_reads=1)
        assert result.ok

    def test_bracket_error_becomes_result(self):
        result = run_program('+[', b'')
        assert result.output is None
        assert not result.ok
        assert "Unmatched '['" in result.error

    def test_step_limit_from_argument(self):
        result = run_program('+[]', step_limit=100)
        assert result.output is None
        assert result.steps == 100
        assert result.error == 'Exceeded maximum step limit of 100'

    def test_step_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("BF_STEP_LIMIT", "10")
        result = run_program('+' * 11)
        assert not result.ok
        assert '10' in result.error

    def test_output_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("BF_OUTPUT_LIMIT", "2")
        result = run_program('...')
        assert result.error == 'Exceeded maximum output limit of 2 bytes'

    def test_other_exceptions_propagate(self):
        with pytest.raises(ValueError):
            run_program('+', step_limit=-1)


class TestRunOnce:
    def test_increment(self):
        assert run_once(',+.', 5) == 6

    def test_zero_input(self):
        assert run_once(',.', 0) == 0

    def test_input_reduced_mod_256(self):
        assert run_once(',.', 257) == 1

    def test_no_output(self):
        assert run_once(',', 5) is None

    def test_failure_is_none(self):
        assert run_once(',[]', 1, step_limit=50) is None
        assert run_once(']', 1) is None

    def test_doubling(self):
        for x in (0, 1, 5, 10):
            assert run_once(',[->++<]>.', x) == 2 * x
