"""
Tests for Env, load_env and TimeParser.

Covers:
- Happy path: defaults, environment variables, .env files
- Negative path: invalid log levels, undersized receive buffers
- Edge cases: empty variables, overrides, compound durations
"""

import pytest
from pydantic import ValidationError

from fanout.env import Env, TimeParser, load_env


ENV_NAMES = list(Env.types_map())


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)

    monkeypatch.chdir(tmp_path)


class TestLoadEnvHappyPath:
    """Happy path tests for load_env."""

    def test_defaults(self) -> None:
        """With nothing set the defaults apply."""
        env = load_env(Env)

        assert env.FANOUT_CONFIG_PATH == "forwarder.json"
        assert env.FANOUT_RECEIVE_BUFFER_SIZE == 65535
        assert env.FANOUT_LOG_LEVEL == "info"
        assert env.FANOUT_LOG_OUTPUT == "stdout"
        assert env.FANOUT_LOG_PATH is None
        assert env.error_log_interval == 5.0

    def test_environment_variables(self, monkeypatch) -> None:
        """Variables are read and converted with the types map."""
        monkeypatch.setenv("FANOUT_CONFIG_PATH", "/etc/fanout/forwarder.json")
        monkeypatch.setenv("FANOUT_RECEIVE_BUFFER_SIZE", "131072")
        monkeypatch.setenv("FANOUT_ERROR_LOG_INTERVAL", "1m")
        monkeypatch.setenv("FANOUT_LOG_LEVEL", "error")

        env = load_env(Env)

        assert env.FANOUT_CONFIG_PATH == "/etc/fanout/forwarder.json"
        assert env.FANOUT_RECEIVE_BUFFER_SIZE == 131072
        assert env.error_log_interval == 60.0
        assert env.FANOUT_LOG_LEVEL == "error"

    def test_env_file_overrides_environment(self, monkeypatch, tmp_path) -> None:
        """Values from the .env file take precedence."""
        monkeypatch.setenv("FANOUT_LOG_OUTPUT", "stdout")
        (tmp_path / ".env").write_text(
            "FANOUT_LOG_OUTPUT=stderr\nFANOUT_LOG_PATH=logs/fanout.json\n"
        )

        env = load_env(Env)

        assert env.FANOUT_LOG_OUTPUT == "stderr"
        assert env.FANOUT_LOG_PATH == "logs/fanout.json"

    def test_logging_config(self) -> None:
        """Logging settings are exposed as LoggingConfig.update() arguments."""
        env = Env(FANOUT_LOG_LEVEL="debug", FANOUT_LOG_PATH="fanout.json")

        assert env.get_logging_config() == {
            "log_level": "debug",
            "log_output": "stdout",
            "log_path": "fanout.json",
        }


class TestLoadEnvNegativePath:
    """Negative path tests for load_env."""

    def test_invalid_log_level(self, monkeypatch) -> None:
        """Unknown log levels fail validation."""
        monkeypatch.setenv("FANOUT_LOG_LEVEL", "loud")

        with pytest.raises(ValidationError):
            load_env(Env)

    @pytest.mark.parametrize("size", [0, 8, 2048, 65534])
    def test_receive_buffer_smaller_than_a_datagram_is_rejected(self, size: int) -> None:
        """Buffers that could truncate a datagram fail validation."""
        with pytest.raises(ValidationError):
            Env(FANOUT_RECEIVE_BUFFER_SIZE=size)

    def test_small_receive_buffer_from_environment_is_rejected(self, monkeypatch) -> None:
        """The buffer size check also applies to loaded variables."""
        monkeypatch.setenv("FANOUT_RECEIVE_BUFFER_SIZE", "8")

        with pytest.raises(ValidationError):
            load_env(Env)


class TestLoadEnvEdgeCases:
    """Edge case tests for load_env."""

    def test_empty_variable_is_ignored(self, monkeypatch) -> None:
        """An empty variable leaves the default in place."""
        monkeypatch.setenv("FANOUT_CONFIG_PATH", "")

        assert load_env(Env).FANOUT_CONFIG_PATH == "forwarder.json"

    def test_override_wins(self, monkeypatch) -> None:
        """Explicitly set override fields beat the environment."""
        monkeypatch.setenv("FANOUT_CONFIG_PATH", "from-env.json")
        monkeypatch.setenv("FANOUT_LOG_LEVEL", "debug")

        env = load_env(Env, override=Env(FANOUT_CONFIG_PATH="override.json"))

        assert env.FANOUT_CONFIG_PATH == "override.json"
        assert env.FANOUT_LOG_LEVEL == "debug"

    def test_receive_buffer_of_exactly_one_datagram(self) -> None:
        """The largest UDP datagram size is the smallest accepted buffer."""
        assert Env(FANOUT_RECEIVE_BUFFER_SIZE=65535).FANOUT_RECEIVE_BUFFER_SIZE == 65535


class TestTimeParser:
    """Tests for TimeParser."""

    @pytest.mark.parametrize(
        "time_amount,seconds",
        [
            ("5s", 5.0),
            ("5", 5.0),
            ("1.5s", 1.5),
            ("2m", 120.0),
            ("1h", 3600.0),
            ("1d", 86400.0),
            ("1w", 604800.0),
            ("1m30s", 90.0),
            ("0s", 0.0),
        ],
    )
    def test_parse(self, time_amount: str, seconds: float) -> None:
        """Durations with unit suffixes are converted to seconds."""
        assert TimeParser(time_amount).time == seconds

    @pytest.mark.parametrize("time_amount", ["", "soon", "5x", "5s later"])
    def test_invalid_duration(self, time_amount: str) -> None:
        """Strings that are not number/unit pairs are rejected."""
        with pytest.raises(ValueError):
            TimeParser(time_amount)

    def test_invalid_error_log_interval_fails_env_validation(self, monkeypatch) -> None:
        """The error log interval is checked when the env loads."""
        monkeypatch.setenv("FANOUT_ERROR_LOG_INTERVAL", "often")

        with pytest.raises(ValidationError):
            load_env(Env)
