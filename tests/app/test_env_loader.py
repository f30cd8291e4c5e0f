import pytest

from tonnage.app.env_loader import (
    REQUIRED_ENV_VARS,
    get_current_environment,
    validate_required_env_vars,
)


class TestGetCurrentEnvironment:
    """Test resolution of the ENV variable."""

    def test_defaults_to_dev(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)
        assert get_current_environment() == "dev"

    @pytest.mark.parametrize("env", ["staging", "prod"])
    def test_deployed_environments(self, monkeypatch, env):
        monkeypatch.setenv("ENV", env)
        assert get_current_environment() == env

    def test_unknown_environment_raises(self, monkeypatch):
        monkeypatch.setenv("ENV", "qa")
        with pytest.raises(ValueError, match="qa"):
            get_current_environment()


class TestValidateRequiredEnvVars:
    """Test the startup check for required settings."""

    def test_passes_when_all_set(self):
        validate_required_env_vars()

    @pytest.mark.parametrize("missing", REQUIRED_ENV_VARS)
    def test_exits_when_one_is_missing(self, monkeypatch, capsys, missing):
        monkeypatch.delenv(missing)
        with pytest.raises(SystemExit):
            validate_required_env_vars()
        assert missing in capsys.readouterr().err
