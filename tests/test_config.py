import pytest
from pydantic import ValidationError

from restcraft import ClientConfig
from restcraft._utils.constants import ENV_BASE_URL, ENV_MAX_RETRIES, ENV_TIMEOUT


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()

        assert config.base_url is None
        assert config.timeout == 30.0
        assert config.max_retries == 0
        assert config.follow_redirects is True
        assert config.headers == {}

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(ENV_BASE_URL, "https://env.example.com")
        monkeypatch.setenv(ENV_TIMEOUT, "12.5")
        monkeypatch.setenv(ENV_MAX_RETRIES, "2")

        config = ClientConfig.from_env()

        assert config.base_url == "https://env.example.com"
        assert config.timeout == 12.5
        assert config.max_retries == 2

    def test_overrides_win_over_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(ENV_BASE_URL, "https://env.example.com")

        config = ClientConfig.from_env(base_url="https://arg.example.com")

        assert config.base_url == "https://arg.example.com"

    def test_none_overrides_are_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(ENV_BASE_URL, "https://env.example.com")

        assert ClientConfig.from_env(base_url=None).base_url == "https://env.example.com"

    @pytest.mark.parametrize(
        "variable, value", [(ENV_TIMEOUT, "0"), (ENV_MAX_RETRIES, "-1")]
    )
    def test_invalid_env_values(
        self, monkeypatch: pytest.MonkeyPatch, variable: str, value: str
    ):
        monkeypatch.setenv(variable, value)

        with pytest.raises(ValidationError):
            ClientConfig.from_env()
