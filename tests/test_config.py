"""Tests for client configuration."""

import pytest

from filecontent.config import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_CHUNK_SIZE,
    ClientConfig,
)
from filecontent.core.model import InvalidUsageError
from filecontent.core.protocol import STATUS_UP_TO_DATE


class TestClientConfig:

    def test_defaults(self):
        config = ClientConfig()
        assert config.api_endpoint == DEFAULT_API_ENDPOINT
        assert config.auth_token is None
        assert config.verify is True
        assert config.connect_timeout == 10.0
        assert config.read_timeout == 3.0
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 4096
        assert config.buffer_size == DEFAULT_BUFFER_SIZE == 4096
        assert config.up_to_date_status == STATUS_UP_TO_DATE

    def test_for_host(self):
        config = ClientConfig.for_host("files.example.com", auth_token="t")
        assert config.api_endpoint == "https://files.example.com/api/v1.2"
        assert config.auth_token == "t"

    def test_trailing_slash_stripped(self):
        assert ClientConfig(api_endpoint="http://h/api/").api_endpoint == "http://h/api"

    @pytest.mark.parametrize("field", ["connect_timeout", "read_timeout", "chunk_size", "buffer_size"])
    def test_non_positive(self, field):
        with pytest.raises(InvalidUsageError, match=field):
            ClientConfig(**{field: 0})

    def test_from_env(self):
        env = {
            "FILECONTENT_API_ENDPOINT": "https://h/api",
            "FILECONTENT_TOKEN": "tok",
            "FILECONTENT_VERIFY": "false",
            "FILECONTENT_READ_TIMEOUT": "7.5",
            "FILECONTENT_CHUNK_SIZE": "1024",
            "FILECONTENT_UP_TO_DATE_STATUS": "304",
        }
        config = ClientConfig.from_env(env)
        assert config.api_endpoint == "https://h/api"
        assert config.auth_token == "tok"
        assert config.verify is False
        assert config.read_timeout == 7.5
        assert config.chunk_size == 1024
        assert config.up_to_date_status == 304

    def test_from_env_ca_bundle(self):
        config = ClientConfig.from_env({"FILECONTENT_VERIFY": "/etc/ssl/ca.pem"})
        assert config.verify == "/etc/ssl/ca.pem"

    def test_overrides_win(self):
        env = {"FILECONTENT_TOKEN": "env-token"}
        config = ClientConfig.from_env(env, auth_token="explicit", api_endpoint=None)
        assert config.auth_token == "explicit"
        assert config.api_endpoint == DEFAULT_API_ENDPOINT

    def test_from_env_invalid_number(self):
        with pytest.raises(InvalidUsageError, match="FILECONTENT_CHUNK_SIZE"):
            ClientConfig.from_env({"FILECONTENT_CHUNK_SIZE": "lots"})
