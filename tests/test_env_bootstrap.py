from __future__ import annotations

import json
import os
from unittest import mock

import pytest

from civic_chat import env_bootstrap


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("CHAT_SECRET_NAME", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    return monkeypatch


def test_no_secret_without_environment(clean_env):
    assert env_bootstrap.secret_name_from_env() is None


def test_secret_name_derived_from_environment(clean_env):
    clean_env.setenv("ENVIRONMENT", "staging")

    assert env_bootstrap.secret_name_from_env() == "civic-staging/chat-server-secrets"


def test_explicit_secret_name_wins(clean_env):
    clean_env.setenv("ENVIRONMENT", "staging")
    clean_env.setenv("CHAT_SECRET_NAME", "custom/secret")

    assert env_bootstrap.secret_name_from_env() == "custom/secret"


def test_local_environment_loads_nothing(clean_env):
    clean_env.setenv("ENVIRONMENT", "local")

    assert env_bootstrap.secret_name_from_env() is None


def test_secret_values_do_not_override_existing_env(monkeypatch):
    monkeypatch.setenv("CHAT_USER_LOOKUP_TIMEOUT", "2")
    monkeypatch.delenv("CHAT_ANONYMOUS_NAME", raising=False)
    secret = {"CHAT_USER_LOOKUP_TIMEOUT": "9", "CHAT_ANONYMOUS_NAME": "Mwananchi", "UNSET": None}
    client = mock.Mock()
    client.get_secret_value.return_value = {"SecretString": json.dumps(secret)}

    with mock.patch("civic_chat.env_bootstrap.boto3.client", return_value=client) as make_client:
        applied = env_bootstrap.load_secrets_from_aws("civic-staging/chat-server-secrets")

    make_client.assert_called_once()
    client.get_secret_value.assert_called_once_with(SecretId="civic-staging/chat-server-secrets")
    assert applied == 2
    assert os.environ["CHAT_USER_LOOKUP_TIMEOUT"] == "2"
    assert os.environ["CHAT_ANONYMOUS_NAME"] == "Mwananchi"
    assert "UNSET" not in os.environ
    monkeypatch.delenv("CHAT_ANONYMOUS_NAME")


def test_empty_secret_is_an_error():
    client = mock.Mock()
    client.get_secret_value.return_value = {}

    with mock.patch("civic_chat.env_bootstrap.boto3.client", return_value=client):
        with pytest.raises(RuntimeError):
            env_bootstrap.load_secrets_from_aws("civic-staging/chat-server-secrets")
