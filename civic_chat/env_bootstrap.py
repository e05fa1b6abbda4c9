"""
Load environment variables from AWS Secrets Manager before Django settings are loaded.
Import this module first in manage.py, asgi.py and wsgi.py so os.environ is populated
before civic_chat.settings evaluates its _env helpers.

Secret name: CHAT_SECRET_NAME, or civic-{ENVIRONMENT}/chat-server-secrets when only
ENVIRONMENT is set and is not "local". Otherwise (local dev, tests) nothing is loaded.
Existing env vars win over secret values.
"""
import json
import logging
import os
from typing import Optional

import boto3

logger = logging.getLogger(__name__)


def secret_name_from_env() -> Optional[str]:
    name = os.environ.get("CHAT_SECRET_NAME")
    if name:
        return name
    env = os.environ.get("ENVIRONMENT")
    if env and env != "local":
        return f"civic-{env}/chat-server-secrets"
    return None


def load_secrets_from_aws(secret_name: str) -> int:
    """Copy the secret's JSON keys into os.environ (setdefault). Returns keys applied."""
    region = os.environ.get("AWS_REGION", "us-east-1")
    client = boto3.client("secretsmanager", region_name=region)
    response = client.get_secret_value(SecretId=secret_name)
    secret_str = response.get("SecretString")
    if not secret_str:
        raise RuntimeError(f"Secret {secret_name!r} has no SecretString")
    data = json.loads(secret_str)
    applied = 0
    for key, value in data.items():
        if value is not None:
            os.environ.setdefault(key, str(value))
            applied += 1
    logger.info("Loaded %d settings from secret %s", applied, secret_name)
    return applied


_secret_name = secret_name_from_env()
if _secret_name:
    load_secrets_from_aws(_secret_name)
