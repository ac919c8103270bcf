import json

import boto3
from botocore.exceptions import ClientError

from pipeline_monitor.aws import client_config


def get_secret_string(secret_name, timeout=10):
    client = boto3.client('secretsmanager', config=client_config(timeout))

    try:
        result = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        raise RuntimeError(f"unable to retrieve GitHub auth token {secret_name}: {e}") from e

    if 'SecretString' not in result:
        raise RuntimeError(f"secret {secret_name} has no string value")

    return result['SecretString']


def load_github_token(secret_name, timeout=10):
    """
    GitHub OAuth token stored as {"token": "..."} in Secrets Manager.

    Called once per process, never per invocation.
    """

    try:
        token = json.loads(get_secret_string(secret_name, timeout))['token']
    except (ValueError, KeyError, TypeError) as e:
        raise RuntimeError(f"unable to read a token from secret {secret_name}: {e}") from e

    return token.strip()
