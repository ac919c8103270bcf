import os
from dataclasses import dataclass


# CloudWatch Logs returns at most 10000 events per GetLogEvents page
MAX_LOG_LINES = 10000


@dataclass(frozen=True)
class Config:
    token_secret_name: str
    github_api_url: str = 'https://api.github.com'
    log_line_limit: int = 200
    http_timeout: float = 10
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ

        try:
            secret_name = environ['SECRETSMANAGER_GITHUBTOKEN_NAME']
        except KeyError:
            raise RuntimeError("couldn't find SECRETSMANAGER_GITHUBTOKEN_NAME in environment")

        try:
            limit = int(environ.get('LOG_LINE_LIMIT', cls.log_line_limit))
            timeout = float(environ.get('HTTP_TIMEOUT', cls.http_timeout))
        except ValueError as e:
            raise RuntimeError(f"invalid numeric setting in environment: {e}") from e

        if not 1 <= limit <= MAX_LOG_LINES:
            raise RuntimeError(f"LOG_LINE_LIMIT must be between 1 and {MAX_LOG_LINES}, got {limit}")

        return cls(
            token_secret_name=secret_name,
            github_api_url=environ.get('GITHUB_API_URL', cls.github_api_url),
            log_line_limit=limit,
            http_timeout=timeout,
            log_level=environ.get('LOG_LEVEL', cls.log_level).upper())
