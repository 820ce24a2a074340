from __future__ import annotations

import re

import pydantic


DEFAULT_GITHUB_SERVER_URL = "https://github.com"
DEFAULT_MERGEABILITY_TIMEOUT = 30.0


class Settings(pydantic.BaseModel):
    """Configuration of one notification run, loaded once by the CLI."""

    model_config = pydantic.ConfigDict(frozen=True)

    server_url: str
    server_username: str
    server_password: str = pydantic.Field(repr=False)
    tasks_regex_filter: str
    server_default_sitename: str
    github_token: str | None = pydantic.Field(default=None, repr=False)
    github_server_url: str = DEFAULT_GITHUB_SERVER_URL
    mergeability_timeout: float = pydantic.Field(
        default=DEFAULT_MERGEABILITY_TIMEOUT,
        gt=0,
    )

    @pydantic.field_validator("server_url", "github_server_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            msg = "must not be empty"
            raise ValueError(msg)
        return value

    @pydantic.field_validator("tasks_regex_filter")
    @classmethod
    def _check_tasks_regex_filter(cls, value: str) -> str:
        if not value:
            msg = "must not be empty"
            raise ValueError(msg)
        try:
            re.compile(value)
        except re.error as e:
            msg = f"invalid regular expression: {e}"
            raise ValueError(msg) from e
        return value

    def compile_task_pattern(self) -> re.Pattern[str]:
        return re.compile(self.tasks_regex_filter, re.IGNORECASE)
