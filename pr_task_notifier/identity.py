from __future__ import annotations

import dataclasses
import typing

from rich.markup import escape

from pr_task_notifier import console
from pr_task_notifier import utils


if typing.TYPE_CHECKING:
    import httpx


CONNECTOR_USERNAME_PATH = "/rest/private/gamification/connectors/username/github"
USER_PROFILE_PATH = "/rest/private/v1/social/users/{internal_id}"


@dataclasses.dataclass(frozen=True)
class UserIdentity:
    """A GitHub login and whatever the directory knows about it.

    `internal_id` is None when the login is not mapped to a directory user,
    `full_name` is None when the directory profile could not be fetched.
    """

    github_login: str
    internal_id: str | None = None
    full_name: str | None = None

    @property
    def resolved(self) -> bool:
        return self.internal_id is not None

    @property
    def display_name(self) -> str:
        if self.internal_id is None:
            return self.github_login
        return self.full_name or self.internal_id


@dataclasses.dataclass
class IdentityResolver:
    client: httpx.AsyncClient

    async def resolve_internal(self, github_login: str | None) -> str | None:
        if not github_login:
            return None
        try:
            response = await self.client.get(
                CONNECTOR_USERNAME_PATH,
                params={"connectorUserId": github_login},
            )
            if response.headers.get("content-type", "").startswith(
                "application/json",
            ):
                data = response.json()
                internal_id = data.strip() if isinstance(data, str) else ""
            else:
                internal_id = response.text.strip()
        except Exception as e:  # noqa: BLE001
            if utils.is_debug():
                console.print(
                    f"[purple]DEBUG: no directory user for {escape(github_login)}: {escape(str(e))}[/]",
                )
            return None
        return internal_id or None

    async def resolve_profile(self, internal_id: str) -> str | None:
        try:
            response = await self.client.get(
                USER_PROFILE_PATH.format(internal_id=internal_id),
            )
            full_name = response.json().get("fullname")
        except Exception as e:  # noqa: BLE001
            if utils.is_debug():
                console.print(
                    f"[purple]DEBUG: no directory profile for {escape(internal_id)}: {escape(str(e))}[/]",
                )
            return None
        if not isinstance(full_name, str) or not full_name:
            return None
        return full_name

    async def resolve_user(self, github_login: str) -> UserIdentity:
        internal_id = await self.resolve_internal(github_login)
        if internal_id is None:
            return UserIdentity(github_login)
        full_name = await self.resolve_profile(internal_id)
        return UserIdentity(github_login, internal_id, full_name)
