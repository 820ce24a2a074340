#
#  Copyright © 2024-2026 pr-task-notifier authors
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.
import dataclasses
import typing

import respx

from pr_task_notifier import identity
from pr_task_notifier.mergeability import MergeableState


SERVER_URL = "https://tasks.example.com"
REPOSITORY = "exoplatform/task"
CLONE_URL = "https://github.com/octocat/task.git"


@dataclasses.dataclass
class FakeMergeabilityChecker:
    state: MergeableState = MergeableState.UNKNOWN
    _called: list[tuple[int, str | None]] = dataclasses.field(
        init=False,
        default_factory=list,
    )

    def has_been_called_with(self, pull_number: int, head_clone_url: str | None) -> bool:
        return (pull_number, head_clone_url) in self._called

    @property
    def call_count(self) -> int:
        return len(self._called)

    async def query_mergeability(
        self,
        pull_number: int,
        head_clone_url: str | None,
    ) -> MergeableState:
        self._called.append((pull_number, head_clone_url))
        return self.state


def mock_connector(
    respx_mock: respx.MockRouter,
    github_login: str,
    internal_id: str | None,
) -> None:
    route = respx_mock.get(
        identity.CONNECTOR_USERNAME_PATH,
        params={"connectorUserId": github_login},
    )
    if internal_id is None:
        route.respond(404, text="")
    else:
        route.respond(200, text=internal_id)


def mock_directory_user(
    respx_mock: respx.MockRouter,
    github_login: str,
    internal_id: str | None,
    full_name: str | None = None,
) -> None:
    """Map a GitHub login in the mocked directory, profile included.

    `internal_id=None` makes the login unknown, `full_name=None` makes the
    profile lookup fail.
    """
    mock_connector(respx_mock, github_login, internal_id)
    if internal_id is None:
        return

    profile = respx_mock.get(
        identity.USER_PROFILE_PATH.format(internal_id=internal_id),
    )
    if full_name is None:
        profile.respond(404, json={"message": "not found"})
    else:
        profile.respond(200, json={"username": internal_id, "fullname": full_name})


def pull_request_payload(  # noqa: PLR0913
    *,
    action: str = "opened",
    title: str = "TASK-12 Fix the build",
    number: int = 42,
    base_branch: str = "develop",
    author: str = "octocat",
    merged: bool = False,
    merge_commit_sha: str | None = None,
    auto_merge_method: str | None = None,
    merged_by: str | None = None,
    requested_reviewer: str | None = None,
) -> dict[str, typing.Any]:
    pull: dict[str, typing.Any] = {
        "number": number,
        "title": title,
        "user": {"login": author},
        "base": {
            "ref": base_branch,
            "sha": "f95f852bd8fca8fcc58a9a2d6c842781e32a215e",
            "repo": {"name": "task", "full_name": REPOSITORY},
        },
        "head": {
            "ref": "fix-build",
            "sha": "ec26c3e57ca3a959ca5aad62de7213c562f8c821",
            "repo": {"name": "task", "clone_url": CLONE_URL},
        },
        "merged": merged,
        "merge_commit_sha": merge_commit_sha,
        "auto_merge": (
            {"merge_method": auto_merge_method} if auto_merge_method else None
        ),
        "merged_by": {"login": merged_by} if merged_by else None,
    }
    payload: dict[str, typing.Any] = {
        "action": action,
        "number": number,
        "pull_request": pull,
        "repository": {"name": "task", "full_name": REPOSITORY},
    }
    if requested_reviewer is not None:
        payload["requested_reviewer"] = {"login": requested_reviewer}
    return payload


def review_payload(
    *,
    state: str,
    body: str | None = None,
    reviewer: str = "hubot",
    action: str = "submitted",
    **pull_kwargs: typing.Any,
) -> dict[str, typing.Any]:
    payload = pull_request_payload(**pull_kwargs)
    payload["action"] = action
    payload["review"] = {
        "id": 80,
        "user": {"login": reviewer},
        "body": body,
        "state": state,
        "html_url": f"https://github.com/{REPOSITORY}/pull/42#pullrequestreview-80",
    }
    return payload
