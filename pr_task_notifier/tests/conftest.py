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
import typing

import httpx
import pytest

from pr_task_notifier import config
from pr_task_notifier import dispatch
from pr_task_notifier import identity
from pr_task_notifier import utils
from pr_task_notifier.tests import utils as test_utils


ENV_VARS_TO_CLEAR = (
    "GITHUB_EVENT_NAME",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_STEP_SUMMARY",
    "GITHUB_TOKEN",
    "INPUT_GITHUB_TOKEN",
    "INPUT_SERVER_URL",
    "INPUT_SERVER_USERNAME",
    "INPUT_SERVER_PASSWORD",
    "INPUT_TASKS_REGEX_FILTER",
    "INPUT_SERVER_DEFAULT_SITENAME",
)


@pytest.fixture(autouse=True)
def _clean_github_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # Tests may run inside a GitHub Actions job themselves
    for env in ENV_VARS_TO_CLEAR:
        monkeypatch.delenv(env, raising=False)
    utils.set_debug(False)


@pytest.fixture
def settings() -> config.Settings:
    return config.Settings(
        server_url=test_utils.SERVER_URL,
        server_username="root",
        server_password="secret",  # noqa: S106
        tasks_regex_filter=r"TASK-\d+",
        server_default_sitename="dw",
        github_token="gh-token",  # noqa: S106
    )


@pytest.fixture
async def client(
    settings: config.Settings,
) -> typing.AsyncGenerator[httpx.AsyncClient, None]:
    async with utils.get_server_http_client(
        settings.server_url,
        settings.server_username,
        settings.server_password,
    ) as c:
        yield c


@pytest.fixture
def resolver(client: httpx.AsyncClient) -> identity.IdentityResolver:
    return identity.IdentityResolver(client)


@pytest.fixture
def dispatcher(client: httpx.AsyncClient) -> dispatch.Dispatcher:
    return dispatch.Dispatcher(client)


@pytest.fixture
def mergeability_checker() -> test_utils.FakeMergeabilityChecker:
    return test_utils.FakeMergeabilityChecker()
