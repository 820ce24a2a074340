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

from __future__ import annotations

import asyncio
import dataclasses
import functools
import json
import os
import typing

import aiofiles
import httpx

from pr_task_notifier import VERSION
from pr_task_notifier import console


_DEBUG = False


def set_debug(debug: bool) -> None:
    global _DEBUG  # noqa: PLW0603
    _DEBUG = debug


def is_debug() -> bool:
    return _DEBUG


async def check_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return

    await response.aread()
    if is_debug():
        console.print(f"url: {response.request.url}", style="red")
        console.print(f"data: {response.text}", style="red")
    response.raise_for_status()


@dataclasses.dataclass
class CommandError(Exception):
    command_args: tuple[str, ...]
    returncode: int | None
    stdout: bytes

    def __str__(self) -> str:
        return f"failed to run `{' '.join(self.command_args)}`: {self.stdout.decode()}"


async def run_command(*args: str, env: typing.Mapping[str, str] | None = None) -> str:
    if is_debug():
        console.print(f"[purple]DEBUG: running: {' '.join(args)} [/]")
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        env=None if env is None else {**os.environ, **env},
    )
    try:
        stdout, _ = await proc.communicate()
    except asyncio.CancelledError:
        # NOTE: the caller gave up (timeout), don't leave the process behind
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise
    if proc.returncode != 0:
        raise CommandError(args, proc.returncode, stdout)
    return stdout.decode().strip()


# NOTE: must be async for httpx
async def log_httpx_request(request: httpx.Request) -> None:  # noqa: RUF029
    console.print(
        f"[purple]DEBUG: request: {request.method} {request.url} - Waiting for response[/]",
    )


# NOTE: must be async for httpx
async def log_httpx_response(response: httpx.Response) -> None:
    request = response.request
    await response.aread()
    elapsed = response.elapsed.total_seconds()
    console.print(
        f"[purple]DEBUG: response: {request.method} {request.url} - Status {response.status_code} - Elapsed {elapsed} s[/]",
    )


def get_server_http_client(
    server_url: str,
    username: str,
    password: str,
) -> httpx.AsyncClient:
    event_hooks: typing.Mapping[str, list[typing.Callable[..., typing.Any]]] = {
        "request": [],
        "response": [check_for_status],
    }
    if is_debug():
        event_hooks["request"].insert(0, log_httpx_request)
        event_hooks["response"].insert(0, log_httpx_response)

    return httpx.AsyncClient(
        base_url=server_url,
        auth=httpx.BasicAuth(username, password),
        headers={"User-Agent": f"pr_task_notifier/{VERSION}"},
        event_hooks=event_hooks,
        follow_redirects=True,
        timeout=10.0,
    )


class GitHubEventNotFoundError(Exception):
    pass


async def get_github_event(
    event_name: str | None = None,
    event_path: str | None = None,
) -> tuple[str, dict[str, typing.Any]]:
    """Load the webhook payload of the running GitHub Actions workflow.

    Explicit arguments take precedence over `GITHUB_EVENT_NAME` and
    `GITHUB_EVENT_PATH`.
    """
    event_name = event_name or os.environ.get("GITHUB_EVENT_NAME")
    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        msg = "GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set"
        raise GitHubEventNotFoundError(msg)

    try:
        async with aiofiles.open(event_path, encoding="utf-8") as f:
            event = json.loads(await f.read())
    except (OSError, ValueError) as e:
        msg = f"Unable to read GitHub event from {event_path}: {e}"
        raise GitHubEventNotFoundError(msg) from e

    if not isinstance(event, dict):
        msg = f"GitHub event in {event_path} is not a JSON object"
        raise GitHubEventNotFoundError(msg)

    return event_name, event


P = typing.ParamSpec("P")
R = typing.TypeVar("R")


def run_with_asyncio(
    func: typing.Callable[
        P,
        typing.Coroutine[typing.Any, typing.Any, R],
    ],
) -> functools._Wrapped[
    P,
    typing.Coroutine[typing.Any, typing.Any, R],
    P,
    R,
]:
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        result = func(*args, **kwargs)
        return asyncio.run(result)

    return wrapper
