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

import os
import subprocess
import sys

import click
import click_default_group
import pydantic

from pr_task_notifier import VERSION
from pr_task_notifier import config
from pr_task_notifier import console
from pr_task_notifier import dispatch
from pr_task_notifier import exceptions
from pr_task_notifier import github_event
from pr_task_notifier import identity
from pr_task_notifier import mergeability
from pr_task_notifier import notify as notify_mod
from pr_task_notifier import utils


def _action_envvars(name: str) -> list[str]:
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>
    return [f"INPUT_{name}", name]


@click.group(
    cls=click_default_group.DefaultGroup,
    default="notify",
    default_if_no_args=True,
)
@click.option("--debug", is_flag=True, default=False, help="debug mode")
@click.version_option(VERSION)
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
) -> None:
    ctx.obj = {"debug": debug}
    utils.set_debug(debug)


@cli.command(help="Post the pull request event of this workflow run to its tasks")
@click.option(
    "--server-url",
    help="Base URL of the task server",
    required=True,
    envvar=_action_envvars("SERVER_URL"),
)
@click.option(
    "--server-username",
    help="Task server user",
    required=True,
    envvar=_action_envvars("SERVER_USERNAME"),
)
@click.option(
    "--server-password",
    help="Task server password",
    required=True,
    envvar=_action_envvars("SERVER_PASSWORD"),
)
@click.option(
    "--tasks-regex-filter",
    help="Regular expression matching task references in the pull request title",
    required=True,
    envvar=_action_envvars("TASKS_REGEX_FILTER"),
)
@click.option(
    "--server-default-sitename",
    help="Site name used to build profile links",
    required=True,
    envvar=_action_envvars("SERVER_DEFAULT_SITENAME"),
)
@click.option(
    "--github-token",
    help="Token used by the gh CLI to check mergeability",
    envvar=_action_envvars("GITHUB_TOKEN"),
)
@click.option(
    "--github-server-url",
    help="URL of the GitHub server",
    envvar="GITHUB_SERVER_URL",
    default=config.DEFAULT_GITHUB_SERVER_URL,
    show_default=True,
)
@click.option(
    "--repository",
    "-r",
    help="Repository full name (owner/repo)",
    envvar="GITHUB_REPOSITORY",
)
@click.option(
    "--event-name",
    help="Name of the GitHub event",
    envvar="GITHUB_EVENT_NAME",
)
@click.option(
    "--event-path",
    help="Path of the GitHub event payload",
    envvar="GITHUB_EVENT_PATH",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--mergeability-timeout",
    help="Seconds to wait for the mergeability check",
    type=float,
    default=config.DEFAULT_MERGEABILITY_TIMEOUT,
    show_default=True,
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Render the notification without posting it",
)
@utils.run_with_asyncio
async def notify(  # noqa: PLR0913
    *,
    server_url: str,
    server_username: str,
    server_password: str,
    tasks_regex_filter: str,
    server_default_sitename: str,
    github_token: str | None,
    github_server_url: str,
    repository: str | None,
    event_name: str | None,
    event_path: str | None,
    mergeability_timeout: float,
    dry_run: bool,
) -> None:
    try:
        settings = config.Settings(
            server_url=server_url,
            server_username=server_username,
            server_password=server_password,
            tasks_regex_filter=tasks_regex_filter,
            server_default_sitename=server_default_sitename,
            github_token=github_token,
            github_server_url=github_server_url,
            mergeability_timeout=mergeability_timeout,
        )
    except pydantic.ValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        kind, payload = await utils.get_github_event(event_name, event_path)
        event = github_event.PullRequestEvent.from_payload(
            kind,
            payload,
            repository=repository,
        )
    except (
        utils.GitHubEventNotFoundError,
        exceptions.NotifierError,
        pydantic.ValidationError,
    ) as e:
        console.print(f"error: {e}", style="red")
        sys.exit(1)

    async with utils.get_server_http_client(
        settings.server_url,
        settings.server_username,
        settings.server_password,
    ) as client:
        try:
            result = await notify_mod.notify(
                settings,
                event,
                resolver=identity.IdentityResolver(client),
                dispatcher=dispatch.Dispatcher(client),
                mergeability_checker=mergeability.GhCliMergeabilityChecker(
                    token=settings.github_token,
                    timeout=settings.mergeability_timeout,
                ),
                dry_run=dry_run,
            )
        except exceptions.NotifierError as e:
            console.print(f"error: {e}", style="red")
            sys.exit(1)

    notify_mod.maybe_write_github_step_summary(result)


def enforce_utf8_mode() -> None:
    if sys.flags.utf8_mode:
        return

    argv = [sys.executable, "-X", "utf8"]
    argv.extend(subprocess._args_from_interpreter_flags())  # type: ignore[attr-defined]  # noqa: SLF001
    argv.extend(sys.argv)

    os.execv(argv[0], argv)  # noqa: S606


def main() -> None:
    # NOTE: cards are full of emoji, and the default encoding on windows may
    # not be an unicode one.
    if os.name == "nt":
        enforce_utf8_mode()
    cli()
