from __future__ import annotations

import asyncio
import dataclasses
import enum
import typing

from rich.markup import escape

from pr_task_notifier import console
from pr_task_notifier import utils


class MergeableState(enum.StrEnum):
    MERGEABLE = "MERGEABLE"
    CONFLICTING = "CONFLICTING"
    UNKNOWN = "UNKNOWN"


class MergeabilityChecker(typing.Protocol):
    async def query_mergeability(
        self,
        pull_number: int,
        head_clone_url: str | None,
    ) -> MergeableState: ...


@dataclasses.dataclass
class GhCliMergeabilityChecker:
    """Ask the `gh` CLI whether a pull request can be merged."""

    token: str | None
    timeout: float

    async def query_mergeability(
        self,
        pull_number: int,
        head_clone_url: str | None,
    ) -> MergeableState:
        if not head_clone_url:
            return MergeableState.UNKNOWN

        env = {"GH_TOKEN": self.token} if self.token else None
        try:
            output = await asyncio.wait_for(
                utils.run_command(
                    "gh",
                    "pr",
                    "view",
                    str(pull_number),
                    "--repo",
                    head_clone_url,
                    "--json",
                    "mergeable",
                    "-q",
                    ".mergeable",
                    env=env,
                ),
                timeout=self.timeout,
            )
        except TimeoutError:
            console.log(
                f"Failed to check mergeable status: no answer after {self.timeout}s",
                style="yellow",
            )
            return MergeableState.UNKNOWN
        except (utils.CommandError, OSError) as e:
            console.log(
                f"Failed to check mergeable status: {escape(str(e))}",
                style="yellow",
            )
            return MergeableState.UNKNOWN

        try:
            return MergeableState(output.strip().upper())
        except ValueError:
            return MergeableState.UNKNOWN
