from __future__ import annotations

import dataclasses
import enum
import os
import pathlib
import typing

from rich.markup import escape

from pr_task_notifier import classifier
from pr_task_notifier import console
from pr_task_notifier import gates
from pr_task_notifier import render
from pr_task_notifier import tasks


if typing.TYPE_CHECKING:
    from pr_task_notifier import config
    from pr_task_notifier import dispatch
    from pr_task_notifier import github_event
    from pr_task_notifier.identity import IdentityResolver
    from pr_task_notifier.mergeability import MergeabilityChecker


class NotifyStatus(enum.StrEnum):
    NOTIFIED = "notified"
    DRY_RUN = "dry-run"
    UNSUPPORTED_BRANCH = "unsupported-branch"
    BOT_AUTHOR = "bot-author"
    NO_TASKS = "no-tasks"
    UNSUPPORTED_EVENT = "unsupported-event"


@dataclasses.dataclass(frozen=True)
class NotifyResult:
    status: NotifyStatus
    task_ids: tuple[tasks.TaskId, ...] = ()
    message: str | None = None
    outcomes: tuple[dispatch.DeliveryOutcome, ...] = ()


async def notify(  # noqa: PLR0913
    settings: config.Settings,
    event: github_event.PullRequestEvent,
    *,
    resolver: IdentityResolver,
    dispatcher: dispatch.Dispatcher,
    mergeability_checker: MergeabilityChecker,
    dry_run: bool = False,
) -> NotifyResult:
    """Notify every task referenced by the pull request title of `event`.

    Unsupported branches, bot authors, titles without task and unsupported
    events end the run early without error. Delivery failures are only
    reported in the returned outcomes.
    """
    pull = event.pull_request

    if not gates.is_eligible(pull.base_branch):
        console.log(
            f"❌ Branch {escape(pull.base_branch)} is not supported for Task notification. Aborting.",
        )
        return NotifyResult(NotifyStatus.UNSUPPORTED_BRANCH)

    if gates.is_bot(pull.author):
        console.log(
            "🤖 PR created by a bot user is not supported for Task notification. Aborting.",
        )
        return NotifyResult(NotifyStatus.BOT_AUTHOR)

    pattern = settings.compile_task_pattern()
    # A match without digits is reported apart from no match at all
    if pattern.search(pull.title) is None:
        console.log("🚫 No relevant tasks found in the PR title. Aborting.")
        return NotifyResult(NotifyStatus.NO_TASKS)

    task_ids = tuple(tasks.extract_task_ids(pull.title, pattern))
    if not task_ids:
        console.log("🚫 No task IDs found in the PR title. Aborting.")
        return NotifyResult(NotifyStatus.NO_TASKS)

    console.log("OK Task(s) found! Starting notifications...")

    event_classifier = classifier.EventClassifier(resolver, mergeability_checker)
    variant = await event_classifier.classify(event)
    if variant is None:
        return NotifyResult(NotifyStatus.UNSUPPORTED_EVENT, task_ids=task_ids)

    message = render.render(
        variant,
        render.RenderContext(
            repository=pull.repository,
            pull_number=pull.number,
            base_branch=pull.base_branch,
            site_name=settings.server_default_sitename,
            github_server_url=settings.github_server_url,
        ),
    )

    console.log("*** Message is:")
    console.print(message, markup=False, highlight=False, soft_wrap=True)
    console.log("***")

    if dry_run:
        console.log("Dry run, no comment posted.")
        return NotifyResult(NotifyStatus.DRY_RUN, task_ids=task_ids, message=message)

    outcomes = await dispatcher.deliver(message, task_ids)
    return NotifyResult(
        NotifyStatus.NOTIFIED,
        task_ids=task_ids,
        message=message,
        outcomes=tuple(outcomes),
    )


def maybe_write_github_step_summary(result: NotifyResult) -> None:
    gha = os.environ.get("GITHUB_STEP_SUMMARY")
    if not gha:
        return

    markdown = "## Task notification\n\n"
    if result.message is None:
        markdown += f"No notification sent (`{result.status}`).\n"
    else:
        markdown += f"{result.message}\n\n"
        if result.outcomes:
            markdown += "| 📋 Task | 📬 Delivered |\n|:--|:--|\n"
            for outcome in result.outcomes:
                emoji = "✅" if outcome.delivered else "❌"
                markdown += f"| `{outcome.task_id}` | {emoji} |\n"

    with pathlib.Path(gha).open("a", encoding="utf-8") as fh:
        fh.write(markdown)
