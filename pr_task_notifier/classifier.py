from __future__ import annotations

import dataclasses
import re
import typing

from rich.markup import escape

from pr_task_notifier import console
from pr_task_notifier import exceptions
from pr_task_notifier import github_event
from pr_task_notifier import identity
from pr_task_notifier import variants


if typing.TYPE_CHECKING:
    from pr_task_notifier.identity import IdentityResolver
    from pr_task_notifier.mergeability import MergeabilityChecker


MENTION_RE = re.compile(r"(?:^| )@([a-zA-Z0-9]+-?[a-zA-Z0-9]+)(?= |\Z)")

# NOTE: GitHub shows reviews of deleted accounts as authored by `ghost`
GHOST_LOGIN = "ghost"


def find_mentions(body: str) -> list[str]:
    """Return the distinct GitHub logins mentioned in a review body, in order."""
    return list(dict.fromkeys(MENTION_RE.findall(body)))


@dataclasses.dataclass
class EventClassifier:
    resolver: IdentityResolver
    mergeability_checker: MergeabilityChecker

    async def classify(
        self,
        event: github_event.PullRequestEvent,
    ) -> variants.NotificationVariant | None:
        if event.kind == github_event.PULL_REQUEST_EVENT:
            return await self._classify_pull_request(event)
        if event.kind == github_event.PULL_REQUEST_REVIEW_EVENT:
            if event.action != "submitted":
                console.log(
                    f"Review action `{escape(event.action)}` is not supported for Task notification. Aborting.",
                )
                return None
            return await self._classify_review(event)
        console.log(
            f"Event `{escape(event.kind)}` is not supported for Task notification. Aborting.",
        )
        return None

    async def _resolve_with_fallback(
        self,
        github_login: str,
        role: str,
    ) -> identity.UserIdentity:
        user = await self.resolver.resolve_user(github_login)
        if not user.resolved:
            console.log(
                f"❌ Unable to retrieve {role}'s server user identifier! Using Github username instead.",
                style="yellow",
            )
        return user

    async def _classify_pull_request(
        self,
        event: github_event.PullRequestEvent,
    ) -> variants.NotificationVariant:
        pull = event.pull_request

        if event.action == "review_requested":
            reviewer = await self.resolver.resolve_internal(event.requested_reviewer)
            if reviewer is None:
                raise exceptions.ReviewerNotResolvedError(event.requested_reviewer)
            console.log(f"👀 Review requested from {escape(reviewer)}.")
            return variants.ReviewRequested(reviewer_internal_id=reviewer)

        # NOTE: GitHub delivers merges as `closed` with the merged flag set, so
        # this must be checked before the plain `closed` action.
        if pull.merged:
            merger = None
            if pull.merged_by is not None:
                merger = await self._resolve_with_fallback(pull.merged_by, "merger")
            return variants.Merged(
                merge_commit_sha=pull.merge_commit_sha,
                auto_merge_method=pull.auto_merge_method,
                merger=merger,
                base_branch=pull.base_branch,
            )

        match event.action:
            case "closed":
                return variants.Closed()
            case "opened":
                return variants.Opened()
            case "reopened":
                return variants.Reopened()
            case _:
                return variants.GenericUpdated(action=event.action)

    async def _classify_review(
        self,
        event: github_event.PullRequestEvent,
    ) -> variants.NotificationVariant:
        pull = event.pull_request
        review = event.review
        if review is None:
            raise exceptions.PullRequestNotFoundError

        creator_mention = await self.resolver.resolve_internal(pull.author)

        reviewer = await self._resolve_with_fallback(
            review.reviewer or GHOST_LOGIN,
            "reviewer",
        )

        match review.state:
            case "changes_requested":
                return variants.ReviewChangesRequested(
                    reviewer=reviewer,
                    review_url=review.html_url,
                    creator_mention=creator_mention,
                )
            case "approved":
                mergeable_state = await self.mergeability_checker.query_mergeability(
                    pull.number,
                    pull.head_clone_url,
                )
                return variants.ReviewApproved(
                    reviewer=reviewer,
                    review_url=review.html_url,
                    mergeable_state=mergeable_state,
                    creator_mention=creator_mention,
                )
            case "commented":
                mentioned_logins = find_mentions(review.body)
                if not mentioned_logins:
                    return variants.ReviewCommentedPlain(
                        reviewer=reviewer,
                        review_url=review.html_url,
                        creator_mention=creator_mention,
                    )
                mentions = []
                for login in mentioned_logins:
                    internal_id = await self.resolver.resolve_internal(login)
                    mentions.append(
                        identity.UserIdentity(login, internal_id),
                    )
                return variants.ReviewCommentedWithMention(
                    reviewer=reviewer,
                    review_url=review.html_url,
                    mentions=tuple(mentions),
                )
            case _:
                return variants.ReviewOtherState(
                    state=review.state,
                    review_url=review.html_url,
                )
