from __future__ import annotations

import dataclasses
import typing

from pr_task_notifier.mergeability import MergeableState


if typing.TYPE_CHECKING:
    from pr_task_notifier.identity import UserIdentity


@dataclasses.dataclass(frozen=True)
class ReviewRequested:
    reviewer_internal_id: str


@dataclasses.dataclass(frozen=True)
class Merged:
    merge_commit_sha: str | None
    auto_merge_method: str | None
    merger: UserIdentity | None
    base_branch: str

    @property
    def merge_method(self) -> str:
        if self.auto_merge_method is None:
            return "merged"
        return f"auto-{self.auto_merge_method}"


@dataclasses.dataclass(frozen=True)
class Closed:
    pass


@dataclasses.dataclass(frozen=True)
class Opened:
    pass


@dataclasses.dataclass(frozen=True)
class Reopened:
    pass


@dataclasses.dataclass(frozen=True)
class GenericUpdated:
    action: str


@dataclasses.dataclass(frozen=True)
class ReviewChangesRequested:
    reviewer: UserIdentity
    review_url: str
    creator_mention: str | None = None


@dataclasses.dataclass(frozen=True)
class ReviewApproved:
    reviewer: UserIdentity
    review_url: str
    mergeable_state: MergeableState = MergeableState.UNKNOWN
    creator_mention: str | None = None


@dataclasses.dataclass(frozen=True)
class ReviewCommentedWithMention:
    reviewer: UserIdentity
    review_url: str
    mentions: tuple[UserIdentity, ...]

    @property
    def resolved_mentions(self) -> tuple[UserIdentity, ...]:
        return tuple(m for m in self.mentions if m.resolved)

    @property
    def unresolved_count(self) -> int:
        return len(self.mentions) - len(self.resolved_mentions)


@dataclasses.dataclass(frozen=True)
class ReviewCommentedPlain:
    reviewer: UserIdentity
    review_url: str
    creator_mention: str | None = None


@dataclasses.dataclass(frozen=True)
class ReviewOtherState:
    state: str
    review_url: str


NotificationVariant = (
    ReviewRequested
    | Merged
    | Closed
    | Opened
    | Reopened
    | GenericUpdated
    | ReviewChangesRequested
    | ReviewApproved
    | ReviewCommentedWithMention
    | ReviewCommentedPlain
    | ReviewOtherState
)
