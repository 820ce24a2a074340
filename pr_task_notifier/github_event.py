from __future__ import annotations

import dataclasses
import typing

import pydantic

from pr_task_notifier import exceptions


PULL_REQUEST_EVENT = "pull_request"
PULL_REQUEST_REVIEW_EVENT = "pull_request_review"


class User(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    login: str


class Repository(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    name: str | None = None
    full_name: str | None = None
    clone_url: str | None = None


class GitRef(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    ref: str
    sha: str | None = None
    repo: Repository | None = None


class AutoMerge(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    merge_method: str | None = None


class PullRequest(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    number: int
    title: str | None = None
    user: User
    base: GitRef
    head: GitRef | None = None
    merged: bool | None = None
    merge_commit_sha: str | None = None
    auto_merge: AutoMerge | None = None
    merged_by: User | None = None


class Review(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    user: User | None = None
    state: str | None = None
    body: str | None = None
    html_url: str | None = None
    pull_request: PullRequest | None = None


class GitHubEvent(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    action: str | None = None
    pull_request: PullRequest | None = None
    review: Review | None = None
    requested_reviewer: User | None = None
    repository: Repository | None = None


@dataclasses.dataclass(frozen=True)
class PullRequestRef:
    repository: str
    number: int
    title: str
    base_branch: str
    author: str
    head_clone_url: str | None = None
    merged: bool = False
    merge_commit_sha: str | None = None
    auto_merge_method: str | None = None
    merged_by: str | None = None

    @property
    def repository_name(self) -> str:
        return self.repository.rpartition("/")[2]


@dataclasses.dataclass(frozen=True)
class ReviewRef:
    reviewer: str | None
    state: str
    body: str
    html_url: str


@dataclasses.dataclass(frozen=True)
class PullRequestEvent:
    kind: str
    action: str
    pull_request: PullRequestRef
    requested_reviewer: str | None = None
    review: ReviewRef | None = None

    @classmethod
    def from_payload(
        cls,
        kind: str,
        payload: typing.Mapping[str, typing.Any],
        repository: str | None = None,
    ) -> PullRequestEvent:
        """Build the event view of a raw webhook payload.

        The pull request is looked up at the top level first, then under the
        review object. Raises `PullRequestNotFoundError` when neither exists.
        """
        event = GitHubEvent.model_validate(payload)

        pull = event.pull_request
        if pull is None and event.review is not None:
            pull = event.review.pull_request
        if pull is None:
            raise exceptions.PullRequestNotFoundError

        if not repository:
            if event.repository is not None and event.repository.full_name:
                repository = event.repository.full_name
            elif pull.base.repo is not None and pull.base.repo.full_name:
                repository = pull.base.repo.full_name
            else:
                raise exceptions.RepositoryNotFoundError

        head_clone_url = None
        if pull.head is not None and pull.head.repo is not None:
            head_clone_url = pull.head.repo.clone_url

        review = None
        if event.review is not None:
            review = ReviewRef(
                reviewer=event.review.user.login if event.review.user else None,
                state=event.review.state or "",
                body=event.review.body or "",
                html_url=event.review.html_url or "",
            )

        return cls(
            kind=kind,
            action=event.action or "",
            pull_request=PullRequestRef(
                repository=repository,
                number=pull.number,
                title=pull.title or "",
                base_branch=pull.base.ref,
                author=pull.user.login,
                head_clone_url=head_clone_url,
                merged=pull.merged is True,
                merge_commit_sha=pull.merge_commit_sha,
                auto_merge_method=(
                    pull.auto_merge.merge_method if pull.auto_merge else None
                ),
                merged_by=pull.merged_by.login if pull.merged_by else None,
            ),
            requested_reviewer=(
                event.requested_reviewer.login if event.requested_reviewer else None
            ),
            review=review,
        )
