from __future__ import annotations

import dataclasses


class NotifierError(Exception):
    pass


class PullRequestNotFoundError(NotifierError):
    def __str__(self) -> str:
        return "No pull request information found"


@dataclasses.dataclass
class ReviewerNotResolvedError(NotifierError):
    github_login: str | None

    def __str__(self) -> str:
        return (
            f"Unable to retrieve the server user identifier of requested "
            f"reviewer `{self.github_login}`"
        )


class RepositoryNotFoundError(NotifierError):
    def __str__(self) -> str:
        return "No repository information found"
