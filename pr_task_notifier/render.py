"""HTML cards posted as task comments.

Every function here is pure: the same variant and context always give the
same markup.
"""

from __future__ import annotations

import dataclasses
import html
import re
import typing

from pr_task_notifier import variants
from pr_task_notifier.mergeability import MergeableState


if typing.TYPE_CHECKING:
    from pr_task_notifier.identity import UserIdentity


def _css(**properties: str) -> str:
    return " ".join(f"{k.replace('_', '-')}: {v};" for k, v in properties.items())


STYLES = {
    "card": _css(
        display="inline-block",
        background="linear-gradient(135deg, #f8f9fa 0%, #e9ecef 100%)",
        border_left="4px solid #6c757d",
        border_radius="8px",
        padding="12px 16px",
        margin="8px 0",
        font_family="-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
        font_size="14px",
        line_height="1.5",
        color="#212529",
        box_shadow="0 2px 4px rgba(0,0,0,0.1)",
    ),
    "link": _css(
        color="#0969da",
        text_decoration="none",
        font_weight="600",
        background="rgba(9, 105, 218, 0.1)",
        padding="2px 6px",
        border_radius="4px",
    ),
    "user_link": _css(
        color="#8250df",
        text_decoration="none",
        font_weight="500",
        background="rgba(130, 80, 223, 0.1)",
        padding="2px 6px",
        border_radius="4px",
    ),
    "external_user_link": _css(
        color="#57606a",
        text_decoration="none",
        font_weight="500",
        background="rgba(87, 96, 106, 0.1)",
        padding="2px 6px",
        border_radius="4px",
    ),
    "badge": _css(
        display="inline-block",
        padding="2px 8px",
        border_radius="12px",
        font_size="12px",
        font_weight="600",
        margin_left="8px",
    ),
    "branch_badge": _css(
        background="#ddf4ff",
        color="#0969da",
        padding="2px 8px",
        border_radius="4px",
        font_family="ui-monospace, SFMono-Regular, monospace",
        font_size="12px",
    ),
    "commit_badge": _css(
        background="#fff8c5",
        color="#9a6700",
        padding="2px 8px",
        border_radius="4px",
        font_family="ui-monospace, SFMono-Regular, monospace",
        font_size="12px",
    ),
    "icon": _css(font_size="16px", margin_right="8px"),
}

CARD_COLORS = {
    "created": "#2da44e",
    "merged": "#8250df",
    "closed": "#cf222e",
    "reopened": "#bf8700",
    "review": "#0969da",
    "approved": "#2da44e",
    "changes": "#bf8700",
    "comment": "#57606a",
    "mention": "#8250df",
    "info": "#6c757d",
}

BRANCH_PREFIXES_RE = re.compile(r"feature/|stable/", re.IGNORECASE)


def _esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def reduce_branch_name(branch: str) -> str:
    return BRANCH_PREFIXES_RE.sub("", branch)


@dataclasses.dataclass(frozen=True)
class RenderContext:
    repository: str
    pull_number: int
    base_branch: str
    site_name: str
    github_server_url: str = "https://github.com"

    @property
    def repository_name(self) -> str:
        return self.repository.rpartition("/")[2]

    @property
    def repository_url(self) -> str:
        return f"{self.github_server_url}/{self.repository}"


def card(color: str, icon: str, content: str) -> str:
    return (
        f'<div style="{STYLES["card"]} border-left-color: {color};">'
        f'<span style="{STYLES["icon"]}">{icon}</span> {content}</div>'
    )


def pull_request_link(ctx: RenderContext) -> str:
    title = f"{ctx.repository}#{ctx.pull_number}"
    return (
        f'<a href="{_esc(ctx.repository_url)}/pull/{ctx.pull_number}" target="_blank" '
        f'style="{STYLES["link"]}" title="{_esc(title)}">'
        f"{_esc(ctx.repository_name)}#{ctx.pull_number}</a> "
        f'<span style="{STYLES["branch_badge"]}" title="{_esc(ctx.base_branch)}">'
        f"{_esc(reduce_branch_name(ctx.base_branch))}</span>"
    )


def user_link(user: UserIdentity | None, ctx: RenderContext) -> str:
    if user is None:
        return ""
    if user.internal_id is None:
        return (
            f'<a href="{_esc(ctx.github_server_url)}/{_esc(user.github_login)}" '
            f'target="_blank" rel="noopener" style="{STYLES["external_user_link"]}">'
            f"👾 {_esc(user.github_login)}</a>"
        )
    return (
        f'<a href="/portal/{_esc(ctx.site_name)}/profile/{_esc(user.internal_id)}" '
        f'target="_self" rel="noopener" style="{STYLES["user_link"]}">'
        f"{_esc(user.display_name)}</a>"
    )


def commit_link(sha: str | None, ctx: RenderContext) -> str:
    if not sha:
        return ""
    return (
        f'<a href="{_esc(ctx.repository_url)}/commit/{_esc(sha)}" target="_blank" '
        f'style="{STYLES["commit_badge"]}">{_esc(sha[:7])}</a>'
    )


def branch_link(branch: str, ctx: RenderContext) -> str:
    return (
        f'<a href="{_esc(ctx.repository_url)}/tree/{_esc(branch)}" target="_blank" '
        f'style="{STYLES["branch_badge"]}">{_esc(branch)}</a>'
    )


def event_link(url: str, text: str, color: str = CARD_COLORS["review"]) -> str:
    if not url:
        return f"<strong>{_esc(text)}</strong>"
    return (
        f'<a href="{_esc(url)}" target="_blank" '
        f'style="color: {color}; text-decoration: none; font-weight: 600;">'
        f"{_esc(text)}</a>"
    )


def mergeable_badge(state: MergeableState) -> str:
    if state != MergeableState.MERGEABLE:
        return ""
    return (
        f'<span style="{STYLES["badge"]} background: #d1f7c4; color: #1e7e34;">'
        "✅ Ready to merge</span>"
    )


def creator_mention(internal_id: str | None) -> str:
    if internal_id is None:
        return ""
    return f" <em>cc @{_esc(internal_id)}</em>"


def mentioned_users(mention: variants.ReviewCommentedWithMention) -> str:
    resolved = mention.resolved_mentions
    if not resolved:
        return f"<em>{mention.unresolved_count} user(s)</em>"
    # Several logins may map to one directory user
    internal_ids = dict.fromkeys(user.internal_id for user in resolved)
    names = [f"@{_esc(internal_id)}" for internal_id in internal_ids]
    return "<strong>" + "</strong> and <strong>".join(names) + "</strong>"


def render(variant: variants.NotificationVariant, ctx: RenderContext) -> str:  # noqa: PLR0911
    pr_link = pull_request_link(ctx)

    match variant:
        case variants.ReviewRequested():
            return card(
                CARD_COLORS["review"],
                "👀",
                f"{pr_link} is <strong>awaiting review</strong> from "
                f"@{_esc(variant.reviewer_internal_id)}",
            )
        case variants.Merged():
            content = f"{pr_link} was <strong>{_esc(variant.merge_method)}</strong>"
            if commit := commit_link(variant.merge_commit_sha, ctx):
                content += f" as {commit}"
            content += f" into {branch_link(variant.base_branch, ctx)}"
            if by := user_link(variant.merger, ctx):
                content += f" by {by}"
            return card(CARD_COLORS["merged"], "🎉", content)
        case variants.Closed():
            return card(
                CARD_COLORS["closed"],
                "🚫",
                f"{pr_link} has been <strong>closed</strong> without merging",
            )
        case variants.Opened():
            return card(
                CARD_COLORS["created"],
                "🚀",
                f"{pr_link} has been <strong>created</strong> and is ready for review",
            )
        case variants.Reopened():
            return card(
                CARD_COLORS["reopened"],
                "🔄",
                f"{pr_link} has been <strong>reopened</strong>",
            )
        case variants.GenericUpdated():
            return card(
                CARD_COLORS["info"],
                "ℹ️",
                f"{pr_link} has been updated <em>({_esc(variant.action)})</em>",
            )
        case variants.ReviewChangesRequested():
            changes = event_link(
                variant.review_url,
                "changes requested",
                CARD_COLORS["changes"],
            )
            return card(
                CARD_COLORS["changes"],
                "🔧",
                f"{pr_link} has {changes} by {user_link(variant.reviewer, ctx)}"
                f"{creator_mention(variant.creator_mention)}",
            )
        case variants.ReviewApproved():
            approved = event_link(
                variant.review_url,
                "approved",
                CARD_COLORS["approved"],
            )
            return card(
                CARD_COLORS["approved"],
                "✅",
                f"{pr_link} has been {approved} by {user_link(variant.reviewer, ctx)}"
                f"{mergeable_badge(variant.mergeable_state)}"
                f"{creator_mention(variant.creator_mention)}",
            )
        case variants.ReviewCommentedWithMention():
            mentioned = event_link(
                variant.review_url,
                "mentioned",
                CARD_COLORS["mention"],
            )
            return card(
                CARD_COLORS["mention"],
                "📣",
                f"{pr_link} {mentioned} {mentioned_users(variant)} in a comment by "
                f"{user_link(variant.reviewer, ctx)}",
            )
        case variants.ReviewCommentedPlain():
            comment = event_link(
                variant.review_url,
                "new comment",
                CARD_COLORS["comment"],
            )
            return card(
                CARD_COLORS["comment"],
                "💬",
                f"{pr_link} has a {comment} by {user_link(variant.reviewer, ctx)}"
                f"{creator_mention(variant.creator_mention)}",
            )
        case variants.ReviewOtherState():
            state = event_link(variant.review_url, variant.state, CARD_COLORS["info"])
            return card(
                CARD_COLORS["info"],
                "ℹ️",
                f"{pr_link} review status: {state}",
            )
        case _:
            typing.assert_never(variant)
