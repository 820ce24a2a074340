from __future__ import annotations

import pytest

from pr_task_notifier import identity
from pr_task_notifier import render
from pr_task_notifier import variants
from pr_task_notifier.mergeability import MergeableState


REVIEW_URL = "https://github.com/exoplatform/task/pull/42#pullrequestreview-80"
SHA = "e5bd3914e2e596debea16f433f57875b5b90bcd6"

CTX = render.RenderContext(
    repository="exoplatform/task",
    pull_number=42,
    base_branch="feature/agenda",
    site_name="dw",
)

REVIEWER = identity.UserIdentity("hubot", "bsmith", "Bob Smith")
UNKNOWN_REVIEWER = identity.UserIdentity("hubot")


@pytest.mark.parametrize(
    ("branch", "expected"),
    [
        ("feature/agenda", "agenda"),
        ("stable/6.5.x", "6.5.x"),
        ("Feature/Agenda", "Agenda"),
        ("develop", "develop"),
    ],
)
def test_reduce_branch_name(branch: str, expected: str) -> None:
    assert render.reduce_branch_name(branch) == expected


def test_pull_request_link() -> None:
    link = render.pull_request_link(CTX)

    assert 'href="https://github.com/exoplatform/task/pull/42"' in link
    assert 'title="exoplatform/task#42"' in link
    assert ">task#42</a>" in link
    assert 'title="feature/agenda">agenda</span>' in link


def test_user_link_internal() -> None:
    link = render.user_link(REVIEWER, CTX)

    assert 'href="/portal/dw/profile/bsmith"' in link
    assert ">Bob Smith</a>" in link


def test_user_link_without_profile() -> None:
    link = render.user_link(identity.UserIdentity("hubot", "bsmith"), CTX)

    assert 'href="/portal/dw/profile/bsmith"' in link
    assert ">bsmith</a>" in link


def test_user_link_external() -> None:
    link = render.user_link(UNKNOWN_REVIEWER, CTX)

    assert 'href="https://github.com/hubot"' in link
    assert "👾 hubot</a>" in link


def test_user_link_missing() -> None:
    assert render.user_link(None, CTX) == ""


def test_review_requested() -> None:
    card = render.render(variants.ReviewRequested("bsmith"), CTX)

    assert card.startswith("<div ")
    assert card.endswith("</div>")
    assert "👀" in card
    assert "<strong>awaiting review</strong> from @bsmith" in card
    assert f"border-left-color: {render.CARD_COLORS['review']};" in card


def test_merged() -> None:
    card = render.render(
        variants.Merged(
            merge_commit_sha=SHA,
            auto_merge_method="squash",
            merger=REVIEWER,
            base_branch="feature/agenda",
        ),
        CTX,
    )

    assert "🎉" in card
    assert "was <strong>auto-squash</strong>" in card
    assert f'href="https://github.com/exoplatform/task/commit/{SHA}"' in card
    assert ">e5bd391</a>" in card
    assert 'href="https://github.com/exoplatform/task/tree/feature/agenda"' in card
    assert ">feature/agenda</a>" in card
    assert " by <a " in card
    assert ">Bob Smith</a>" in card


def test_merged_without_optional_fields() -> None:
    card = render.render(
        variants.Merged(
            merge_commit_sha=None,
            auto_merge_method=None,
            merger=None,
            base_branch="develop",
        ),
        CTX,
    )

    assert "was <strong>merged</strong> into <a " in card
    assert "/commit/" not in card
    assert " by " not in card


@pytest.mark.parametrize(
    ("variant", "icon", "text"),
    [
        (variants.Closed(), "🚫", "has been <strong>closed</strong> without merging"),
        (
            variants.Opened(),
            "🚀",
            "has been <strong>created</strong> and is ready for review",
        ),
        (variants.Reopened(), "🔄", "has been <strong>reopened</strong>"),
        (
            variants.GenericUpdated("synchronize"),
            "ℹ️",
            "has been updated <em>(synchronize)</em>",
        ),
    ],
)
def test_simple_cards(
    variant: variants.NotificationVariant,
    icon: str,
    text: str,
) -> None:
    card = render.render(variant, CTX)

    assert icon in card
    assert text in card
    assert ">task#42</a>" in card


def test_changes_requested_with_creator_mention() -> None:
    card = render.render(
        variants.ReviewChangesRequested(REVIEWER, REVIEW_URL, creator_mention="jdoe"),
        CTX,
    )

    assert "🔧" in card
    assert f'href="{REVIEW_URL}"' in card
    assert ">changes requested</a> by <a " in card
    assert card.endswith("</a> <em>cc @jdoe</em></div>")


def test_changes_requested_without_creator_mention() -> None:
    card = render.render(
        variants.ReviewChangesRequested(UNKNOWN_REVIEWER, REVIEW_URL),
        CTX,
    )

    assert "cc @" not in card
    assert "👾 hubot</a></div>" in card


def test_approved_mergeable() -> None:
    card = render.render(
        variants.ReviewApproved(
            REVIEWER,
            REVIEW_URL,
            mergeable_state=MergeableState.MERGEABLE,
            creator_mention="jdoe",
        ),
        CTX,
    )

    assert "✅ Ready to merge</span> <em>cc @jdoe</em>" in card
    assert ">approved</a> by <a " in card


@pytest.mark.parametrize(
    "state",
    [MergeableState.CONFLICTING, MergeableState.UNKNOWN],
)
def test_approved_not_mergeable(state: MergeableState) -> None:
    card = render.render(
        variants.ReviewApproved(REVIEWER, REVIEW_URL, mergeable_state=state),
        CTX,
    )

    assert "Ready to merge" not in card


def test_commented_with_unresolved_mention() -> None:
    card = render.render(
        variants.ReviewCommentedWithMention(
            UNKNOWN_REVIEWER,
            REVIEW_URL,
            mentions=(identity.UserIdentity("alice"),),
        ),
        CTX,
    )

    assert "📣" in card
    assert ">mentioned</a> <em>1 user(s)</em> in a comment by <a " in card


def test_commented_with_resolved_mentions() -> None:
    card = render.render(
        variants.ReviewCommentedWithMention(
            REVIEWER,
            REVIEW_URL,
            mentions=(
                identity.UserIdentity("alice", "alice.w"),
                identity.UserIdentity("mona-lisa"),
                identity.UserIdentity("bob", "bob.s"),
            ),
        ),
        CTX,
    )

    assert (
        "<strong>@alice.w</strong> and <strong>@bob.s</strong> in a comment by" in card
    )
    assert "mona-lisa" not in card
    assert "user(s)" not in card


def test_commented_with_logins_of_one_user() -> None:
    card = render.render(
        variants.ReviewCommentedWithMention(
            REVIEWER,
            REVIEW_URL,
            mentions=(
                identity.UserIdentity("alice", "alice.w"),
                identity.UserIdentity("alice-work", "alice.w"),
                identity.UserIdentity("bob", "bob.s"),
            ),
        ),
        CTX,
    )

    assert card.count("@alice.w") == 1
    assert (
        "<strong>@alice.w</strong> and <strong>@bob.s</strong> in a comment by" in card
    )


def test_commented_plain() -> None:
    card = render.render(
        variants.ReviewCommentedPlain(REVIEWER, REVIEW_URL, creator_mention="jdoe"),
        CTX,
    )

    assert "💬" in card
    assert "has a <a " in card
    assert ">new comment</a> by <a " in card
    assert "<em>cc @jdoe</em>" in card


def test_other_review_state() -> None:
    card = render.render(variants.ReviewOtherState("dismissed", REVIEW_URL), CTX)

    assert "review status: <a " in card
    assert ">dismissed</a>" in card


def test_other_review_state_without_url() -> None:
    card = render.render(variants.ReviewOtherState("dismissed", ""), CTX)

    assert "review status: <strong>dismissed</strong>" in card


def test_payload_text_is_escaped() -> None:
    card = render.render(variants.GenericUpdated("<script>"), CTX)

    assert "<script>" not in card
    assert "&lt;script&gt;" in card


def test_render_is_deterministic() -> None:
    variant = variants.ReviewCommentedWithMention(
        REVIEWER,
        REVIEW_URL,
        mentions=(
            identity.UserIdentity("bob", "bob.s"),
            identity.UserIdentity("alice", "alice.w"),
        ),
    )

    first = render.render(variant, CTX)
    assert render.render(variant, CTX) == first
    assert first.index("@bob.s") < first.index("@alice.w")


def test_render_is_single_line() -> None:
    card = render.render(variants.ReviewApproved(REVIEWER, REVIEW_URL), CTX)

    assert "\n" not in card
