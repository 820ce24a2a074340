from __future__ import annotations

import re


SUPPORTED_BRANCH_RE = re.compile(
    r"master"
    r"|develop(-exo|-meed)?"
    r"|feature/[A-Za-z-]+[0-9]?"
    r"|stable/[0-9]+(\.[0-9]+)*\.x(-exo)?",
    re.IGNORECASE,
)

BOT_LOGIN_RE = re.compile(r"dependabot\[bot\]|snyk-bot", re.IGNORECASE)


def is_eligible(base_branch: str) -> bool:
    return SUPPORTED_BRANCH_RE.fullmatch(base_branch) is not None


def is_bot(login: str) -> bool:
    return BOT_LOGIN_RE.fullmatch(login) is not None
