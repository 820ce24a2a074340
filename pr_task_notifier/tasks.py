from __future__ import annotations

import re
import typing


TaskId = typing.NewType("TaskId", str)

DIGITS_RE = re.compile(r"\d+")


def extract_task_ids(title: str, pattern: re.Pattern[str]) -> list[TaskId]:
    """Return the task ids referenced by a pull request title.

    Every digit run found inside one match of `pattern` is joined with a
    space into a single id, so `TASK-12-34` gives `"12 34"`. Matches without
    digits are dropped, duplicates coming from distinct matches are kept.
    """
    task_ids = []
    for match in pattern.finditer(title):
        token = " ".join(DIGITS_RE.findall(match.group(0)))
        if token:
            task_ids.append(TaskId(token))
    return task_ids
