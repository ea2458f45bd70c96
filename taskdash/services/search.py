from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from taskdash.domain.entities import DEFAULT_OVERLAY, DisplayTask, Overlay, TaskEntity

WORD_BOUNDARY_BONUS = 10
CONSECUTIVE_BONUS = 5


def fuzzy_score(text: str, query: Sequence[str]) -> int | None:
    """Score ``text`` against the lowercased query characters.

    Returns ``None`` unless every query character occurs in ``text`` in
    order. Each matched character is worth one point, plus a bonus when it
    starts a word and another when it directly follows the previous match.
    """
    if not query:
        return 0

    chars = text.lower()
    query_index = 0
    last_match: int | None = None
    score = 0

    for index, char in enumerate(chars):
        if query_index >= len(query):
            break
        if char != query[query_index]:
            continue
        if last_match is not None and index == last_match + 1:
            score += CONSECUTIVE_BONUS
        if index == 0 or not chars[index - 1].isalnum():
            score += WORD_BOUNDARY_BONUS
        score += 1
        last_match = index
        query_index += 1

    if query_index == len(query):
        return score
    return None


def _searchable_fields(task: TaskEntity) -> Iterator[str]:
    yield task.name
    yield task.list_name
    yield task.status
    if task.description is not None:
        yield task.description
    yield from task.tags


def score_task(task: TaskEntity, query: Sequence[str]) -> int | None:
    # the first matching field decides, later fields are never consulted
    for value in _searchable_fields(task):
        score = fuzzy_score(value, query)
        if score is not None:
            return score
    return None


def rank_tasks(
    all_tasks: Iterable[TaskEntity],
    overlays: Mapping[str, Overlay],
    query: str,
) -> list[tuple[DisplayTask, int]]:
    if not query:
        return []
    query_chars = list(query.lower())

    hits = []
    for task in all_tasks:
        score = score_task(task, query_chars)
        if score is not None:
            hits.append((DisplayTask(task, overlays.get(task.id, DEFAULT_OVERLAY)), score))

    # sorted() is stable, so equal scores keep their input order
    return sorted(hits, key=lambda hit: -hit[1])


def search(
    all_tasks: Iterable[TaskEntity],
    overlays: Mapping[str, Overlay],
    query: str,
) -> list[DisplayTask]:
    return [display for display, _ in rank_tasks(all_tasks, overlays, query)]
