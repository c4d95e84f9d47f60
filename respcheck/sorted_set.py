"""A sorted set model ordered by score, then by member name."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

_WORDS = (
    "apple", "banana", "blueberry", "cherry", "grape", "mango", "orange",
    "pear", "pineapple", "raspberry", "strawberry", "watermelon", "lemon",
    "lime", "kiwi", "peach", "plum", "apricot", "coconut", "fig", "papaya",
    "melon", "guava", "olive", "date", "quince", "lychee", "berry",
)


@dataclass(frozen=True)
class SortedSetMember:
    """A named member with a score."""

    name: str
    score: float


def _sort_key(member: SortedSetMember) -> tuple[float, str]:
    return (member.score, member.name)


class SortedSet:
    """Members kept in ascending score order; equal scores sort by name."""

    def __init__(self, members: Optional[Iterable[SortedSetMember]] = None) -> None:
        self._members: list[SortedSetMember] = sorted(members or (), key=_sort_key)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[SortedSetMember]:
        return iter(list(self._members))

    def add_member(self, member: SortedSetMember) -> SortedSet:
        self._members.append(member)
        self._members.sort(key=_sort_key)
        return self

    def remove_member(self, name: str) -> SortedSet:
        """Remove the first member with this name, if any."""
        for index, member in enumerate(self._members):
            if member.name == name:
                del self._members[index]
                break
        return self

    def members(self) -> list[SortedSetMember]:
        return list(self._members)

    def member_names(self) -> list[str]:
        return [member.name for member in self._members]


def _random_words(count: int) -> list[str]:
    if count <= len(_WORDS):
        return random.sample(_WORDS, count)
    return [f"{random.choice(_WORDS)}_{i}" for i in range(count)]


def random_sorted_set_score() -> float:
    """A random score between 1 and 100."""
    return random.uniform(1, 100)


def generate_sorted_set_with_random_members(count: int, same_score_count: int = 0) -> SortedSet:
    """A set of count members with distinct names.

    same_score_count of them (capped at count) share a single score, to
    exercise ordering by name.
    """
    same_score_count = min(same_score_count, count)
    different_scores_count = count - same_score_count
    names = _random_words(count)

    result = SortedSet()
    for name in names[:different_scores_count]:
        result.add_member(SortedSetMember(name, random_sorted_set_score()))

    base_score = random_sorted_set_score()
    for name in names[different_scores_count:]:
        result.add_member(SortedSetMember(name, base_score))
    return result