"""Identifier validation and generation for quests, stages and clues.

Identifiers share one syntax rule: non-empty, no whitespace, only ASCII
letters, digits and underscores. Stage ids must additionally be unique
within their quest; quest ids are re-keyed without a uniqueness check.
"""

import itertools
import re
import uuid
from typing import Callable, Dict, Iterable, Iterator, Optional

from config import get_id_strategy
from .errors import ErrorKind, QuestEditError

# prefix -> new id
IdGenerator = Callable[[str], str]

_VALID_ID = re.compile(r"^[A-Za-z0-9_]+$")


def validate_identifier(
    candidate: str,
    existing_ids: Iterable[str] = (),
    current_id: Optional[str] = None,
    check_unique: bool = False,
) -> None:
    """Validate a proposed identifier.

    Args:
        candidate: The proposed new identifier
        existing_ids: Identifiers already taken in the same context
        current_id: The identifier being renamed (a no-op rename always passes)
        check_unique: Reject candidates already present in existing_ids

    Raises:
        QuestEditError: With the kind of the first rule that fails
    """
    if current_id is not None and candidate == current_id:
        return

    if not candidate or not candidate.strip():
        raise QuestEditError(ErrorKind.EMPTY_IDENTIFIER, "Identifier cannot be empty")

    if any(ch.isspace() for ch in candidate):
        raise QuestEditError(ErrorKind.CONTAINS_WHITESPACE, "Identifier cannot contain spaces")

    if not _VALID_ID.match(candidate):
        raise QuestEditError(
            ErrorKind.INVALID_CHARACTER,
            "Identifier can only contain letters, numbers, and underscores",
        )

    if check_unique and any(existing == candidate and existing != current_id for existing in existing_ids):
        raise QuestEditError(
            ErrorKind.DUPLICATE_IDENTIFIER,
            f"An entry with ID '{candidate}' already exists",
        )


class CounterIdGenerator:
    """Monotonic per-prefix counter: quest_1, quest_2, stage_1, ..."""

    def __init__(self, start: int = 1):
        self._start = start
        self._counters: Dict[str, Iterator[int]] = {}

    def __call__(self, prefix: str) -> str:
        counter = self._counters.setdefault(prefix, itertools.count(self._start))
        return f"{prefix}_{next(counter)}"


class UuidIdGenerator:
    """Random suffix from uuid4, e.g. quest_3f2a9c1b."""

    def __init__(self, length: int = 8):
        self.length = length

    def __call__(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:self.length]}"


def default_id_generator() -> IdGenerator:
    """Build the id generator selected by QC_ID_STRATEGY."""
    if get_id_strategy() == "uuid":
        return UuidIdGenerator()
    return CounterIdGenerator()


def unique_id(prefix: str, existing: Iterable[str], generate: Optional[IdGenerator] = None) -> str:
    """Draw ids from the generator until one is not already taken.

    Args:
        prefix: Id prefix (quest, stage, objective, clue)
        existing: Ids that must not be returned
        generate: Id source; a fresh default generator when omitted

    Returns:
        An id absent from existing
    """
    taken = set(existing)
    generate = generate or default_id_generator()
    candidate = generate(prefix)
    while candidate in taken:
        candidate = generate(prefix)
    return candidate
