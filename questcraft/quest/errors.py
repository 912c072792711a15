"""Error kinds raised by quest editing operations."""

from enum import Enum


class ErrorKind(Enum):
    """Recoverable reasons an edit can be rejected."""
    EMPTY_IDENTIFIER = "empty_identifier"
    CONTAINS_WHITESPACE = "contains_whitespace"
    INVALID_CHARACTER = "invalid_character"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    QUEST_NOT_FOUND = "quest_not_found"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    LAST_STAGE_DELETION = "last_stage_deletion"
    NO_ELIGIBLE_TARGET = "no_eligible_target"


class QuestEditError(Exception):
    """Exception raised when an edit violates a quest invariant."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
