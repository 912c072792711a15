"""Test identifier validation and id generation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from questcraft.quest.errors import ErrorKind, QuestEditError
from questcraft.quest.identifiers import (
    validate_identifier, CounterIdGenerator, UuidIdGenerator, default_id_generator, unique_id,
)


def _kind_of(candidate, **kwargs):
    with pytest.raises(QuestEditError) as excinfo:
        validate_identifier(candidate, **kwargs)
    return excinfo.value.kind


def test_valid_identifiers_pass():
    """Letters, digits and underscores are accepted."""
    for candidate in ["start", "stage_2", "Q1_TEST", "_hidden", "42"]:
        assert validate_identifier(candidate) is None


@pytest.mark.parametrize("candidate", ["", " ", "   ", "\t\n"])
def test_empty_and_blank_identifiers(candidate):
    assert _kind_of(candidate) == ErrorKind.EMPTY_IDENTIFIER


@pytest.mark.parametrize("candidate", ["two words", "tab\there", " lead", "trail\n"])
def test_whitespace_is_rejected(candidate):
    assert _kind_of(candidate) == ErrorKind.CONTAINS_WHITESPACE


@pytest.mark.parametrize("candidate", ["a-b", "quest.1", "città", "x!", "id/2"])
def test_invalid_characters_are_rejected(candidate):
    assert _kind_of(candidate) == ErrorKind.INVALID_CHARACTER


def test_unchanged_identifier_always_passes():
    """A no-op rename succeeds even if the current id breaks the rules."""
    assert validate_identifier("bad id!", current_id="bad id!") is None
    assert validate_identifier("", current_id="") is None
    assert validate_identifier("b", ["a", "b"], current_id="b", check_unique=True) is None


def test_duplicate_only_checked_when_requested():
    existing = ["start", "middle", "end"]
    assert _kind_of("end", existing_ids=existing, current_id="middle", check_unique=True) == \
        ErrorKind.DUPLICATE_IDENTIFIER
    # Quest renames do not check uniqueness
    assert validate_identifier("end", existing, current_id="middle") is None


def test_error_carries_message():
    with pytest.raises(QuestEditError) as excinfo:
        validate_identifier("a b")
    assert "spaces" in excinfo.value.message
    assert str(excinfo.value) == excinfo.value.message


def test_counter_generator_is_per_prefix():
    gen = CounterIdGenerator()
    assert gen("quest") == "quest_1"
    assert gen("quest") == "quest_2"
    assert gen("stage") == "stage_1"


def test_uuid_generator_shape():
    gen = UuidIdGenerator()
    first, second = gen("quest"), gen("quest")
    assert first.startswith("quest_")
    assert len(first) == len("quest_") + 8
    assert first != second
    validate_identifier(first)


def test_unique_id_skips_taken_ids():
    taken = ["stage_1", "stage_2"]
    assert unique_id("stage", taken, CounterIdGenerator()) == "stage_3"


def test_unique_id_with_default_generator():
    assert unique_id("quest", ["quest_1"]) not in ["quest_1"]


def test_default_generator_follows_config(monkeypatch):
    monkeypatch.setenv("QC_ID_STRATEGY", "uuid")
    assert isinstance(default_id_generator(), UuidIdGenerator)

    monkeypatch.setenv("QC_ID_STRATEGY", "counter")
    assert isinstance(default_id_generator(), CounterIdGenerator)

    monkeypatch.setenv("QC_ID_STRATEGY", "timestamp")
    assert isinstance(default_id_generator(), CounterIdGenerator)
