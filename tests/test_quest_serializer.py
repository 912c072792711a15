"""Test quest export to the structured tree, JSON and the text form."""

import sys
import os
import json
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from questcraft.quest.graph import create_quest
from questcraft.quest.identifiers import CounterIdGenerator
from questcraft.quest.loader import parse_quest
from questcraft.quest.model import Quest, Stage, Objective, NextStageLink, ItemReward, Rewards
from questcraft.quest.serializer import (
    quest_to_tree, quest_to_json, quest_to_text, collection_to_text, collection_to_json,
    format_event_data,
)
from questcraft.quest.variants import (
    AddClue, AddItem, ModifySkill, ModifyRelationship, ChangeLocation, UnlockLocation, CustomEvent,
    HasItem, NPCRelationship,
)


def _rich_quest():
    return Quest(
        id="find_torch",
        title='The "Lost" Torch',
        description="Find the torch in the cellar",
        short_description="Find the torch",
        importance="Main",
        is_main_quest=True,
        related_npcs=["mara"],
        stages=[
            Stage(
                id="start",
                description="Search the cellar",
                notification_text="The torch is gone",
                status="InProgress",
                objectives=[
                    Objective(
                        id="obj_1",
                        description="Open the cellar",
                        required_items=["key"],
                        required_location="cellar",
                        completion_events=[AddClue("clue_1", "Soot marks", "find_torch")],
                    )
                ],
                completion_events=[
                    ModifySkill("perception", 2),
                    ModifyRelationship("mara", 10),
                    ChangeLocation("cellar"),
                    UnlockLocation("vault"),
                    AddItem("torch", "Torch", "Old", {"light": 3}),
                    CustomEvent("TriggerEvent", "alarm"),
                ],
                next_stages=[NextStageLink("finale", HasItem("torch"), "Light it")],
            ),
            Stage(id="finale", description="Return the torch", notification_text="Done"),
        ],
        rewards=Rewards(
            items=[ItemReward("gold_ring", name="gold_ring")],
            skill_rewards={"perception": 1},
            relationship_changes={"mara": 20},
            experience=150,
            unlocked_locations=["vault", "tower"],
        ),
    )


NEW_QUEST_TEXT = """---
id: "quest_1"
title: "New Quest"
description: "Quest description"
short_description: "Short description"
importance: "Side"
is_hidden: false
is_main_quest: false
related_npcs: []
related_locations: []
stages:
  - id: "start"
    description: "Initial quest stage"
    notification_text: "New quest started"
    status: "NotStarted"
    objectives: []
    completion_events: []
    next_stages: []
rewards:
  items: []
  skill_rewards: {}
  relationship_changes: {}
  experience: 0
  unlocked_locations: []
  unlocked_dialogues: []
"""


# ---------------- Structured tree ----------------

def test_tree_shape():
    tree = quest_to_tree(_rich_quest())

    assert list(tree) == [
        "id", "title", "description", "short_description", "importance", "is_hidden",
        "is_main_quest", "related_npcs", "related_locations", "stages", "rewards",
    ]
    start = tree["stages"][0]
    assert start["status"] == "InProgress"
    assert start["next_stages"] == [{
        "stage_id": "finale",
        "condition": {"condition_type": "HasItem", "target_id": "torch", "value": None},
        "choice_description": "Light it",
    }]
    assert start["completion_events"][0] == {"event_type": "ModifySkill", "data": ["perception", 2]}
    assert start["completion_events"][2] == {"event_type": "ChangeLocation", "data": "cellar"}
    assert start["objectives"][0]["completion_events"][0]["data"]["id"] == "clue_1"
    assert tree["rewards"]["items"] == [
        {"id": "gold_ring", "name": "gold_ring", "description": "", "effects": {}},
    ]


def test_tree_value_condition():
    quest = _rich_quest()
    quest.stages[0].next_stages[0].condition = NPCRelationship("mara", 30)
    condition = quest_to_tree(quest)["stages"][0]["next_stages"][0]["condition"]
    assert condition == {"condition_type": "NPCRelationship", "target_id": "mara", "value": 30}


def test_tree_item_name_falls_back_to_id():
    quest = _rich_quest()
    quest.rewards.items = [ItemReward("silver_key")]
    assert quest_to_tree(quest)["rewards"]["items"][0]["name"] == "silver_key"


def test_tree_does_not_share_state():
    quest = _rich_quest()
    tree = quest_to_tree(quest)
    tree["related_npcs"].append("tom")
    tree["stages"][0]["completion_events"][4]["data"]["effects"]["light"] = 0
    assert quest.related_npcs == ["mara"]
    assert quest.stages[0].completion_events[4].effects == {"light": 3}


def test_tree_loads_back():
    quest = _rich_quest()
    assert parse_quest(quest_to_tree(quest)) == quest


def test_json_matches_tree():
    quest = _rich_quest()
    assert json.loads(quest_to_json(quest)) == quest_to_tree(quest)
    assert quest_to_json(quest, indent=4).startswith('{\n    "id"')


def test_json_indent_from_config(monkeypatch):
    monkeypatch.setenv("QC_JSON_INDENT", "0")
    assert quest_to_json(_rich_quest()).startswith('{\n"id"')


def test_collection_json():
    quest = _rich_quest()
    data = json.loads(collection_to_json({"find_torch": quest}))
    assert list(data) == ["find_torch"]
    assert data["find_torch"] == quest_to_tree(quest)


# ---------------- Text form ----------------

def test_new_quest_text_exact():
    quest = create_quest([], CounterIdGenerator())
    assert quest_to_text(quest) == NEW_QUEST_TEXT


def test_text_escapes_quotes():
    text = quest_to_text(_rich_quest())
    assert 'title: "The \\"Lost\\" Torch"' in text.splitlines()


def test_text_event_payloads():
    lines = quest_to_text(_rich_quest()).splitlines()

    assert '      - event_type: "ModifySkill"' in lines
    assert '        data: ["perception", 2]' in lines
    assert '        data: ["mara", 10]' in lines
    assert '        data: "cellar"' in lines
    assert '        data: "vault"' in lines
    assert '        data: "alarm"' in lines
    assert ('        data: "{\\"id\\":\\"torch\\",\\"name\\":\\"Torch\\",'
            '\\"description\\":\\"Old\\",\\"effects\\":{\\"light\\":3}}"') in lines
    # objective events are nested one level deeper
    assert '          - event_type: "AddClue"' in lines
    assert ('            data: "{\\"id\\":\\"clue_1\\",\\"description\\":\\"Soot marks\\",'
            '\\"related_quest\\":\\"find_torch\\",\\"discovered\\":false}"') in lines


def test_text_objective_fields():
    lines = quest_to_text(_rich_quest()).splitlines()
    start = lines.index('      - id: "obj_1"')
    assert lines[start + 1:start + 9] == [
        '        description: "Open the cellar"',
        '        required_clues: []',
        '        required_items:',
        '          - "key"',
        '        required_location: "cellar"',
        '        required_npc_interaction: null',
        '        is_completed: false',
        '        is_optional: false',
    ]


def test_text_links():
    lines = quest_to_text(_rich_quest()).splitlines()
    start = lines.index('    next_stages:')
    assert lines[start + 1:start + 7] == [
        '      - stage_id: "finale"',
        '        condition:',
        '          condition_type: "HasItem"',
        '          target_id: "torch"',
        '          value: null',
        '        choice_description: "Light it"',
    ]


def test_text_link_without_condition():
    quest = _rich_quest()
    quest.stages[0].next_stages = [NextStageLink("finale")]
    lines = quest_to_text(quest).splitlines()
    assert '        condition: null' in lines
    assert '        choice_description: null' in lines


def test_text_rewards():
    text = quest_to_text(_rich_quest())
    assert text.endswith("\n".join([
        "rewards:",
        "  items:",
        '    - id: "gold_ring"',
        '      name: "gold_ring"',
        '      description: ""',
        "      effects: {}",
        "  skill_rewards:",
        "    perception: 1",
        "  relationship_changes:",
        "    mara: 20",
        "  experience: 150",
        '  unlocked_locations: ["vault", "tower"]',
        "  unlocked_dialogues: []",
    ]) + "\n")


def test_text_list_lengths_match_model():
    quest = _rich_quest()
    quest.stages[1].objectives = [Objective(id="o_a"), Objective(id="o_b")]
    lines = quest_to_text(quest).splitlines()

    assert sum(1 for line in lines if line.startswith('  - id: ')) == len(quest.stages)
    assert sum(1 for line in lines if line.startswith('      - id: ')) == \
        sum(len(s.objectives) for s in quest.stages)
    assert sum(1 for line in lines if line.startswith('      - event_type: ')) == \
        sum(len(s.completion_events) for s in quest.stages)
    assert sum(1 for line in lines if line.startswith('          - event_type: ')) == 1


def test_text_scalars_match_tree():
    """Every top-level scalar line decodes to the tree's value."""
    quest = _rich_quest()
    tree = quest_to_tree(quest)
    lines = quest_to_text(quest).splitlines()
    for key in ("id", "title", "description", "short_description", "importance",
                "is_hidden", "is_main_quest"):
        line = next(line for line in lines if line.startswith(f"{key}: "))
        assert json.loads(line[len(key) + 2:]) == tree[key]


def test_text_keeps_newlines_verbatim():
    quest = create_quest([], CounterIdGenerator())
    quest.description = "line one\nline two"
    assert 'description: "line one\nline two"' in quest_to_text(quest)


@pytest.mark.parametrize("data,expected", [
    (None, "null"),
    (True, "true"),
    (7, "7"),
    ("a", '"a"'),
    ([], "[]"),
    (["a", 1, False], '["a", 1, false]'),
    ({}, "{}"),
    ({"k": "v"}, '"{\\"k\\":\\"v\\"}"'),
])
def test_format_event_data(data, expected):
    assert format_event_data(data) == expected


def test_collection_text():
    gen = CounterIdGenerator()
    first = create_quest([], gen)
    second = create_quest([first.id], gen)
    text = collection_to_text({first.id: first, "renamed": second})
    lines = text.splitlines()

    assert lines[0] == "quests:"
    assert "  quest_1:" in lines
    assert "  renamed:" in lines
    assert '    id: "quest_2"' in lines
    assert '      - id: "start"' in lines
    assert "    rewards:" in lines
    assert not text.startswith("---")


def test_empty_collection_text():
    assert collection_to_text({}) == "quests: {}\n"
