"""Command-line export of a quest collection.

Usage (example):
    python run.py quests.json                       # all quests, text form
    python run.py quests.json --quest find_torch    # one quest, text form
    python run.py quests.json --format json
    python run.py quests.json --quest find_torch --dialogue dialogue.json --related
"""
from __future__ import annotations
import argparse
import json
import logging
import sys

import jsonschema

from config import get_log_level
from questcraft.quest import QuestWorkspace, QuestEditError, load_quest_collection


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export quests as text or JSON.")
    parser.add_argument("quests", help="JSON file mapping quest ids to quests")
    parser.add_argument("--quest", help="Export only this quest id")
    parser.add_argument("--format", choices=("text", "json"), default="text")
    parser.add_argument("--dialogue", help="Dialogue corpus JSON (node id -> node)")
    parser.add_argument("--related", action="store_true",
                        help="List dialogue options referencing --quest instead of exporting")
    parser.add_argument("--npcs", action="store_true", help="List NPC speakers of the dialogue corpus")
    return parser


def _load_dialogue(path: str | None) -> dict:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(message)s")

    try:
        quests = load_quest_collection(args.quests)
        dialogue = _load_dialogue(args.dialogue)
    except (FileNotFoundError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except jsonschema.ValidationError as e:
        print(f"[ERROR] Invalid quest data: {e.message}", file=sys.stderr)
        return 1

    workspace = QuestWorkspace(quests=quests, dialogue=dialogue)

    if args.npcs:
        for npc in workspace.npc_options():
            print(npc)
        return 0

    try:
        if args.related:
            if not args.quest:
                print("[ERROR] --related needs --quest", file=sys.stderr)
                return 2
            workspace.get_quest(args.quest)
            for entry in workspace.related_dialogue(args.quest):
                print(f"{entry.node_id} [{entry.speaker}] {entry.node_text} -> {entry.option_text}")
            return 0

        if args.format == "json":
            print(workspace.export_json(args.quest))
        else:
            sys.stdout.write(workspace.export_text(args.quest))
    except QuestEditError as e:
        print(f"[ERROR] {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
