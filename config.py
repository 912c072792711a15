"""Central configuration for questcraft.

Tunable parameters of the authoring core (id generation, undo history,
export formatting, load-time validation, CLI logging). Every value has a
sensible default and can be overridden through environment variables.
"""
from __future__ import annotations
import os


def _get_int_env(name: str, default: int, minval: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw)
        if minval is not None and v < minval:
            return default
        return v
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in {"1", "true", "yes", "on"}


def _get_choice_env(name: str, default: str, choices: set[str]) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val if val in choices else default


# ---------------- Identifiers ----------------
ID_STRATEGIES = {"counter", "uuid"}
DEFAULT_ID_STRATEGY = "counter"
ENV_ID_STRATEGY = "QC_ID_STRATEGY"


def get_id_strategy() -> str:
    """Id source for new quests/stages/objectives/clues. Var: QC_ID_STRATEGY.

    'counter' yields quest_1, quest_2...; 'uuid' yields quest_<8 hex chars>.
    Unknown values fall back to DEFAULT_ID_STRATEGY.
    """
    return _get_choice_env(ENV_ID_STRATEGY, DEFAULT_ID_STRATEGY, ID_STRATEGIES)


# ---------------- Editing history ----------------
DEFAULT_HISTORY_LIMIT = 50


def get_history_limit() -> int:
    """Max number of undo steps kept by a workspace. Var: QC_HISTORY_LIMIT."""
    return _get_int_env("QC_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT, minval=1)


# ---------------- Export ----------------
DEFAULT_JSON_INDENT = 2


def get_json_indent() -> int:
    """Indent used by JSON exports. Var: QC_JSON_INDENT (0 = compact lines)."""
    return _get_int_env("QC_JSON_INDENT", DEFAULT_JSON_INDENT, minval=0)


# ---------------- Loading ----------------

def get_validate_on_load() -> bool:
    """Schema-check quest trees read from disk. Var: QC_VALIDATE_ON_LOAD (default True)."""
    return _get_bool_env("QC_VALIDATE_ON_LOAD", True)


# ---------------- CLI ----------------
LOG_LEVELS = {"debug", "info", "warning", "error"}


def get_log_level() -> str:
    """Logging level for run.py. Var: QC_LOG_LEVEL (default WARNING)."""
    return _get_choice_env("QC_LOG_LEVEL", "warning", LOG_LEVELS).upper()


__all__ = [
    "ID_STRATEGIES", "DEFAULT_ID_STRATEGY", "ENV_ID_STRATEGY", "get_id_strategy",
    "DEFAULT_HISTORY_LIMIT", "get_history_limit",
    "DEFAULT_JSON_INDENT", "get_json_indent",
    "get_validate_on_load",
    "LOG_LEVELS", "get_log_level",
]
