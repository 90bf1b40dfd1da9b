"""engine.logging

Small helpers for storing run logs.

A run log is JSON-serializable so it can be exported/imported later.
Entries are plain dicts: {"t": session_clock, "kind": ..., ...}.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List


def log_entry(t: float, kind: str, **fields: Any) -> Dict[str, Any]:
    return {"t": float(t), "kind": str(kind), **fields}


def make_run_export(
    *,
    seed: int,
    config: Dict[str, Any],
    initial_state: Dict[str, Any],
    final_state: Dict[str, Any],
    entries: List[Dict[str, Any]],
) -> Dict[str, Any]:
    return {
        "version": 1,
        "seed": int(seed),
        "config": dict(config),
        "initial_state": dict(initial_state),
        "final_state": dict(final_state),
        "entries": list(entries),
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
