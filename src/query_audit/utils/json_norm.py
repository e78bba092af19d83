"""Canonical JSON serialization for every artifact the CLI and API emit.

Keys are sorted and output always ends with a newline, so two runs over the
same tree produce byte-identical reports in CI mode.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj
    if isinstance(obj, Enum):
        return _to_builtin(obj.value)
    if isinstance(obj, str):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if hasattr(obj, "to_dict"):
        return _to_builtin(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(_to_builtin(k)): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_builtin(v) for v in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(_to_builtin(v) for v in obj)
    return str(obj)


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize *obj* with sorted keys and a trailing newline."""
    s = json.dumps(
        _to_builtin(obj),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )
    return s + "\n"


def stable_json_dump(obj: Any, fp: IO[str], *, indent: int | None = 2) -> None:
    fp.write(stable_json_dumps(obj, indent=indent))
