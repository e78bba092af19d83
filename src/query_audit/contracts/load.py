"""Load and validate JSON instances against the bundled schemas.

Usage::

    from query_audit.contracts.load import validate_instance, validate_file

    validate_instance(my_dict, "lint_result.schema.json")
    validate_file(Path("out/lint_result.json"), "lint_result.schema.json")
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_DIR = "data/schemas"


def _schema_path(name: str) -> Path:
    """Resolve a bundled schema.

    Priority:
    1. ``src/query_audit/data/schemas/`` relative to this file
    2. pip-installed package data via importlib.resources
    """
    canonical = Path(__file__).resolve().parents[1] / SCHEMA_DIR / name
    if canonical.exists():
        return canonical

    with resources.as_file(resources.files("query_audit") / SCHEMA_DIR / name) as p:
        if not p.exists():
            raise FileNotFoundError(f"schema not found: {name}")
        return p


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema by filename."""
    path = _schema_path(name)
    return json.loads(path.read_text(encoding="utf-8"))


def validate_instance(instance: Any, schema_name: str) -> None:
    """Validate *instance* against the named schema.

    Raises ``jsonschema.ValidationError`` on failure.
    """
    schema = load_schema(schema_name)
    jsonschema.validate(instance=instance, schema=schema)


def validate_file(instance_path: Path, schema_name: str) -> None:
    """Load a JSON file and validate it against the named schema."""
    instance = json.loads(instance_path.read_text(encoding="utf-8"))

    # Surface a readable error before the generic jsonschema traceback.
    if schema_name == "lint_result.schema.json":
        sv = instance.get("schema_version") if isinstance(instance, dict) else None
        if sv != "lint_result_v1":
            raise ValueError(
                f"{instance_path}: expected schema_version='lint_result_v1', got {sv!r}"
            )

    validate_instance(instance, schema_name)
