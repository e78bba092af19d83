"""Lint configuration.

Can be loaded from ``.query-audit.yaml`` or constructed programmatically::

    # .query-audit.yaml
    include:
      - "src/**/*.test.tsx"
    exclude:
      - fixtures
    rules:
      await-async-query: error
      prefer-find-by: "off"

``QUERY_AUDIT_CONFIG`` names a config file to use instead of discovery.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from query_audit.model import Severity
from query_audit.rules import ALL_RULE_IDS, PUBLIC_RULE_IDS, RULES

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".query-audit.yaml", ".query-audit.yml")
CONFIG_ENV_VAR = "QUERY_AUDIT_CONFIG"

DEFAULT_INCLUDE: tuple[str, ...] = (
    "**/*.test.js",
    "**/*.test.jsx",
    "**/*.test.ts",
    "**/*.test.tsx",
    "**/*.spec.js",
    "**/*.spec.jsx",
    "**/*.spec.ts",
    "**/*.spec.tsx",
    "**/__tests__/**/*.js",
    "**/__tests__/**/*.jsx",
    "**/__tests__/**/*.ts",
    "**/__tests__/**/*.tsx",
)


def _default_rules() -> dict[str, Severity]:
    return {rule_id: RULES[rule_id].meta.recommended for rule_id in PUBLIC_RULE_IDS}


@dataclass
class LintConfig:
    """Which files to lint and which rules to run at which severity."""

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=list)
    rules: dict[str, Severity] = field(default_factory=_default_rules)
    max_file_bytes: int = 2_000_000  # 2 MB safety limit

    def __post_init__(self) -> None:
        self.rules = {**_default_rules(), **_parse_rules(self.rules)}

    def severity_for(self, rule_id: str) -> Severity:
        return self.rules.get(rule_id, Severity.OFF)

    def enabled_rules(self) -> list[str]:
        return [r for r in ALL_RULE_IDS if self.severity_for(r) != Severity.OFF]

    def to_dict(self) -> dict[str, Any]:
        return {
            "include": list(self.include),
            "exclude": list(self.exclude),
            "rules": {k: v.value for k, v in sorted(self.rules.items())},
            "max_file_bytes": self.max_file_bytes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LintConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: Path) -> "LintConfig":
        """Load configuration from a YAML file."""
        import yaml

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: config must be a mapping, got {type(data).__name__}")
        logger.debug("Loaded config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def discover(cls, root: Path) -> "LintConfig":
        """``$QUERY_AUDIT_CONFIG``, else the first config file in *root*, else defaults."""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return cls.from_yaml(Path(env_path))
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.is_file():
                return cls.from_yaml(candidate)
        return cls()


def _parse_rules(raw: Optional[dict[str, Any]]) -> dict[str, Severity]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"rules must be a mapping, got {type(raw).__name__}")
    parsed: dict[str, Severity] = {}
    for rule_id, value in raw.items():
        if rule_id not in RULES:
            raise ValueError(f"unknown rule: {rule_id!r}")
        # YAML reads a bare ``off`` as False
        if value is False:
            value = Severity.OFF
        try:
            parsed[rule_id] = Severity(value)
        except ValueError:
            allowed = ", ".join(s.value for s in Severity)
            raise ValueError(
                f"invalid severity {value!r} for {rule_id!r} (expected one of: {allowed})"
            ) from None
    return parsed
