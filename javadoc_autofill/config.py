from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv  # type: ignore
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()

ENV_PREFIX = "JAVADOC_AUTOFILL_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class AutofillConfig(BaseModel):
    """
    Run options. Field names are snake_case; the camelCase option names
    (addClassJavadoc, excludePatterns, ...) are accepted as aliases.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    source_dir: Optional[Path] = Field(default=None, alias="sourceDir")
    add_class_javadoc: bool = Field(default=True, alias="addClassJavadoc")
    add_method_javadoc: bool = Field(default=True, alias="addMethodJavadoc")
    add_param_javadoc: bool = Field(default=True, alias="addParamJavadoc")
    add_return_javadoc: bool = Field(default=True, alias="addReturnJavadoc")
    add_throws_javadoc: bool = Field(default=True, alias="addThrowsJavadoc")
    exclude_patterns: List[str] = Field(default_factory=list, alias="excludePatterns")
    include_private_methods: bool = Field(default=False, alias="includePrivateMethods")

    @field_validator("exclude_patterns")
    @classmethod
    def _check_patterns(cls, patterns: List[str]) -> List[str]:
        for p in patterns:
            try:
                re.compile(p)
            except re.error as e:
                raise ValueError(f"invalid exclude pattern {p!r}: {e}") from e
        return patterns

    @property
    def handles_methods(self) -> bool:
        return (
            self.add_method_javadoc
            or self.add_param_javadoc
            or self.add_return_javadoc
            or self.add_throws_javadoc
        )

    def is_excluded(self, path: Path | str) -> bool:
        text = Path(path).as_posix()
        return any(re.fullmatch(p, text) for p in self.exclude_patterns)

    def disabled_phases(self) -> List[str]:
        names = {
            "add_class_javadoc": "type comments",
            "add_method_javadoc": "method descriptions",
            "add_param_javadoc": "@param tags",
            "add_return_javadoc": "@return tags",
            "add_throws_javadoc": "@throws tags",
        }
        return [label for attr, label in names.items() if not getattr(self, attr)]


_ALIASES = {f.alias: name for name, f in AutofillConfig.model_fields.items() if f.alias}


def _env_flag(name: str) -> Optional[bool]:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def config_from_env() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    source_dir = (os.getenv(ENV_PREFIX + "SOURCE_DIR") or "").strip()
    if source_dir:
        data["source_dir"] = source_dir

    for name in (
        "add_class_javadoc",
        "add_method_javadoc",
        "add_param_javadoc",
        "add_return_javadoc",
        "add_throws_javadoc",
        "include_private_methods",
    ):
        flag = _env_flag(name.upper())
        if flag is not None:
            data[name] = flag

    patterns = _env_patterns()
    if patterns:
        data["exclude_patterns"] = patterns
    return data


def _env_patterns() -> List[str]:
    """
    A JSON list of strings (`["a", "b"]`) or one pattern per line. Regexes
    freely contain `:` and `,`, so neither works as a separator. A value
    that starts with `[` but is not JSON (e.g. `[A-Z].*`) is a pattern.
    """
    raw = (os.getenv(ENV_PREFIX + "EXCLUDE_PATTERNS") or "").strip()
    if not raw:
        return []
    if raw.startswith("["):
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            if not all(isinstance(p, str) for p in value):
                raise ValueError(f"{ENV_PREFIX}EXCLUDE_PATTERNS must be a list of strings")
            return [p for p in value if p]
    return [line.strip() for line in raw.splitlines() if line.strip()]


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {_ALIASES.get(k, k): v for k, v in raw.items()}


def load_config(path: Optional[Path | str] = None, **overrides: Any) -> AutofillConfig:
    """
    defaults < JAVADOC_AUTOFILL_* environment < JSON config file < overrides
    (None-valued overrides are ignored).
    """
    data = config_from_env()
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"config file {path} must contain a JSON object")
        data.update(_normalize_keys(raw))
    data.update({k: v for k, v in _normalize_keys(overrides).items() if v is not None})
    return AutofillConfig.model_validate(data)
