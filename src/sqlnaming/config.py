"""
Lint configuration.

Project-level settings for which rules run, how severe they are and the
naming patterns they enforce.  Loaded from a YAML file (``.sqlnaming.yaml``
discovered upward from the linted path, or given explicitly) and
validated with pydantic.

Example ``.sqlnaming.yaml``::

    dialect: postgresql
    ignore: [N008]
    severity:
      T001: error
    allowed_words: [settings]
    constraint_suffixes:
      foreign_key: fk
    exclude:
      - "migrations/legacy/*"
"""

from __future__ import annotations

import fnmatch
import re
from pathlib import Path, PurePath
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sqlnaming.core.dialect import Dialect, get_dialect
from sqlnaming.core.errors import ConfigError, InvalidConfigError, UnknownDialectError
from sqlnaming.core.logging import get_logger
from sqlnaming.rules.base import Severity

logger = get_logger(__name__)

CONFIG_FILENAMES = (".sqlnaming.yaml", ".sqlnaming.yml", "sqlnaming.yaml")

DEFAULT_CONSTRAINT_SUFFIXES: dict[str, str] = {
    "primary_key": "pkey",
    "unique": "key",
    "foreign_key": "fkey",
    "check": "check",
    "exclude": "excl",
    "index": "idx",
    "sequence": "seq",
}

_SELECTOR = re.compile(r"^(ALL|[A-Z]+\d*)$")


def _normalize_selectors(values: list[str]) -> list[str]:
    result = []
    for value in values:
        code = value.strip().upper()
        if not _SELECTOR.match(code):
            raise ValueError(f"invalid rule selector: {value!r}")
        result.append(code)
    return result


def _specificity(code: str, selectors: list[str]) -> int:
    best = -1
    for selector in selectors:
        if selector == "ALL":
            best = max(best, 0)
        elif code.startswith(selector):
            best = max(best, len(selector))
    return best


class LintConfig(BaseModel):
    """Validated lint configuration.

    Attributes:
        dialect: Target SQL dialect name
        select: Rule codes or prefixes to enable (empty = all)
        ignore: Rule codes or prefixes to disable
        severity: Per-code severity overrides
        table_names: Whether table names should be ``singular`` or ``plural``
        primary_key_name: Expected name of a single-column primary key
        foreign_key_pattern: Expected foreign key column name (``{table}`` placeholder)
        constraint_pattern: Expected constraint/index name
            (``{table}``, ``{columns}``, ``{suffix}`` placeholders)
        constraint_suffixes: Suffix per constraint kind
        max_identifier_length: Overrides the dialect limit
        extra_reserved_words: Words treated as reserved in addition to the dialect's
        allowed_words: Words exempt from reserved/type/abbreviation/plural checks
        abbreviations: Extra abbreviation -> full word pairs
        forbidden_prefixes: Type prefixes not allowed on table/view names
        exclude: Glob patterns of files to skip
        strict_parse: Raise on unparseable statements instead of reporting P001
    """

    model_config = ConfigDict(extra="forbid")

    dialect: str = "ansi"
    select: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)
    severity: dict[str, Severity] = Field(default_factory=dict)

    table_names: Literal["singular", "plural"] = "singular"
    primary_key_name: str = "id"
    foreign_key_pattern: str = "{table}_id"
    constraint_pattern: str = "{table}_{columns}_{suffix}"
    constraint_suffixes: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_CONSTRAINT_SUFFIXES)
    )

    max_identifier_length: int | None = Field(default=None, gt=0)
    extra_reserved_words: list[str] = Field(default_factory=list)
    allowed_words: list[str] = Field(default_factory=list)
    abbreviations: dict[str, str] = Field(default_factory=dict)
    forbidden_prefixes: list[str] = Field(
        default_factory=lambda: ["tbl_", "tb_", "t_", "vw_", "v_"]
    )

    exclude: list[str] = Field(default_factory=list)
    strict_parse: bool = False

    # -- Validators --------------------------------------------------------

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        try:
            return get_dialect(value).name
        except UnknownDialectError as exc:
            raise ValueError(exc.message) from exc

    @field_validator("select", "ignore")
    @classmethod
    def _selectors(cls, value: list[str]) -> list[str]:
        return _normalize_selectors(value)

    @field_validator("severity", mode="before")
    @classmethod
    def _severity_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k).strip().upper(): (v.lower() if isinstance(v, str) else v)
                    for k, v in value.items()}
        return value

    @field_validator("constraint_suffixes")
    @classmethod
    def _merge_suffixes(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = set(value) - set(DEFAULT_CONSTRAINT_SUFFIXES)
        if unknown:
            raise ValueError(f"unknown constraint kinds: {', '.join(sorted(unknown))}")
        return {**DEFAULT_CONSTRAINT_SUFFIXES, **value}

    @field_validator("extra_reserved_words", "allowed_words", "forbidden_prefixes")
    @classmethod
    def _lower_words(cls, value: list[str]) -> list[str]:
        return [w.lower() for w in value]

    @field_validator("abbreviations")
    @classmethod
    def _lower_abbreviations(cls, value: dict[str, str]) -> dict[str, str]:
        return {k.lower(): v for k, v in value.items()}

    @field_validator("foreign_key_pattern")
    @classmethod
    def _fk_placeholder(cls, value: str) -> str:
        if "{table}" not in value:
            raise ValueError("foreign_key_pattern must contain {table}")
        return value

    @field_validator("constraint_pattern")
    @classmethod
    def _constraint_placeholders(cls, value: str) -> str:
        try:
            value.format(table="t", columns="c", suffix="s")
        except (KeyError, IndexError) as exc:
            raise ValueError(f"unknown placeholder in constraint_pattern: {exc}") from exc
        return value

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str | None = None) -> LintConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidConfigError(
                f"Invalid configuration: {_describe(exc)}", path=source, cause=exc
            ) from exc

    @classmethod
    def from_yaml(cls, path: str | Path) -> LintConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}").with_context(path=str(path))
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfigError(f"Malformed YAML: {exc}", path=str(path), cause=exc) from exc
        if not isinstance(data, dict):
            raise InvalidConfigError("Configuration must be a mapping", path=str(path))
        logger.debug("config_loaded", path=str(path))
        return cls.from_dict(data, source=str(path))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    # -- Queries -----------------------------------------------------------

    def get_dialect(self) -> Dialect:
        return get_dialect(self.dialect)

    def is_enabled(self, code: str) -> bool:
        """Whether a rule code survives ``select`` / ``ignore``.

        The most specific matching selector wins; on a tie ``ignore`` wins.
        """
        code = code.upper()
        selected = _specificity(code, self.select) if self.select else 0
        ignored = _specificity(code, self.ignore)
        return selected >= 0 and selected > ignored

    def severity_for(self, code: str, default: Severity) -> Severity:
        return self.severity.get(code.upper(), default)

    def should_exclude(self, path: str | Path) -> bool:
        posix = PurePath(path).as_posix()
        pure = PurePath(posix)
        return any(pure.match(pattern) or fnmatch.fnmatch(posix, pattern) for pattern in self.exclude)

    def effective_max_length(self, dialect: Dialect | None = None) -> int | None:
        if self.max_identifier_length is not None:
            return self.max_identifier_length
        return (dialect or self.get_dialect()).max_identifier_length

    def is_allowed(self, word: str) -> bool:
        return word.lower() in self.allowed_words


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def discover_config(start: str | Path | None = None) -> Path | None:
    """Walk upward from ``start`` looking for a configuration file."""
    current = Path(start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config(
    path: str | Path | None = None,
    start: str | Path | None = None,
    **overrides: Any,
) -> LintConfig:
    """Load the configuration and apply non-``None`` overrides on top.

    ``path`` wins over discovery; with neither, defaults are used.
    """
    config_path = Path(path) if path else discover_config(start)
    config = LintConfig.from_yaml(config_path) if config_path else LintConfig()

    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    data = config.model_dump()
    data.update(updates)
    return LintConfig.from_dict(data, source=str(config_path) if config_path else None)


DEFAULT_CONFIG_TEMPLATE = """\
# sqlnaming configuration
# Target dialect: ansi, postgresql, mysql, sqlite, sqlserver, oracle
dialect: {dialect}

# Rule codes or prefixes to enable (empty = all) and to disable
select: []
ignore: []

# Per-rule severity overrides (error, warning, info)
severity: {{}}

# singular (team) or plural (teams)
table_names: singular
primary_key_name: id
foreign_key_pattern: "{{table}}_id"
constraint_pattern: "{{table}}_{{columns}}_{{suffix}}"
constraint_suffixes:
  primary_key: pkey
  unique: key
  foreign_key: fkey
  check: check
  exclude: excl
  index: idx
  sequence: seq

# Words exempt from reserved-word, type-name, abbreviation and plural checks
allowed_words: []
extra_reserved_words: []
abbreviations: {{}}
forbidden_prefixes: [tbl_, tb_, t_, vw_, v_]

# Glob patterns of files to skip
exclude: []
"""


__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_CONSTRAINT_SUFFIXES",
    "DEFAULT_CONFIG_TEMPLATE",
    "LintConfig",
    "discover_config",
    "load_config",
]
