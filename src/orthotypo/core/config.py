"""Configuration of the checker.

Settings are read from the first of ``orthotypo.toml``, ``.orthotypo.toml``
or ``pyproject.toml`` (under ``[tool.orthotypo]``) found in the working
directory or one of its parents::

    [files]
    ignore-hidden = true
    extend-exclude = ["vendor/*"]

    [default]
    extend-ignore-re = ["some regex"]

    [type.cpp]
    check-file = false

Models are immutable; :meth:`Config.merge` returns a new value.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from orthotypo.core.errors import ConfigError
from orthotypo.core.languages import Language

logger = logging.getLogger(__name__)

SUPPORTED_FILE_NAMES = ("orthotypo.toml", ".orthotypo.toml", "pyproject.toml")

DEFAULT_PUNCTUATION_MARKS = ".,;:!?‽⸘"


def _kebab(name: str) -> str:
    return name.replace("_", "-")


_MODEL_CONFIG = ConfigDict(alias_generator=_kebab, populate_by_name=True, extra="forbid", frozen=True)


class WalkConfig(BaseModel):
    model_config = _MODEL_CONFIG

    ignore_hidden: bool | None = None
    ignore_files: bool | None = None
    extend_exclude: list[str] = Field(default_factory=list)

    def skip_hidden(self) -> bool:
        return True if self.ignore_hidden is None else self.ignore_hidden

    def respect_ignore_files(self) -> bool:
        return True if self.ignore_files is None else self.ignore_files

    def merge(self, other: "WalkConfig") -> "WalkConfig":
        return WalkConfig(
            ignore_hidden=other.ignore_hidden if other.ignore_hidden is not None else self.ignore_hidden,
            ignore_files=other.ignore_files if other.ignore_files is not None else self.ignore_files,
            extend_exclude=[*self.extend_exclude, *other.extend_exclude],
        )


class EngineConfig(BaseModel):
    model_config = _MODEL_CONFIG

    check_file: bool | None = None
    extend_ignore_re: list[str] = Field(default_factory=list)
    punctuation_marks: str | None = None
    use_default_ignore_re: bool | None = None

    @field_validator("extend_ignore_re")
    @classmethod
    def _compile_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return patterns

    @field_validator("punctuation_marks")
    @classmethod
    def _check_marks(cls, marks: str | None) -> str | None:
        if marks is None:
            return marks
        if not marks:
            raise ValueError("at least one punctuation mark is required")
        if any(char.isspace() for char in marks):
            raise ValueError(f"punctuation marks cannot contain whitespace: {marks!r}")
        return marks

    def enabled(self) -> bool:
        return True if self.check_file is None else self.check_file

    def marks(self) -> str:
        return DEFAULT_PUNCTUATION_MARKS if self.punctuation_marks is None else self.punctuation_marks

    def default_ignore_re(self) -> bool:
        return True if self.use_default_ignore_re is None else self.use_default_ignore_re

    def merge(self, other: "EngineConfig") -> "EngineConfig":
        def pick(name: str) -> Any:
            value = getattr(other, name)
            return getattr(self, name) if value is None else value

        return EngineConfig(
            check_file=pick("check_file"),
            extend_ignore_re=[*self.extend_ignore_re, *other.extend_ignore_re],
            punctuation_marks=pick("punctuation_marks"),
            use_default_ignore_re=pick("use_default_ignore_re"),
        )


class Config(BaseModel):
    model_config = _MODEL_CONFIG

    files: WalkConfig = Field(default_factory=WalkConfig)
    default: EngineConfig = Field(default_factory=EngineConfig)
    types: dict[str, EngineConfig] = Field(default_factory=dict, alias="type")

    @field_validator("types")
    @classmethod
    def _known_languages(cls, types: dict[str, EngineConfig]) -> dict[str, EngineConfig]:
        known = {lang.value for lang in Language}
        for name in types:
            if name not in known:
                logger.warning("Ignoring settings of unknown file type %r", name)
        return types

    @classmethod
    def from_defaults(cls) -> "Config":
        """Every setting spelled out with the value used when it is unset."""
        return cls(
            files=WalkConfig(ignore_hidden=True, ignore_files=True),
            default=EngineConfig(
                check_file=True,
                punctuation_marks=DEFAULT_PUNCTUATION_MARKS,
                use_default_ignore_re=True,
            ),
        )

    @classmethod
    def from_toml(cls, text: str) -> "Config":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML: {exc}") from exc
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Config":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def merge(self, other: "Config") -> "Config":
        types = dict(self.types)
        for name, engine in other.types.items():
            types[name] = types[name].merge(engine) if name in types else engine
        return Config(
            files=self.files.merge(other.files),
            default=self.default.merge(other.default),
            types=types,
        )

    def engine_for(self, language: Language | None) -> EngineConfig:
        """Settings of one language, layered on top of the defaults."""
        if language is None or language.value not in self.types:
            return self.default
        return self.default.merge(self.types[language.value])


def load_config(path: Path) -> Config | None:
    """Load a config file; ``None`` for a ``pyproject.toml`` without a tool table."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read config at {path}: {exc}") from exc

    if path.name == "pyproject.toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"could not parse config at {path}: {exc}") from exc
        table = data.get("tool", {}).get("orthotypo")
        return None if table is None else Config.from_mapping(table)

    try:
        return Config.from_toml(text)
    except ConfigError as exc:
        raise ConfigError(f"could not parse config at {path}: {exc}") from exc


def find_config(cwd: Path) -> Config | None:
    """Return the first config found in ``cwd`` or its ancestors."""
    for directory in (cwd, *cwd.parents):
        for name in SUPPORTED_FILE_NAMES:
            candidate = directory / name
            if not candidate.is_file():
                continue
            config = load_config(candidate)
            if config is not None:
                logger.debug("Loaded configuration from %s", candidate)
                return config
    return None
