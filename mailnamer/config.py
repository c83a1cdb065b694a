"""Typed configuration model and merge/validation helpers for mailnamer."""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from mailnamer.errors import ConfigError
from mailnamer.sanitize import ILLEGAL_CHARACTERS
from mailnamer.templating import required_properties

DEFAULT_FILENAME_TEMPLATE = "%ReceivedTime|yyyy-MM-dd HHmm% %SenderName|40% %Subject|80%"
_ALLOWED_SECTIONS = ("output", "sanitize")


@dataclass(slots=True)
class OutputConfig:
    """Archive destination and filename configuration."""

    directory: str = "./archive"
    filename_template: str = DEFAULT_FILENAME_TEMPLATE
    extension: str = "eml"
    create_directories: bool = True


@dataclass(slots=True)
class SanitizeConfig:
    """Filename sanitization configuration."""

    replacement: str = "_"
    max_length: int = 200


@dataclass(slots=True)
class AppConfig:
    """Top-level typed config."""

    output: OutputConfig
    sanitize: SanitizeConfig


def default_config() -> AppConfig:
    """Build the default typed configuration."""
    return AppConfig(output=OutputConfig(), sanitize=SanitizeConfig())


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Read a YAML configuration mapping from disk."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(
            what=f"config file not found: {config_path}",
            why="--config must point to a readable YAML file",
            remediation="create the config file and provide its path to --config",
        )

    try:
        content = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(
            what=f"config file is not valid YAML: {config_path}",
            why=str(exc),
            remediation="fix the YAML syntax reported above",
        ) from exc
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ConfigError(
            what="config content must be a mapping.",
            why="mailnamer requires named options under top-level sections",
            remediation="use YAML object format, for example: output: {directory: ./archive}",
        )
    return content


def merge_typed_config(*, defaults: AppConfig, yaml_config: Mapping[str, Any], cli_args: Mapping[str, Any]) -> AppConfig:
    """Merge layered typed configuration with precedence defaults < YAML < CLI."""
    _validate_top_level_sections(config=yaml_config)
    _validate_top_level_sections(config=cli_args)

    merged_dict = _deep_merge(asdict(defaults), yaml_config)
    merged_dict = _deep_merge(merged_dict, _drop_none_values(cli_args))

    merged = _dict_to_typed_config(merged_dict)
    validate_config_values(merged)
    return merged


def validate_config_values(config: AppConfig) -> None:
    """Validate template, extension and sanitizer settings."""
    template = config.output.filename_template
    if not isinstance(template, str) or not template.strip():
        raise ConfigError(
            what="output.filename_template must be a non-empty string.",
            why="every archived message needs a rendered filename",
            remediation="set output.filename_template, for example '%SentOn|yyyy-MM-dd% %Subject|60%'",
        )
    if not required_properties(template):
        raise ConfigError(
            what="output.filename_template has no %Property% tokens.",
            why="a constant template would give every message the same name",
            remediation="add at least one token such as %Subject% or %SentOn|yyyy-MM-dd%",
        )

    extension = config.output.extension
    if not isinstance(extension, str) or ILLEGAL_CHARACTERS.search(extension):
        raise ConfigError(
            what=f"output.extension {extension!r} is not a valid file extension.",
            why="extensions cannot contain path separators or reserved characters",
            remediation="use a plain extension such as eml",
        )

    if not isinstance(config.sanitize.max_length, int) or config.sanitize.max_length < 1:
        raise ConfigError(
            what="sanitize.max_length must be a positive integer.",
            why="filenames are truncated to this many characters",
            remediation="set sanitize.max_length to a value such as 200",
        )
    if not isinstance(config.sanitize.replacement, str) or ILLEGAL_CHARACTERS.search(config.sanitize.replacement):
        raise ConfigError(
            what=f"sanitize.replacement {config.sanitize.replacement!r} contains illegal filename characters.",
            why="the replacement is written into filenames in place of illegal characters",
            remediation="use '_', '-', or an empty string",
        )


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping values where `override` wins."""
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _drop_none_values(values: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively remove explicit None values from override maps."""
    cleaned: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            nested = _drop_none_values(value)
            if nested:
                cleaned[key] = nested
            continue
        cleaned[key] = value
    return cleaned


def _validate_top_level_sections(*, config: Mapping[str, Any]) -> None:
    """Ensure config contains only known top-level sections."""
    unknown_sections = [key for key in config if key not in _ALLOWED_SECTIONS]
    if unknown_sections:
        section = unknown_sections[0]
        raise ConfigError(
            what=f"unknown config section '{section}'.",
            why="configuration must map to supported sections",
            remediation=f"use only: {', '.join(_ALLOWED_SECTIONS)}",
        )


def _dict_to_typed_config(raw: Mapping[str, Any]) -> AppConfig:
    """Map validated dictionary data into the typed config dataclasses."""
    sections = {"output": OutputConfig, "sanitize": SanitizeConfig}
    built: dict[str, Any] = {}
    for name, section_type in sections.items():
        data = raw.get(name, {})
        if not isinstance(data, Mapping):
            raise ConfigError(
                what=f"config section '{name}' must be a mapping.",
                why="section options are read as named keys",
                remediation=f"write {name}: followed by indented key: value pairs",
            )
        try:
            built[name] = section_type(**data)
        except TypeError as exc:
            raise ConfigError(
                what=f"config section '{name}' has unknown keys.",
                why=str(exc),
                remediation=f"remove unsupported keys from the '{name}' section",
            ) from exc
    return AppConfig(**built)
