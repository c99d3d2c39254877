"""Filter template definitions, their parameters and validation rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO
from urllib.parse import urlparse

PRESET_NAME_SEPARATOR = "---preset---"


class ParamType(str, Enum):
    BOOLEAN = "checkbox"
    STRING = "string"
    STRING_LIST = "list"
    MULTILINE = "multiline"


_TYPE_VALUES = {t.value for t in ParamType}


def _kind(value: Any) -> str:
    if isinstance(value, ParamType):
        return value.value
    return "" if value is None else str(value)


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


class ValidationError(ValueError):
    """Raised when a template fails validation; ``errors`` maps field paths to rules."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        detail = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"validation failed: {detail}")


@dataclass
class Preset:
    name: str = ""
    description: str = ""
    source: str = ""
    license: str = ""
    values: list[str] = field(default_factory=list)
    default: bool = False


@dataclass
class Parameter:
    name: str = ""
    description: str = ""
    type: ParamType | str = ""
    link: str = ""
    only_if: str = ""
    default: Any = None
    rules: str = ""
    presets: list[Preset] = field(default_factory=list)

    def build_preset_param_name(self, preset: str) -> str:
        return self.name + PRESET_NAME_SEPARATOR + preset


@dataclass
class TestCase:
    __test__ = False

    params: dict[str, Any] = field(default_factory=dict)
    output: str = ""


@dataclass
class PresetEntry:
    enable_key: str
    name: str
    target_key: str
    header: str
    value: Any


@dataclass
class Template:
    name: str = ""
    title: str = ""
    params: list[Parameter] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    template: str = ""
    tests: list[TestCase] = field(default_factory=list)
    description: str = ""
    contributors: list[str] = field(default_factory=list)
    sponsors: list[str] = field(default_factory=list)
    presets: list[PresetEntry] = field(default_factory=list)
    raw_rules: bool = False

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def render_raw_rules(self, out: TextIO, params: dict[str, Any] | None) -> None:
        """Write the rules of every boolean parameter that is enabled in ``params``."""
        params = params or {}
        for param in self.params:
            kind = _kind(param.type)
            if kind != ParamType.BOOLEAN.value:
                raise ValueError(f"unsupported param type {kind} for {param.name}")
            if not param.rules:
                raise ValueError(f"no rules for param {param.name}")
            if params.get(param.name) is True:
                out.write(param.rules)

    def validate(self) -> None:
        """Check the template definition, raising ValidationError on failure."""
        errors: dict[str, str] = {}
        if not self.name:
            errors["Template.Name"] = "required"
        if not self.title:
            errors["Template.Title"] = "required"
        for index, param in enumerate(self.params):
            self._validate_param(f"Template.Params[{index}]", param, errors)
        for index, tag in enumerate(self.tags):
            if not (tag and all(ch.isalpha() for ch in tag)):
                errors[f"Template.Tags[{index}]"] = "alphaunicode"
        if self.raw_rules:
            if self.template:
                errors["Template.Template"] = "excluded_with"
        elif not self.template:
            errors["Template.Template"] = "required_without"
        if not self.description:
            errors["Template.Description"] = "required"
        if errors:
            raise ValidationError(errors)

    def _validate_param(self, ns: str, param: Parameter, errors: dict[str, str]) -> None:
        kind = _kind(param.type)
        if not param.name:
            errors[f"{ns}.Name"] = "required"
        if not param.description:
            errors[f"{ns}.Description"] = "required"
        if param.link and not _is_url(param.link):
            errors[f"{ns}.Link"] = "url"
        if not kind:
            errors[f"{ns}.Type"] = "required"
        elif kind not in _TYPE_VALUES:
            errors[f"{ns}.Type"] = "oneof"
        if param.only_if and not self._valid_only_if(param):
            errors[f"{ns}.OnlyIf"] = "valid_only_if"
        if not _valid_default(kind, param.default):
            errors[f"{ns}.Default"] = "valid_default"
        if param.rules and kind != ParamType.BOOLEAN.value:
            errors[f"{ns}.Rules"] = "raw_rules_allowed"
        if param.presets:
            if kind != ParamType.STRING_LIST.value:
                errors[f"{ns}.Presets"] = "preset_allowed"
            else:
                for index, preset in enumerate(param.presets):
                    _validate_preset(f"{ns}.Presets[{index}]", preset, errors)

    def _valid_only_if(self, param: Parameter) -> bool:
        target = param.only_if
        if param.name == target:
            return False
        return any(
            p.name == target and _kind(p.type) == ParamType.BOOLEAN.value
            for p in self.params
        )


def _valid_default(kind: str, default: Any) -> bool:
    if isinstance(default, bool):
        return kind == ParamType.BOOLEAN.value
    if isinstance(default, str):
        return kind in (ParamType.STRING.value, ParamType.MULTILINE.value)
    if isinstance(default, (list, tuple)):
        return kind == ParamType.STRING_LIST.value
    return False


def _validate_preset(ns: str, preset: Preset, errors: dict[str, str]) -> None:
    if not preset.name:
        errors[f"{ns}.Name"] = "required"
    if not preset.description:
        errors[f"{ns}.Description"] = "required"
    if preset.source and not _is_url(preset.source):
        errors[f"{ns}.Source"] = "url"
    if preset.source and not preset.license:
        errors[f"{ns}.License"] = "required_with"
    if not preset.source and not preset.values:
        errors[f"{ns}.Values"] = "required_without"