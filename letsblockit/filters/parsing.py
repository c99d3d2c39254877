"""Parsing of filter template files and their preset values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from letsblockit.filters.template import (
    ParamType,
    Parameter,
    Preset,
    PresetEntry,
    Template,
    TestCase,
)

YAML_SEPARATOR = "\n---"
PRESET_FILE_PATTERN = "{template}/{preset}.txt"
PRESET_HEADER_PATTERN = "!! {template} with {preset} preset"
PRESET_ATTRIBUTION_PATTERN = "\n!! Source: {source}\n!! License: {license}"

_markdown = MarkdownIt("commonmark").enable("table")


def _param_type(value: Any) -> ParamType | str:
    text = "" if value is None else str(value)
    try:
        return ParamType(text)
    except ValueError:
        return text


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _preset(raw: dict) -> Preset:
    return Preset(
        name=_str(raw.get("name")),
        description=_str(raw.get("description")),
        source=_str(raw.get("source")),
        license=_str(raw.get("license")),
        values=[_str(v) for v in raw.get("values") or []],
        default=bool(raw.get("default", False)),
    )


def _parameter(raw: dict) -> Parameter:
    return Parameter(
        name=_str(raw.get("name")),
        description=_str(raw.get("description")),
        type=_param_type(raw.get("type")),
        link=_str(raw.get("link")),
        only_if=_str(raw.get("onlyif")),
        default=raw.get("default"),
        rules=_str(raw.get("rules")),
        presets=[_preset(p or {}) for p in raw.get("presets") or []],
    )


def parse_template(name: str, text: str) -> Template:
    """Parse a template file made of a YAML header, a separator and a markdown description."""
    pos = text.find(YAML_SEPARATOR)
    if pos < 0:
        raise ValueError("separator not found")
    try:
        meta = yaml.safe_load(text[: pos + 1]) or {}
    except yaml.YAMLError as err:
        raise ValueError(f"invalid metadata: {err}") from err
    if not isinstance(meta, dict):
        raise ValueError("invalid metadata: expected a mapping")

    tpl = Template(
        name=name,
        title=_str(meta.get("title")),
        params=[_parameter(p or {}) for p in meta.get("params") or []],
        tags=[_str(t) for t in meta.get("tags") or []],
        template=_str(meta.get("template")),
        tests=[
            TestCase(params=dict(t.get("params") or {}), output=_str(t.get("output")))
            for t in (meta.get("tests") or [])
            if t is not None
        ],
        contributors=sorted(_str(c) for c in meta.get("contributors") or []),
        sponsors=sorted(_str(s) for s in meta.get("sponsors") or []),
    )

    start = pos + len(YAML_SEPARATOR)
    newline = text.find("\n", start)
    body = text[newline:] if newline >= 0 else ""
    tpl.description = _markdown.render(body)

    has_template = bool(tpl.template)
    tpl.raw_rules = bool(tpl.params)
    for param in tpl.params:
        if param.type == ParamType.BOOLEAN and param.rules:
            if has_template:
                raise ValueError(
                    f"{tpl.name} has a template AND raw rules on {param.name}, not allowed"
                )
            if not param.rules.endswith("\n"):
                param.rules += "\n"
        else:
            if not has_template:
                raise ValueError(
                    f"{tpl.name} has no template but param {param.name} has no raw rules"
                )
            tpl.raw_rules = False
            break
    return tpl


def _read_preset_file(path: Path) -> list[str]:
    with open(path, encoding="utf-8", newline="") as handle:
        return [line.rstrip("\n").removesuffix("\r") for line in handle]


def parse_presets(template: Template, presets_dir: str | Path) -> None:
    """Load missing preset values from files and build the template's preset entries."""
    root = Path(presets_dir)
    list_params = [p for p in template.params if p.type == ParamType.STRING_LIST]
    for param in list_params:
        for preset in param.presets:
            if preset.values:
                continue
            filename = PRESET_FILE_PATTERN.format(template=template.name, preset=preset.name)
            try:
                values = _read_preset_file(root / filename)
            except OSError as err:
                raise ValueError(
                    f"preset has no value and no preset file found at {filename}: {err}"
                ) from err
            if not values:
                raise ValueError(f"preset file {filename} is empty")
            preset.values = values

    for param in list_params:
        for preset in param.presets:
            header = PRESET_HEADER_PATTERN.format(template=template.name, preset=preset.name)
            if preset.source:
                header += PRESET_ATTRIBUTION_PATTERN.format(
                    source=preset.source, license=preset.license
                )
            template.presets.append(
                PresetEntry(
                    enable_key=param.build_preset_param_name(preset.name),
                    name=preset.name,
                    target_key=param.name,
                    header=header,
                    value=preset.values,
                )
            )