"""Refreshing of preset values from their upstream lists."""

from __future__ import annotations

import logging
import re
import urllib.request
from collections.abc import Callable, Iterable
from pathlib import Path

from letsblockit.filters.template import Template

DEFAULT_PRESETS_DIR = "data/filters/presets"
GITHUB_RAW_PREFIX = "https://raw.githubusercontent.com"
GITHUB_PATH_PATTERN = re.compile(r"https://github\.com/([-\w]+)/([-\w]+)/blob/(.*)", re.ASCII)
UODF_REPOSITORY = "uBlock-Origin-dev-filter"
BMR_REPOSITORY = "BlockModReposting"
BMR_LIST_PATH = "main/list.txt"

_NETWORK_RULE = re.compile(r"\|\|(.*)\^\$all")
_log = logging.getLogger(__name__)


def build_github_raw_url(url: str) -> str:
    """Turn a GitHub file page URL into the URL of its raw contents."""
    match = GITHUB_PATH_PATTERN.search(url)
    if match is None:
        return url
    return "/".join([GITHUB_RAW_PREFIX, *match.groups()])


def parse_uodf(lines: Iterable[str]) -> list[str]:
    """Extract sorted site patterns from a uBlock-Origin-dev-filter list."""
    values = []
    for line in lines:
        if not line or line.startswith("!"):
            continue
        line = line.removeprefix("*://*").removeprefix("*://").removesuffix("*")
        values.append(line)
    return sorted(values)


def parse_network_rules(lines: Iterable[str]) -> list[str]:
    """Extract sorted domains from ``||domain^$all`` network rules."""
    values = []
    for line in lines:
        match = _NETWORK_RULE.fullmatch(line)
        if match:
            values.append(match[1] + "/")
    return sorted(values)


def fetch_lines(url: str) -> list[str]:
    """Download a text file, from GitHub's raw host where applicable, as lines."""
    target = build_github_raw_url(url)
    _log.info("downloading %s", target)
    with urllib.request.urlopen(target) as response:
        text = response.read().decode("utf-8")
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def save_values(
    presets_dir: str | Path, template: str, preset: str, values: Iterable[str]
) -> Path:
    """Write preset values, one per line, to the preset file of ``template``."""
    path = Path(presets_dir) / template / f"{preset}.txt"
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.writelines(f"{value}\n" for value in values)
    _log.info("writing %s", path)
    return path


def _source_parser(source: str) -> Callable[[Iterable[str]], list[str]] | None:
    match = GITHUB_PATH_PATTERN.match(source)
    if match is None:
        return None
    _, repository, path = match.groups()
    if repository == UODF_REPOSITORY:
        return parse_uodf
    if repository == BMR_REPOSITORY and path == BMR_LIST_PATH:
        return parse_network_rules
    return None


def update_search_results(template: Template, presets_dir: str | Path = DEFAULT_PRESETS_DIR) -> None:
    """Refresh every preset of the template from its source list."""
    for param in template.params:
        for preset in param.presets:
            parser = _source_parser(preset.source)
            if parser is None:
                raise RuntimeError(f"error fetching {preset.name}: unknown source format")
            try:
                values = parser(fetch_lines(preset.source))
            except (OSError, UnicodeDecodeError) as err:
                raise RuntimeError(f"error fetching {preset.name}: {err}") from err
            save_values(presets_dir, template.name, preset.name, values)


TARGETS: dict[str, Callable[[Template, str | Path], None]] = {
    "search-results": update_search_results,
}