"""Download and parse the project's GitHub releases into news entries."""

from __future__ import annotations

import json
import re
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from letsblockit.news.markdown import render_release_notes

GITHUB_RELEASES_ENDPOINT = (
    "https://api.github.com/repos/letsblockit/letsblockit/releases?per_page=20"
)
CACHE_FILE_NAME = "lbi-releases.json"

_USER_RE = re.compile(r"(\W)@([0-9A-Za-z-]+)(\W)", re.ASCII)
_USER_LINK = r"\1[**@\2**](https://github.com/\2)\3"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF
_DIGITS36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class Release:
    id: int
    link: str
    description: str
    created_at: datetime
    published_at: datetime
    tag_name: str
    github_url: str

    def date(self) -> str:
        return self.created_at.strftime("%Y-%m-%d")


@dataclass
class Releases:
    """Parsed releases, the creation time of the newest one and a content etag."""

    latest_at: datetime = _ZERO_TIME
    releases: list[Release] = field(default_factory=list)
    etag: str = ""


class _Fnv64:
    def __init__(self) -> None:
        self.value = _FNV64_OFFSET

    def update(self, data: bytes) -> None:
        value = self.value
        for byte in data:
            value = ((value * _FNV64_PRIME) & _MASK64) ^ byte
        self.value = value

    def base36(self) -> str:
        value = self.value
        if value == 0:
            return "0"
        digits = []
        while value:
            value, rem = divmod(value, 36)
            digits.append(_DIGITS36[rem])
        return "".join(reversed(digits))


def _parse_time(value: str | None) -> datetime:
    if not value:
        return _ZERO_TIME
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _download(url: str, cache_dir: str | Path | None) -> bytes:
    cache_file = Path(cache_dir) / CACHE_FILE_NAME if cache_dir else None
    if cache_file is not None:
        try:
            return cache_file.read_bytes()
        except OSError:
            pass

    with urllib.request.urlopen(url) as response:
        body = response.read()

    if cache_file is not None:
        try:
            cache_file.write_bytes(body)
        except OSError as err:
            raise OSError(f"cannot write changelog to cache: {err}") from err
    return body


def _enumerate_templates(templates_dir: str | Path) -> Callable[[str], bool]:
    present = {entry.name.removesuffix(".yaml") for entry in Path(templates_dir).iterdir()}
    return present.__contains__


def download_releases(
    url: str,
    cache_dir: str | Path | None,
    official_instance: bool,
    templates_dir: str | Path,
) -> Releases:
    """Fetch releases from ``url`` (or the cache file in ``cache_dir``) and render them."""
    raw = json.loads(_download(url, cache_dir))
    if not isinstance(raw, list):
        raise ValueError("expected a list of releases")

    template_exists = _enumerate_templates(templates_dir)
    hasher = _Fnv64()
    output = Releases()
    for item in raw:
        if item.get("prerelease") or item.get("draft"):
            continue
        raw_body = item.get("body") or ""
        hasher.update(raw_body.encode("utf-8"))
        body = raw_body.replace("\r\n", "\n")
        body = _USER_RE.sub(_USER_LINK, body)
        created_at = _parse_time(item.get("created_at"))
        html_url = item.get("html_url") or ""
        output.releases.append(
            Release(
                id=int(item.get("id") or 0),
                link=html_url,
                description=render_release_notes(body, official_instance, template_exists),
                created_at=created_at,
                published_at=_parse_time(item.get("published_at")),
                tag_name=item.get("tag_name") or "",
                github_url=html_url,
            )
        )
        if created_at > output.latest_at:
            output.latest_at = created_at
    output.etag = hasher.base36()
    return output


def build_fallback() -> Releases:
    """Empty releases used when the download fails."""
    return Releases(latest_at=_EPOCH, releases=[], etag="")