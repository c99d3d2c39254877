"""Access to the bundled data files: walking, hashing, asset URLs and contributors."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF
_DIGITS36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def walk(root: str | Path, suffix: str) -> Iterator[tuple[str, Path]]:
    """Yield ``(short_name, path)`` for files under ``root`` whose name ends with ``suffix``.

    Directories are visited in lexical order; the short name has no folder and no suffix.
    """

    def visit(directory: Path) -> Iterator[tuple[str, Path]]:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                yield from visit(entry)
            elif entry.name.endswith(suffix):
                yield entry.name[: len(entry.name) - len(suffix)], entry

    yield from visit(Path(root))


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS36[rem])
    return "".join(reversed(digits))


def hash_files(*args: str | Path) -> str:
    """Compute a 64-bit FNV-1 hash over every file of the given folders, in base 36."""
    value = _FNV64_OFFSET
    for root in args:
        for _, path in walk(root, ""):
            for byte in path.read_bytes():
                value = (value * _FNV64_PRIME) & _MASK64
                value ^= byte
    return _base36(value)


@dataclass
class AssetHashes:
    """Content hashes of static assets, used to build cache-busting URLs."""

    hashes: dict[str, str] = field(default_factory=dict)

    def build_url(self, path: str) -> str:
        digest = self.hashes.get(path)
        if digest is not None:
            return f"/assets/{path}?h={digest}"
        return f"/assets/{path}"


def parse_asset_hashes(path: str | Path) -> AssetHashes:
    """Load asset hashes from a JSON object file."""
    with open(path, encoding="utf-8") as handle:
        return AssetHashes(dict(json.load(handle)))


@dataclass
class Contributor:
    login: str
    name: str = ""
    avatar_url: str = ""
    profile: str = ""
    contributions: list[str] = field(default_factory=list)


@dataclass
class Contributors:
    """All contributors, with sponsors and a lookup by login."""

    all: list[Contributor] = field(default_factory=list)
    sponsors: list[Contributor] = field(default_factory=list)
    by_login: dict[str, Contributor] = field(default_factory=dict)

    def get(self, login: str) -> Contributor | None:
        return self.by_login.get(login)


def parse_contributors(path: str | Path) -> Contributors:
    """Load the contributors file, a JSON object with a ``contributors`` list."""
    with open(path, encoding="utf-8") as handle:
        raw = json.load(handle)
    result = Contributors()
    for item in raw.get("contributors") or []:
        contributor = Contributor(
            login=item.get("login", ""),
            name=item.get("name", ""),
            avatar_url=item.get("avatar_url", ""),
            profile=item.get("profile", ""),
            contributions=list(item.get("contributions") or []),
        )
        result.all.append(contributor)
        result.by_login[contributor.login] = contributor
        if "financial" in contributor.contributions:
            result.sponsors.append(contributor)
    return result