"""Maintenance of static assets: content hashes and contributor avatars."""

from __future__ import annotations

import json
import subprocess
from collections.abc import Iterable
from pathlib import Path

from letsblockit.data import Contributor

DEFAULT_ASSETS_DIR = "data/assets"
DEFAULT_HASH_OUTPUT_FILE = "data/asset-hashes.json"
DEFAULT_AVATAR_FOLDER = "data/assets/images/contributors"

LS_FILES_COMMAND = ["git", "ls-files", ".", "--abbrev", "--format", "%(objectname) %(path)"]
MAGICK_OPTIONS = [
    "-quality", "80",
    "-define", "webp:image-hint=picture",
    "-define", "webp:method=6",
    "-define", "webp:alpha-filtering=2",
    "-resize", "96x96",
]


def parse_ls_files(output: str) -> dict[str, str]:
    """Map each path listed by ``git ls-files`` (and its name without ``.gz``) to its hash."""
    hashes: dict[str, str] = {}
    for entry in output.split("\n"):
        parts = entry.split(" ")
        if len(parts) < 2:
            continue
        digest, path = parts[0], parts[1]
        hashes[path] = digest
        hashes[path.removesuffix(".gz")] = digest
    return hashes


def hash_assets(
    assets_dir: str | Path = DEFAULT_ASSETS_DIR,
    output_file: str | Path = DEFAULT_HASH_OUTPUT_FILE,
) -> dict[str, str]:
    """Write the git object hashes of the assets to ``output_file`` as JSON."""
    try:
        result = subprocess.run(
            LS_FILES_COMMAND,
            cwd=str(assets_dir),
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as err:
        raise RuntimeError(f"git ls-files failed: {err.stderr or err}") from err
    except OSError as err:
        raise RuntimeError(f"cannot run git: {err}") from err

    hashes = parse_ls_files(result.stdout)
    with open(output_file, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(json.dumps(hashes, indent=4, sort_keys=True) + "\n")
    return hashes


def _run(*command: str) -> None:
    label = " ".join(command)
    try:
        result = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as err:
        raise RuntimeError(f"command {label} failed: {err}") from err
    if result.returncode != 0:
        raise RuntimeError(f"command {label} failed:\n{result.stdout}")


def download_avatars(
    contributors: Iterable[Contributor],
    output_folder: str | Path = DEFAULT_AVATAR_FOLDER,
) -> list[str]:
    """Convert every contributor's avatar to a small webp image and stage the folder in git."""
    targets: list[str] = []
    for contributor in contributors:
        target = str(Path(output_folder) / f"{contributor.login}.webp")
        _run("magick", contributor.avatar_url, *MAGICK_OPTIONS, target)
        targets.append(target)
    _run("git", "add", str(output_folder))
    return targets