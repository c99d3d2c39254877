"""Extraction of the SVG icon paths used by the page templates."""

from __future__ import annotations

import re
from pathlib import Path

from letsblockit.data import walk

DEFAULT_PAGES_DIR = "data/pages"
DEFAULT_SPRITE_FILE = "src/assets/node_modules/@tabler/icons/tabler-sprite-nostroke.svg"
DEFAULT_OUTPUT_FILE = "data/tabler-icons.yaml"
OUTPUT_FILE_HEADER = "# Extract of the SVG paths from tabler-icons\n# License: MIT"

ICON_RE = re.compile(r'\{\{\s?>icon\s+name="(.+?)"')
SYMBOL_RE = re.compile(
    r'<symbol id="tabler-(.+?)".+?>'
    r'(<path stroke="none" d="M0 0h24v24H0z" fill="none"/>)?(.+?)</symbol>'
)
EXTRA_ICONS: dict[str, list[str]] = {
    "custom-open-collective": [
        '<path fill="currentColor" stroke=none d="M20.22 6.305c2.365 3.312 2.365 8.078 0 '
        '11.39l-2.59-2.59c1.063-1.89 1.063-4.32 0-6.21l2.59-2.59z"/>',
        '<path fill="currentColor" stroke=none d="m17.695 3.78-2.59 2.59c-2.606-1.505-6.198-.815'
        "-8.066 1.54-1.985 2.312-1.94 6.035.1 8.297 1.89 2.267 5.406 2.898 7.966 1.423l2.59 "
        "2.59c-3.344 2.392-8.168 2.358-11.484-.065-3.119-2.162-4.768-6.197-4.055-9.925.662-3.983 "
        '3.977-7.339 7.951-8.051 2.61-.508 5.408.07 7.588 1.6z"/>',
    ],
}


def find_page_icons(pages_dir: str | Path) -> set[str]:
    """Return the names of the icons referenced by the ``.hbs`` pages."""
    icons: set[str] = set()
    for _, path in walk(pages_dir, ".hbs"):
        try:
            source = path.read_text(encoding="utf-8")
        except OSError:
            continue
        icons.update(ICON_RE.findall(source))
    return icons


def extract_icons(
    pages_dir: str | Path = DEFAULT_PAGES_DIR,
    sprite_file: str | Path = DEFAULT_SPRITE_FILE,
    output_file: str | Path = DEFAULT_OUTPUT_FILE,
    extract_all: bool = False,
) -> list[str]:
    """Write the icon paths to ``output_file`` as YAML and return the names written.

    Unless ``extract_all`` is set, only the icons used by the pages are kept, and a
    ValueError is raised if one of them cannot be found.
    """
    needed: dict[str, bool] = {}
    if not extract_all:
        needed = dict.fromkeys(find_page_icons(pages_dir), False)
        if not needed:
            raise ValueError("found no icon in the page templates")

    sprite = Path(sprite_file).read_text(encoding="utf-8")
    symbols = [(match[1], match[3]) for match in SYMBOL_RE.finditer(sprite)]
    if not symbols:
        raise ValueError("no icon was found in input file")
    entries = symbols + [(name, "".join(lines)) for name, lines in EXTRA_ICONS.items()]

    written: list[str] = []
    with open(output_file, "w", encoding="utf-8", newline="\n") as out:
        out.write(OUTPUT_FILE_HEADER + "\n")
        for name, contents in entries:
            if not extract_all:
                if name not in needed or needed[name]:
                    continue
                needed[name] = True
            out.write(f"{name}: {contents}\n")
            written.append(name)

    missing = sorted(name for name, found in needed.items() if not found)
    if missing:
        raise ValueError(f"failed to extract icon {missing[0]}")
    return written