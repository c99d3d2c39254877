# letsblockit

Building blocks for personal content-blocker filter lists. Filters are
described by small YAML template files with parameters (checkboxes,
strings, lists, multi-line text) and optional presets. This package parses
and validates those templates, renders release notes to HTML, and provides
helpers to maintain the data folders: asset hashes, contributor avatars,
icon extraction and preset refreshes.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Filter templates

A template file holds a YAML header, a line starting with `---`, and a
markdown description:

```python
from letsblockit.filters.parsing import parse_template, parse_presets

with open("data/filters/templates/simple.yaml", encoding="utf-8") as handle:
    template = parse_template("simple", handle.read())
parse_presets(template, "data/filters/presets")
template.validate()
```

- `parse_template(name, text)` returns a `Template`, with the description
  rendered to HTML and contributors and sponsors sorted. It raises
  `ValueError` when the separator is missing, the YAML is invalid, or a
  template mixes a template body with raw rules (or has neither).
- `parse_presets(template, presets_dir)` reads the values of presets that
  have none from `<presets_dir>/<template>/<preset>.txt`, one value per
  line, and fills `template.presets` with `PresetEntry` items, each with its
  enable key, target parameter, values and header comment.
- `Template.validate()` raises `letsblockit.filters.template.ValidationError`,
  whose `errors` maps field paths such as `Template.Params[0].Type` to the
  rule that failed (`required`, `oneof`, `valid_default`, `valid_only_if`,
  `alphaunicode`, ...).
- `Template.render_raw_rules(out, params)` writes to `out` the rules of every
  checkbox parameter set to `True` in `params`.
- `Template.has_tag(tag)` and `Parameter.build_preset_param_name(preset)`
  are small helpers; `ParamType` lists the parameter kinds.

## Release notes

`letsblockit.news.releases.download_releases(url, cache_dir,
official_instance, templates_dir)` fetches a GitHub releases JSON list
(`GITHUB_RELEASES_ENDPOINT` is the project's own), or reads it from
`lbi-releases.json` in `cache_dir` if present, writing it there after a
download. Drafts and pre-releases are skipped. It returns a `Releases`
object with the `Release` entries, the creation time of the newest one
(`latest_at`) and an `etag` computed from the release bodies.
`build_fallback()` returns an empty `Releases`.

Each body is rendered with
`letsblockit.news.markdown.render_release_notes(text, official_instance,
template_exists)`: headings are shifted down two levels, `@user` mentions
link to profiles, list items starting with `name:` link to the template
when `template_exists(name)` is true, GitHub pull, issue, commit and compare
links get short labels, and on the official instance everything from the
first horizontal rule on is dropped.

## Data helpers

`letsblockit.data` offers:

- `walk(root, suffix)` — yields `(short_name, path)` for matching files, in
  lexical order.
- `hash_files(*folders)` — a base-36 FNV-1 64-bit hash of the folders'
  contents, for cache invalidation.
- `parse_asset_hashes(path)` and `AssetHashes.build_url(path)` — asset URLs
  with a `?h=` cache-busting query when the hash is known.
- `parse_contributors(path)` — a `Contributors` object with `all`,
  `sponsors` (contributors with a `financial` contribution) and
  `get(login)`.

## Maintenance helpers

Run these from a checkout of the data folders:

- `letsblockit.utils.icons.extract_icons(pages_dir, sprite_file,
  output_file, extract_all)` writes the SVG paths of the icons referenced by
  the `.hbs` pages (or of every icon) to a YAML file; `find_page_icons`
  lists the referenced names.
- `letsblockit.utils.assets.hash_assets(assets_dir, output_file)` runs
  `git ls-files` and writes the object hashes as JSON (`parse_ls_files`
  parses its output). `download_avatars(contributors, output_folder)`
  converts each avatar to a 96×96 webp with ImageMagick's `magick` and
  stages the folder with `git add`. Both need the programs on the `PATH`
  and raise `RuntimeError` when a command fails.
- `letsblockit.utils.presets.update_search_results(template, presets_dir)`
  refreshes preset files from their upstream lists, using
  `build_github_raw_url`, `fetch_lines`, `parse_uodf`,
  `parse_network_rules` and `save_values`.

## What this package does not do

- It does not render filter lists from template bodies: there is no
  template engine, no repository of loaded templates and no test-mode
  rewriting of rules. Only raw-rule templates can be rendered, through
  `Template.render_raw_rules`.
- It installs no command-line programs; the helpers above are called from
  Python.
- It has no web server, page rendering or database storage.