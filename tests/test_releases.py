import json
from datetime import datetime, timezone
from io import BytesIO
from unittest import mock

import pytest

from letsblockit.news.releases import (
    CACHE_FILE_NAME,
    build_fallback,
    download_releases,
)


def _release(rid, body, created, draft=False, prerelease=False):
    return {
        "html_url": f"https://github.com/letsblockit/letsblockit/releases/tag/v{rid}",
        "id": rid,
        "draft": draft,
        "prerelease": prerelease,
        "tag_name": f"v{rid}",
        "created_at": created,
        "published_at": created,
        "body": body,
    }


@pytest.fixture
def templates_dir(tmp_path):
    folder = tmp_path / "templates"
    folder.mkdir()
    (folder / "youtube-cleanup.yaml").write_text("title: x\n")
    return folder


def _load(tmp_path, templates_dir, releases, official=False):
    cache = tmp_path / "cache"
    cache.mkdir(exist_ok=True)
    (cache / CACHE_FILE_NAME).write_text(json.dumps(releases))
    return download_releases("http://localhost/unused", cache, official, templates_dir)


def test_drafts_and_prereleases_are_skipped(tmp_path, templates_dir):
    result = _load(
        tmp_path,
        templates_dir,
        [
            _release(1, "one", "2022-01-01T10:00:00Z"),
            _release(2, "two", "2022-02-01T10:00:00Z", draft=True),
            _release(3, "three", "2022-03-01T10:00:00Z", prerelease=True),
        ],
    )
    assert [r.id for r in result.releases] == [1]
    assert result.releases[0].tag_name == "v1"
    assert result.releases[0].link == result.releases[0].github_url


def test_latest_at_is_newest_creation(tmp_path, templates_dir):
    result = _load(
        tmp_path,
        templates_dir,
        [
            _release(1, "a", "2022-03-05T10:00:00Z"),
            _release(2, "b", "2022-01-01T10:00:00Z"),
        ],
    )
    assert result.latest_at == datetime(2022, 3, 5, 10, tzinfo=timezone.utc)
    assert result.releases[0].date() == "2022-03-05"


def test_etag_depends_on_published_bodies(tmp_path, templates_dir):
    base = [_release(1, "a", "2022-01-01T10:00:00Z")]
    first = _load(tmp_path, templates_dir, base)
    with_draft = _load(
        tmp_path, templates_dir, base + [_release(2, "zzz", "2022-01-02T10:00:00Z", draft=True)]
    )
    changed = _load(tmp_path, templates_dir, [_release(1, "b", "2022-01-01T10:00:00Z")])
    assert first.etag == with_draft.etag
    assert first.etag != changed.etag
    assert first.etag.isalnum()


def test_user_mentions_become_links(tmp_path, templates_dir):
    result = _load(tmp_path, templates_dir, [_release(1, "Thanks @alice!", "2022-01-01T10:00:00Z")])
    assert '<a href="https://github.com/alice"><strong>@alice</strong></a>!' in result.releases[0].description


def test_template_names_linked_from_templates_dir(tmp_path, templates_dir):
    result = _load(
        tmp_path, templates_dir, [_release(1, "- youtube-cleanup: more\r\n", "2022-01-01T10:00:00Z")]
    )
    assert 'href="https://letsblock.it/filters/youtube-cleanup"' in result.releases[0].description


def test_official_instance_truncates_notes(tmp_path, templates_dir):
    body = "kept\n\n---\n\nself-hosting only\n"
    official = _load(tmp_path, templates_dir, [_release(1, body, "2022-01-01T10:00:00Z")], True)
    assert "kept" in official.releases[0].description
    assert "self-hosting only" not in official.releases[0].description


def test_download_writes_cache_and_reuses_it(tmp_path, templates_dir):
    payload = json.dumps([_release(5, "five", "2022-01-01T10:00:00Z")]).encode()
    cache = tmp_path / "cache"
    cache.mkdir()
    with mock.patch("urllib.request.urlopen", return_value=BytesIO(payload)) as opener:
        first = download_releases("http://localhost/releases", cache, False, templates_dir)
    assert opener.call_count == 1
    assert (cache / CACHE_FILE_NAME).read_bytes() == payload

    with mock.patch("urllib.request.urlopen", side_effect=OSError("offline")):
        second = download_releases("http://localhost/releases", cache, False, templates_dir)
    assert [r.id for r in second.releases] == [r.id for r in first.releases] == [5]


def test_download_without_cache_dir(tmp_path, templates_dir):
    payload = json.dumps([_release(7, "seven", "2022-01-01T10:00:00Z")]).encode()
    with mock.patch("urllib.request.urlopen", return_value=BytesIO(payload)):
        result = download_releases("http://localhost/releases", None, False, templates_dir)
    assert [r.id for r in result.releases] == [7]


def test_invalid_payload_raises(tmp_path, templates_dir):
    cache = tmp_path / "cache"
    cache.mkdir()
    (cache / CACHE_FILE_NAME).write_text("{not json")
    with pytest.raises(ValueError):
        download_releases("http://localhost/unused", cache, False, templates_dir)


def test_build_fallback():
    fallback = build_fallback()
    assert fallback.releases == []
    assert fallback.etag == ""
    assert fallback.latest_at == datetime.fromtimestamp(0, tz=timezone.utc)