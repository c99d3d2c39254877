import json
import subprocess
from unittest.mock import patch

import pytest

from letsblockit.data import Contributor
from letsblockit.utils.assets import (
    LS_FILES_COMMAND,
    MAGICK_OPTIONS,
    download_avatars,
    hash_assets,
    parse_ls_files,
)

LS_OUTPUT = "abc123 css/main.css\ndef456 js/app.js.gz\nlonely\n\n"


def test_parse_ls_files():
    assert parse_ls_files(LS_OUTPUT) == {
        "css/main.css": "abc123",
        "js/app.js.gz": "def456",
        "js/app.js": "def456",
    }


def test_parse_ls_files_empty():
    assert parse_ls_files("") == {}


def test_hash_assets(tmp_path):
    output = tmp_path / "hashes.json"
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=LS_OUTPUT)
    with patch("subprocess.run", return_value=completed) as run:
        hashes = hash_assets(tmp_path, output)
    assert run.call_args.args[0] == LS_FILES_COMMAND
    assert run.call_args.kwargs["cwd"] == str(tmp_path)
    assert json.loads(output.read_text()) == hashes
    assert hashes == parse_ls_files(LS_OUTPUT)
    text = output.read_text()
    assert '\n    "css/main.css": "abc123"' in text
    assert text.endswith("}\n")


def test_hash_assets_git_failure(tmp_path):
    error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: not a repository")
    with patch("subprocess.run", side_effect=error):
        with pytest.raises(RuntimeError, match="not a repository"):
            hash_assets(tmp_path, tmp_path / "hashes.json")
    assert not (tmp_path / "hashes.json").exists()


def test_download_avatars():
    people = [
        Contributor(login="alice", avatar_url="https://example.com/alice.png"),
        Contributor(login="bob", avatar_url="https://example.com/bob.png"),
    ]
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="")
    with patch("subprocess.run", return_value=completed) as run:
        targets = download_avatars(people, "out")
    assert targets == ["out/alice.webp", "out/bob.webp"]
    commands = [call.args[0] for call in run.call_args_list]
    assert commands[0] == ["magick", "https://example.com/alice.png", *MAGICK_OPTIONS, "out/alice.webp"]
    assert commands[1][-1] == "out/bob.webp"
    assert commands[-1] == ["git", "add", "out"]
    assert len(commands) == 3


def test_download_avatars_failure():
    people = [Contributor(login="alice", avatar_url="https://example.com/alice.png")]
    failed = subprocess.CompletedProcess(args=[], returncode=1, stdout="boom")
    with patch("subprocess.run", return_value=failed) as run:
        with pytest.raises(RuntimeError, match="boom"):
            download_avatars(people, "out")
    assert run.call_count == 1