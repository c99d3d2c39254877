"""Rendering of release notes: template links, short GitHub references and heading offsets."""

from __future__ import annotations

import re
from collections.abc import Callable

from markdown_it import MarkdownIt
from markdown_it.token import Token

GITHUB_LINK_PREFIX = "https://github.com/"
GITHUB_REPO_NAME = "letsblockit"
TEMPLATE_NAME_SEPARATOR = ":"
TEMPLATE_LINK_PREFIX = "https://letsblock.it/filters/"
HEADING_LEVEL_OFFSET = 2

_URL_RE = re.compile(r"https?://[^\s<>]+")
_TRAILING_PUNCTUATION = ".,;:!?'\""

_md = MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _text_token(content: str) -> Token:
    return Token("text", "", 0, content=content)


def _link_tokens(href: str, text: str) -> list[Token]:
    return [
        Token("link_open", "a", 1, attrs={"href": href}),
        _text_token(text),
        Token("link_close", "a", -1),
    ]


def _trim_url(url: str) -> str:
    while url:
        last = url[-1]
        if last in _TRAILING_PUNCTUATION:
            url = url[:-1]
        elif last == ")" and url.count(")") > url.count("("):
            url = url[:-1]
        else:
            break
    return url


def _split_urls(token: Token) -> list[Token]:
    text = token.content
    parts: list[Token] = []
    pos = 0
    for match in _URL_RE.finditer(text):
        url = _trim_url(match.group())
        if not url:
            continue
        start = match.start()
        if start > pos:
            parts.append(_text_token(text[pos:start]))
        parts.extend(_link_tokens(url, url))
        pos = start + len(url)
    if not parts:
        return [token]
    if pos < len(text):
        parts.append(_text_token(text[pos:]))
    return parts


def _autolink(inline: Token) -> None:
    """Turn bare URLs found in plain text into links."""
    result: list[Token] = []
    depth = 0
    for child in inline.children or []:
        if child.type == "link_open":
            depth += 1
        elif child.type == "link_close":
            depth -= 1
        if child.type != "text" or depth:
            result.append(child)
        else:
            result.extend(_split_urls(child))
    inline.children = result


def _shorten_github_links(children: list[Token]) -> None:
    for tok, text in zip(children, children[1:]):
        if tok.type != "link_open" or text.type != "text":
            continue
        href = str(tok.attrGet("href") or "")
        if not href.startswith(GITHUB_LINK_PREFIX):
            continue
        parts = href[len(GITHUB_LINK_PREFIX):].split("/")
        if len(parts) < 4:
            continue
        kind, ident, repo = parts[-2], parts[-1], parts[1]
        same_repo = repo == GITHUB_REPO_NAME
        prefix = "" if same_repo else repo
        if kind in ("pull", "issues"):
            text.content = f"{prefix}#{ident}"
        elif kind == "commit":
            text.content = f"{prefix}@{ident[:7]}"
        elif kind == "compare" and same_repo:
            text.content = ident


def _link_template_name(
    tokens: list[Token], index: int, template_exists: Callable[[str], bool]
) -> None:
    if index + 2 >= len(tokens):
        return
    paragraph, inline = tokens[index + 1], tokens[index + 2]
    if paragraph.type != "paragraph_open" or inline.type != "inline":
        return
    children = inline.children or []
    if not children or children[0].type != "text":
        return
    first = children[0]
    name, sep, _ = first.content.partition(TEMPLATE_NAME_SEPARATOR)
    if not sep or not template_exists(name):
        return
    first.content = first.content[len(name):]
    inline.children = _link_tokens(TEMPLATE_LINK_PREFIX + name, name) + children


def _offset_heading(token: Token) -> None:
    level = int(token.tag[1:]) + HEADING_LEVEL_OFFSET
    token.tag = f"h{min(level, 6)}"


def render_release_notes(
    text: str, official_instance: bool, template_exists: Callable[[str], bool]
) -> str:
    """Render release notes markdown to HTML.

    On the official instance, everything from the first horizontal rule on is dropped.
    """
    tokens = _md.parse(text)
    if official_instance:
        for index, tok in enumerate(tokens):
            if tok.type == "hr":
                tokens = tokens[:index]
                break

    for tok in tokens:
        if tok.type == "inline":
            _autolink(tok)

    for index, tok in enumerate(tokens):
        if tok.type in ("heading_open", "heading_close"):
            _offset_heading(tok)
        elif tok.type == "list_item_open":
            _link_template_name(tokens, index, template_exists)

    for tok in tokens:
        if tok.type == "inline" and tok.children:
            _shorten_github_links(tok.children)

    return _md.renderer.render(tokens, _md.options, {})