"""
Line-level Lofi scanners: introductions, tags, mentions and text.

Every pattern here is matched with `re` and written so that adjacent
quantified pieces never compete for the same characters: identifiers stop at
`:`, `.`, `#` and whitespace, and a tag value stops at the next `#`. A failed
match attempt therefore gives back at most one identifier, and scanning a
line stays linear in its length.
"""

import re
from typing import Optional

from pyrsistent import PMap, PVector, pmap, pvector

from lofi.schemas import FLAG, Content, TagValue

IDENTIFIER = r"[A-Za-z0-9_-]+"

# `@name:` at the very start of a line
INTRODUCTION_RE = re.compile(rf"@({IDENTIFIER}):")
# `#key` or `#key: value`, value runs up to the next `#`
TAG_RE = re.compile(rf"\B#({IDENTIFIER})(?::\s*([^#]*))?")
# `@key` or `@key.path.to.value`
MENTION_RE = re.compile(rf"@({IDENTIFIER}(?:\.{IDENTIFIER})*)")


def parse_introduction(line: str) -> tuple[Optional[str], str]:
    """
    Split a leading `@name:` binding off a stripped line.

    >>> parse_introduction("@user: hello")
    ('user', 'hello')
    >>> parse_introduction("hello @user:")
    (None, 'hello @user:')
    """
    match = INTRODUCTION_RE.match(line)
    if match is None:
        return None, line
    return match.group(1), line[match.end() :].strip()


def clean_text(text: str) -> str:
    """
    Remove all tags and surrounding whitespace.

    >>> clean_text("Click me #button #variation: danger")
    'Click me'
    """
    return TAG_RE.sub("", text).strip()


def parse_mention(mention: str) -> PVector[str]:
    """Turn a matched `person.name` into its key-path."""
    return pvector(mention.split("."))


def parse_texts_and_mentions(
    text: str,
) -> tuple[PVector[str], PVector[PVector[str]]]:
    """
    Split tag-free text into alternating text and mention segments.

    >>> texts, mentions = parse_texts_and_mentions("hello @person.name!")
    >>> list(texts), [list(m) for m in mentions]
    (['hello ', '!'], [['person', 'name']])
    """
    cleaned = clean_text(text)
    texts: list[str] = []
    mentions: list[PVector[str]] = []
    position = 0
    for match in MENTION_RE.finditer(cleaned):
        texts.append(cleaned[position : match.start()])
        mentions.append(parse_mention(match.group(1)))
        position = match.end()
    texts.append(cleaned[position:])
    return pvector(texts), pvector(mentions)


def parse_tag_value(value: Optional[str]) -> TagValue:
    if value is None:
        return FLAG
    texts, mentions = parse_texts_and_mentions(value)
    return Content(texts=texts, mentions=mentions)


def parse_tags(text: str) -> tuple[PVector[str], PMap[str, TagValue]]:
    """
    Collect `#key` flags and `#key: value` contents in source order.

    Only flags are listed in the returned path. A key written twice keeps
    its last value.

    >>> tags_path, tags_hash = parse_tags("hello #button #variation: danger")
    >>> list(tags_path)
    ['button']
    >>> list(tags_hash["variation"].texts)
    ['danger']
    """
    tags_path: list[str] = []
    tags_hash: dict[str, TagValue] = {}
    for match in TAG_RE.finditer(text):
        key = match.group(1)
        value = parse_tag_value(match.group(2))
        if value is FLAG:
            tags_path.append(key)
        tags_hash[key] = value
    return pvector(tags_path), pmap(tags_hash)
