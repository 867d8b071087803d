"""
Fold Lofi text into elements, sections and documents.

>>> from lofi.parser import parse_section
>>> [list(e.texts) for e in parse_section("top\\n- inner")[0].children]
[['inner']]
"""

import logging
import re

from pyrsistent import pvector

from lofi.patterns import parse_introduction, parse_tags, parse_texts_and_mentions
from lofi.schemas import Document, Element, Section

# Lines are separated by one line break
LINE_SEPARATOR_RE = re.compile(r"\r\n|\n")
# Sections are separated by at least one empty line
SECTION_SEPARATOR_RE = re.compile(r"(?:\r\n|\n){2,}")
# Nested children start with '-'
NESTED_LINE_RE = re.compile(r"\s*-\s*")


def _ensure_text(text) -> str:
    if not isinstance(text, str):
        raise TypeError(f"Unsupported type: {type(text)} for {text!r}")
    return text


def parse_element(line: str) -> Element:
    """
    Parse a single line into an Element.

    >>> element = parse_element("@user: hello @person.name #button")
    >>> element.introducing, list(element.texts), list(element.tags_path)
    ('user', ['hello ', ''], ['button'])
    """
    introducing, rest = parse_introduction(_ensure_text(line).strip())
    texts, mentions = parse_texts_and_mentions(rest)
    tags_path, tags_hash = parse_tags(rest)
    return Element(
        introducing=introducing,
        texts=texts,
        mentions=mentions,
        tags_path=tags_path,
        tags_hash=tags_hash,
    )


def split_lines(text: str) -> list[str]:
    return [line for line in LINE_SEPARATOR_RE.split(text) if line]


def split_sections(text: str) -> list[str]:
    return [block for block in SECTION_SEPARATOR_RE.split(text) if block]


def parse_section(text: str) -> Section:
    """
    Parse one blank-line free block into its top-level elements.

    Lines starting with `-` become children of the closest preceding
    top-level line. Nesting is only ever one level deep.
    """
    folded: list[tuple[Element, list[Element]]] = []
    for line in split_lines(_ensure_text(text).strip()):
        nested = NESTED_LINE_RE.match(line)
        if nested is None:
            folded.append((parse_element(line), []))
            continue
        if not folded:
            # Section opens with nested lines: host them on an empty element
            folded.append((Element(), []))
        folded[-1][1].append(parse_element(line[nested.end() :]))

    return pvector(
        element.set(children=pvector(children)) if children else element
        for element, children in folded
    )


def parse_sections(text: str) -> Document:
    """
    Parse a whole document: blocks separated by empty lines become sections.

    No state is shared between sections.
    """
    sections = pvector(
        parse_section(block) for block in split_sections(_ensure_text(text).strip())
    )
    logging.debug(
        "Parsed %d sections with %d top-level elements",
        len(sections),
        sum(len(section) for section in sections),
    )
    return sections
