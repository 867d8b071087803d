from dataclasses import dataclass, field, replace
from typing import Optional, TypedDict, Union

from pyrsistent import PMap, PVector, pmap, pvector


@dataclass(frozen=True)
class Flag:
    """A tag written without a value, e.g. `#button`."""


FLAG = Flag()


@dataclass(frozen=True)
class Content:
    """
    The tokenized value of a `#key: value` tag.

    Tag values are scanned for mentions but never for nested tags.
    """

    texts: PVector[str] = field(default_factory=lambda: pvector([""]))
    mentions: PVector[PVector[str]] = field(default_factory=pvector)


TagValue = Union[Flag, Content]


@dataclass(frozen=True)
class Element:
    """
    One parsed Lofi line.

    `texts` and `mentions` interleave: texts[0], mentions[0], texts[1], ...
    so there is always exactly one more text segment than mentions.
    """

    introducing: Optional[str] = None
    texts: PVector[str] = field(default_factory=lambda: pvector([""]))
    mentions: PVector[PVector[str]] = field(default_factory=pvector)
    tags_path: PVector[str] = field(default_factory=pvector)
    tags_hash: PMap[str, TagValue] = field(default_factory=pmap)
    children: PVector["Element"] = field(default_factory=pvector)

    def set(self, **changes) -> "Element":
        return replace(self, **changes)


Section = PVector[Element]
Document = PVector[Section]


# Plain JSON shapes produced by lofi.io.export


class ContentRecord(TypedDict):
    texts: list[str]
    mentions: list[list[str]]


class FlagTagRecord(TypedDict):
    flag: bool


class ContentTagRecord(TypedDict):
    content: ContentRecord


class ElementRecord(TypedDict):
    introducing: Optional[str]
    texts: list[str]
    mentions: list[list[str]]
    tags_path: list[str]
    tags_hash: dict[str, Union[FlagTagRecord, ContentTagRecord]]
    children: list["ElementRecord"]


class SourceRecord(TypedDict):
    """One line of `lofi parse` JSONL output."""

    path: str
    sections: list[list[ElementRecord]]
