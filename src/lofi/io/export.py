"""
Serialize parsed Lofi trees to JSON and back, and tabulate tag/mention use.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional, Union

import orjson
import polars as pl
from pydantic import BaseModel, field_validator, model_validator
from pyrsistent import pmap, pvector

from lofi.schemas import (
    FLAG,
    Content,
    ContentRecord,
    Document,
    Element,
    ElementRecord,
    Flag,
    Section,
    SourceRecord,
    TagValue,
)


def content_to_dict(content: Content) -> ContentRecord:
    return {
        "texts": list(content.texts),
        "mentions": [list(mention) for mention in content.mentions],
    }


def tag_value_to_dict(value: TagValue) -> dict:
    if isinstance(value, Flag):
        return {"flag": True}
    return {"content": content_to_dict(value)}


def element_to_dict(element: Element) -> ElementRecord:
    """
    Convert an Element into plain JSON-ready data.

    >>> from lofi import parse_element
    >>> element_to_dict(parse_element("hello #button"))["tags_hash"]
    {'button': {'flag': True}}
    """
    return {
        "introducing": element.introducing,
        "texts": list(element.texts),
        "mentions": [list(mention) for mention in element.mentions],
        "tags_path": list(element.tags_path),
        "tags_hash": {
            key: tag_value_to_dict(value) for key, value in element.tags_hash.items()
        },
        "children": [element_to_dict(child) for child in element.children],
    }


def section_to_list(section: Section) -> list[ElementRecord]:
    return [element_to_dict(element) for element in section]


def document_to_list(document: Document) -> list[list[ElementRecord]]:
    return [section_to_list(section) for section in document]


def to_json(document: Document) -> str:
    """
    Serialize a Document to a newline-terminated JSON string.
    """
    buf = orjson.dumps(
        document_to_list(document),
        option=orjson.OPT_APPEND_NEWLINE,
    )
    return buf.decode("utf-8")


class ContentModel(BaseModel):
    texts: list[str]
    mentions: list[list[str]]

    @field_validator("mentions")
    @classmethod
    def key_paths_not_empty(cls, v: list[list[str]]) -> list[list[str]]:
        if any(not key_path for key_path in v):
            raise ValueError("Mention key-paths must not be empty")
        return v

    @model_validator(mode="after")
    def texts_surround_mentions(self) -> "ContentModel":
        if len(self.texts) != len(self.mentions) + 1:
            raise ValueError(
                f"Expected {len(self.mentions) + 1} texts for "
                f"{len(self.mentions)} mentions, got {len(self.texts)}"
            )
        return self


class TagModel(BaseModel):
    flag: Optional[bool] = None
    content: Optional[ContentModel] = None

    @model_validator(mode="after")
    def flag_or_content(self) -> "TagModel":
        if (self.flag is None) == (self.content is None):
            raise ValueError("A tag is either a flag or content")
        if self.flag is False:
            raise ValueError("Flag tags must be true")
        return self

    def to_value(self) -> TagValue:
        if self.content is None:
            return FLAG
        return Content(
            texts=pvector(self.content.texts),
            mentions=pvector(pvector(m) for m in self.content.mentions),
        )


class ElementModel(ContentModel):
    introducing: Optional[str] = None
    tags_path: list[str] = []
    tags_hash: dict[str, TagModel] = {}
    children: list["ElementModel"] = []

    @field_validator("children")
    @classmethod
    def one_level_deep(cls, v: list["ElementModel"]) -> list["ElementModel"]:
        if any(child.children for child in v):
            raise ValueError("Children cannot have children of their own")
        return v

    def to_element(self) -> Element:
        return Element(
            introducing=self.introducing,
            texts=pvector(self.texts),
            mentions=pvector(pvector(m) for m in self.mentions),
            tags_path=pvector(self.tags_path),
            tags_hash=pmap({key: tag.to_value() for key, tag in self.tags_hash.items()}),
            children=pvector(child.to_element() for child in self.children),
        )


def load_json(data: Union[str, bytes]) -> Document:
    """
    Rebuild a Document from the output of `to_json`.

    Raises `pydantic.ValidationError` when a record breaks the element shape.
    """
    return pvector(
        pvector(ElementModel.model_validate(record).to_element() for record in section)
        for section in orjson.loads(data)
    )


def export_jsonl(records: Iterable[SourceRecord], file_name: Union[str, Path]) -> None:
    with open(file_name, "wb") as f:
        for record in records:
            f.write(orjson.dumps(record, option=orjson.OPT_APPEND_NEWLINE))


def iter_elements(document: Document) -> Iterator[Element]:
    for section in document:
        for element in section:
            yield element
            yield from element.children


def count_keys(document: Document) -> pl.DataFrame:
    """
    Count how often each tag key and mention key-path is used.

    Mentions inside tag contents are counted too.

    >>> from lofi import parse_sections
    >>> df = count_keys(parse_sections("a #field\\nb #field @user.name"))
    >>> df.rows()
    [('tag', 'field', 2), ('mention', 'user.name', 1)]
    """
    rows = []
    for element in iter_elements(document):
        mentions = list(element.mentions)
        for key, value in element.tags_hash.items():
            rows.append({"kind": "tag", "key": key})
            if isinstance(value, Content):
                mentions.extend(value.mentions)
        rows.extend({"kind": "mention", "key": ".".join(m)} for m in mentions)

    df = pl.DataFrame(rows, schema={"kind": pl.Utf8, "key": pl.Utf8})
    return (
        df.group_by(["kind", "key"])
        .len(name="frequency")
        .sort(["frequency", "kind", "key"], descending=[True, True, False])
    )


def export_count(document: Document, file_name: Union[str, Path]) -> None:
    """Write the `count_keys` table as CSV."""
    count_keys(document).write_csv(file_name)
