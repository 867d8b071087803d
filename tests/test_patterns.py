import time

import pytest
from pyrsistent import pmap, pvector, v

from lofi.patterns import (
    clean_text,
    parse_introduction,
    parse_mention,
    parse_tags,
    parse_texts_and_mentions,
)
from lofi.schemas import FLAG, Content


def test_introduction():
    assert parse_introduction("@user: hello") == ("user", "hello")
    assert parse_introduction("@user:") == ("user", "")
    assert parse_introduction("@user:   ") == ("user", "")
    assert parse_introduction("@first_name-2: x") == ("first_name-2", "x")


def test_no_introduction():
    assert parse_introduction("hello") == (None, "hello")
    assert parse_introduction("@user hello") == (None, "@user hello")
    assert parse_introduction("@person.name: hi") == (None, "@person.name: hi")
    assert parse_introduction("say @user: hi") == (None, "say @user: hi")
    assert parse_introduction("@: hi") == (None, "@: hi")


def test_clean_text():
    assert clean_text("hello #button") == "hello"
    assert clean_text("hello #variation: danger #button ") == "hello"
    assert clean_text("#table #title: @person.name") == ""
    assert clean_text("  spaced out  ") == "spaced out"


def test_tags_need_a_key():
    assert clean_text("# heading") == "# heading"
    assert clean_text("issue#12") == "issue#12"
    assert parse_tags("# heading") == (v(), pmap())
    assert parse_tags("issue#12 a#b") == (v(), pmap())


def test_parse_tags():
    tags_path, tags_hash = parse_tags("hello #button #variation: danger")
    assert tags_path == v("button")
    assert tags_hash == pmap(
        {"button": FLAG, "variation": Content(texts=v("danger"), mentions=v())}
    )


def test_tag_order_does_not_change_result():
    assert parse_tags("hello #button #variation: danger") == parse_tags(
        "hello #variation: danger #button"
    )


def test_tags_path_keeps_source_order():
    tags_path, _ = parse_tags("#b #a #c: x #d")
    assert tags_path == v("b", "a", "d")


def test_duplicate_tags():
    tags_path, tags_hash = parse_tags("#key #key: value")
    assert tags_path == v("key")
    assert tags_hash == pmap({"key": Content(texts=v("value"), mentions=v())})

    tags_path, tags_hash = parse_tags("#key: value #key")
    assert tags_path == v("key")
    assert tags_hash == pmap({"key": FLAG})

    tags_path, tags_hash = parse_tags("#a #a")
    assert tags_path == v("a", "a")
    assert tags_hash == pmap({"a": FLAG})


def test_empty_tag_value():
    _, tags_hash = parse_tags("#key:")
    assert tags_hash["key"] == Content(texts=v(""), mentions=v())


def test_parse_mention():
    assert parse_mention("person.name") == v("person", "name")
    assert parse_mention("first-name") == v("first-name")


@pytest.mark.parametrize(
    "text,texts,mentions",
    [
        ("", [""], []),
        ("hello", ["hello"], []),
        ("@first-name", ["", ""], [["first-name"]]),
        ("hello @first-name @last-name", ["hello ", " ", ""], [["first-name"], ["last-name"]]),
        ("hello @first-name@last-name", ["hello ", "", ""], [["first-name"], ["last-name"]]),
        ("hello @person.name.", ["hello ", "."], [["person", "name"]]),
        ("mail me@example.com", ["mail me", ""], [["example", "com"]]),
        ("just @ and @.", ["just @ and @."], []),
        ("hello @person.name #button", ["hello ", ""], [["person", "name"]]),
    ],
)
def test_parse_texts_and_mentions(text, texts, mentions):
    assert parse_texts_and_mentions(text) == (
        pvector(texts),
        pvector(pvector(m) for m in mentions),
    )


@pytest.mark.parametrize(
    "text",
    [
        "#" * 100_000,
        "@" * 100_000,
        "@a." * 50_000,
        "#a:" * 50_000,
        "-" * 100_000,
        "@" + "a" * 100_000,
        "#" + "a-" * 50_000 + " " * 50_000,
        "@a" + ".a" * 50_000 + ".",
    ],
)
def test_pathological_input_is_linear(text):
    start = time.perf_counter()
    parse_introduction(text)
    parse_tags(text)
    texts, mentions = parse_texts_and_mentions(text)
    assert len(texts) == len(mentions) + 1
    assert time.perf_counter() - start < 5
