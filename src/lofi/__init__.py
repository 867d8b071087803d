"""
Parse #Lofi content, a friendly yet flexible format.

>>> import lofi
>>> element = lofi.parse_element("Click me #button")
>>> list(element.texts), list(element.tags_path)
(['Click me'], ['button'])
"""

from lofi.parser import parse_element, parse_section, parse_sections
from lofi.schemas import FLAG, Content, Document, Element, Flag, Section, TagValue

__all__ = [
    "parse_element",
    "parse_section",
    "parse_sections",
    "Element",
    "Flag",
    "FLAG",
    "Content",
    "TagValue",
    "Section",
    "Document",
]
