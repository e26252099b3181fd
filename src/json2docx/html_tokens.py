"""Flatten an HTML fragment into a stream of open / close / text tokens.

BeautifulSoup (``html.parser`` backend) builds the tree, repairs unbalanced
markup and decodes entities; :func:`tokenize` then walks it depth-first with
an explicit stack so deeply nested input cannot exhaust the recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from bs4 import BeautifulSoup, NavigableString, Tag


@dataclass(frozen=True)
class OpenTag:
    name: str

    def is_any_of(self, *names: str) -> bool:
        return self.name in names


@dataclass(frozen=True)
class CloseTag:
    name: str

    def is_any_of(self, *names: str) -> bool:
        return self.name in names


@dataclass(frozen=True)
class Text:
    value: str

    @property
    def is_whitespace(self) -> bool:
        return not self.value.strip()


Token = Union[OpenTag, CloseTag, Text]


def tokenize(html: str) -> Iterator[Token]:
    """Yield the tokens of *html* in document order."""
    soup = BeautifulSoup(html, "html.parser")

    # (node, closing) pairs; a tag is pushed twice so its close event
    # comes out after all of its children.
    stack: list[tuple[object, bool]] = [
        (child, False) for child in reversed(soup.contents)
    ]
    while stack:
        node, closing = stack.pop()

        if isinstance(node, Tag):
            name = (node.name or "").lower()
            if not name:
                continue
            if closing:
                yield CloseTag(name)
                continue
            yield OpenTag(name)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.contents))

        # Comments, doctypes, CDATA and script / style text are subclasses.
        elif type(node) is NavigableString:
            yield Text(str(node))
