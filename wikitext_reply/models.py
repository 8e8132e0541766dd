"""Data models for wikitext-reply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class WrapperFlags:
    """Describe the tags found around the masked reply text.

    Attributes:
        tags_around_multiple_lines: Whether any tag spans more than one line.
        tags_around_list_markup: Whether any tag wraps lines starting with a
            list prefix.
    """

    tags_around_multiple_lines: bool = False
    tags_around_list_markup: bool = False


@dataclass(frozen=True)
class ListLine:
    """A single line of text inside a list tree.

    Attributes:
        tag: Item tag (``li``, ``dd``, ``dt``) or an empty string for a line
            outside any list.
        text: Line text without the consumed list prefix.
    """

    tag: str
    text: str


@dataclass(frozen=True)
class ListNode:
    """A list (``ul``, ``ol``, ``dl``) or an item holding nested lists.

    Attributes:
        tag: Tag wrapping the children when rendered.
        children: Child lines and nodes in source order.
    """

    tag: str
    children: tuple[ListEntry, ...]


ListEntry = Union[ListLine, ListNode]
