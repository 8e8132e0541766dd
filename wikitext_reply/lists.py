"""Conversion of wikitext list markup into explicit HTML list tags."""

from __future__ import annotations

from .constants import ITEM_TAGS, LIST_TAGS
from .models import ListEntry, ListLine, ListNode


def _group_lines(lines: list[ListLine], is_nested: bool) -> list[ListEntry]:
    """Group consecutive list lines of the same list type into nodes.

    Lines whose first character is a list prefix are collected while the list
    type stays the same (``:`` and ``;`` share ``dl``). The collected items are
    grouped again, one prefix character shallower, which discovers sub-lists.
    Inside a nested level a sub-list is attached to the item right before it.

    Args:
        lines: Lines of one level, in source order.
        is_nested: Whether `lines` are the items of an enclosing list.

    Returns:
        list[ListEntry]: Lines and list nodes in source order.
    """
    entries: list[ListEntry] = []
    run: list[ListLine] = []
    run_sources: list[ListLine] = []
    run_tag = ""

    def flush() -> None:
        node = ListNode(run_tag, tuple(_group_lines(run, is_nested=True)))
        if not is_nested:
            entries.append(node)
        elif entries:
            previous = entries.pop()
            if isinstance(previous, ListNode):
                entries.append(ListNode(previous.tag, previous.children + (node,)))
            else:
                entries.append(ListNode(previous.tag, (previous, node)))
        else:
            entries.append(ListNode(run_sources[0].tag, (node,)))

    for line in lines:
        first_char = line.text[:1]
        list_tag = LIST_TAGS.get(first_char, "")

        if run and list_tag != run_tag:
            flush()
            run = []
            run_sources = []

        if list_tag:
            run_tag = list_tag
            run.append(ListLine(ITEM_TAGS[first_char], line.text[1:]))
            run_sources.append(line)
        else:
            entries.append(line)

    if run:
        flush()

    return entries


def build_list_tree(code: str) -> tuple[ListEntry, ...]:
    """Build the list tree for a block of text.

    Args:
        code: Text whose lines may start with list prefixes.

    Returns:
        tuple[ListEntry, ...]: Top-level lines and list nodes, in order.

    Examples:
        build_list_tree("intro\\n* a\\n* b")
    """
    lines = [ListLine("", line) for line in code.split("\n")]
    return tuple(_group_lines(lines, is_nested=False))


def _render_item(item: ListEntry) -> str:
    if isinstance(item, ListLine):
        body = item.text.strip()
    else:
        body = _render_entries(item.children, is_nested=True)
    return f"<{item.tag}>{body}</{item.tag}>" if item.tag else body


def _render_entries(entries: tuple[ListEntry, ...], is_nested: bool) -> str:
    rendered = []
    for entry in entries:
        if isinstance(entry, ListLine):
            rendered.append(entry.text.strip() if is_nested else entry.text)
        else:
            items = "".join(_render_item(item) for item in entry.children)
            rendered.append(f"<{entry.tag}>{items}</{entry.tag}>")
    return "\n".join(rendered)


def render_list_tree(tree: tuple[ListEntry, ...]) -> str:
    """Render a list tree as text with paired list tags.

    Lines outside lists keep their text verbatim; item texts are trimmed.
    """
    return _render_entries(tree, is_nested=False)


def list_markup_to_tags(code: str) -> str:
    """Replace wikitext list markup with ``ul``/``ol``/``dl`` tags.

    Args:
        code: Text containing list markup.

    Returns:
        str: The same content with each list rendered on one line of tags.

    Examples:
        list_markup_to_tags("* a\\n** b")  # "<ul><li>a\\n<ul><li>b</li></ul></li></ul>"
    """
    return render_list_tree(build_list_tree(code))
