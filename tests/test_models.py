import dataclasses

import pytest

from wikitext_reply.models import ListLine, ListNode, WrapperFlags


def test_wrapper_flags_defaults():
    flags = WrapperFlags()

    assert flags.tags_around_multiple_lines is False
    assert flags.tags_around_list_markup is False


def test_wrapper_flags_are_frozen():
    flags = WrapperFlags()

    with pytest.raises(dataclasses.FrozenInstanceError):
        flags.tags_around_list_markup = True


def test_list_nodes_compare_by_value():
    first = ListNode("ul", (ListLine("li", " a"),))
    second = ListNode("ul", (ListLine("li", " a"),))

    assert first == second
    assert hash(first) == hash(second)
