from __future__ import annotations

import pytest

from wikitext_reply.builder import (
    build_wikitext,
    format_reply,
    reply_indentation,
    rest_lines_indentation,
    sign_text,
)
from wikitext_reply.config import FormatterConfig
from wikitext_reply.exceptions import FormattingError, UnsupportedCombinationError


def test_indentation_is_prefixed_with_a_space():
    assert build_wikitext("hello", "*") == "* hello\n"


def test_plain_text_without_indentation_is_trimmed():
    assert build_wikitext("  hello  ", "") == "hello\n"


def test_empty_text():
    assert build_wikitext("", "") == "\n"


def test_lines_are_joined_under_indentation():
    assert build_wikitext("line one\nline two", ":") == ": line one<br> line two\n"


def test_lines_get_visible_breaks_without_indentation():
    assert build_wikitext("line one\nline two", "") == "line one<br>\nline two\n"


@pytest.mark.parametrize("indentation", ["", "*"])
def test_nested_templates_survive(indentation: str):
    result = build_wikitext("{{a|{{b|{{c}}}}}}", indentation)

    assert result.endswith("{{a|{{b|{{c}}}}}}\n")


def test_numbered_list_with_table_is_rejected():
    with pytest.raises(UnsupportedCombinationError) as exc_info:
        build_wikitext("# item\n{|\n| cell\n|}", "#")

    assert exc_info.value.code == "numberedList-table"
    assert isinstance(exc_info.value, FormattingError)
    assert isinstance(exc_info.value, ValueError)


def test_numbered_sublist_with_table_is_rejected():
    with pytest.raises(UnsupportedCombinationError):
        build_wikitext("text\n{|\n| cell\n|}", "*#")


def test_numbered_list_with_gallery_is_rejected():
    with pytest.raises(UnsupportedCombinationError) as exc_info:
        build_wikitext("<gallery>\nFile:A.jpg\n</gallery>", "#")

    assert exc_info.value.code == "numberedList"


def test_table_is_moved_to_continuation_line():
    result = build_wikitext("Look:\n{|\n| cell\n|}", ":")

    assert result == ": Look:\n: {|\n| cell\n|}\n"


def test_paragraph_gap_reindents_next_paragraph():
    result = build_wikitext("para one\n\n\npara two", ":")

    assert result == ": para one\n: para two\n"
    assert "<br>" not in result


def test_paragraph_gap_with_multiline_tag_uses_line_break():
    result = build_wikitext("<div>a\nb</div>\n\n\nnext", ":")

    assert result == ": <div>a<br> b</div><br> next\n"


def test_paragraph_template_marks_paragraph_breaks():
    config = FormatterConfig(paragraph_templates=("pb",))

    assert build_wikitext("a\n\n\nb", ":", config) == ": a{{pb}}b\n"


def test_text_starting_with_bullet_uses_rest_indentation():
    assert build_wikitext("* already a list", "*") == ":* already a list\n"


def test_text_starting_with_colon_keeps_indentation():
    assert build_wikitext(":continued", "*") == "*:continued\n"


def test_block_contents_are_not_reflowed():
    result = build_wikitext("<pre>\na\n\n\nb\n</pre>", ":")

    assert result == ": <pre>\na\n\n\nb\n</pre>\n"


def test_nowiki_hides_templates():
    assert build_wikitext("<nowiki>{{x}}</nowiki>", "") == "<nowiki>{{x}}</nowiki>\n"


def test_file_embed_goes_to_continuation_line():
    result = build_wikitext("See\n[[File:X.png|thumb]]", ":")

    assert result == ": See\n: [[File:X.png|thumb]]\n"


def test_template_body_lines_are_joined():
    result = build_wikitext("{{quote|line1\nline2}}", ":")

    assert result == ": {{quote|line1<br> line2}}\n"


def test_table_inside_template_is_kept_intact():
    result = build_wikitext("{{box|\n{|\n| a\n|}\n}}", ":")

    assert "{|\n| a\n|}" in result
    assert "<br>" not in result
    assert result == ": {{box|\n: {|\n| a\n|}\n: }}\n"


@pytest.mark.parametrize(
    ("indentation", "expected"),
    [("*", ":"), ("::", "::"), ("*#", ":#"), ("", "")],
)
def test_rest_lines_indentation(indentation: str, expected: str):
    assert rest_lines_indentation(indentation) == expected


@pytest.mark.parametrize(
    ("use_bulleted", "nested", "expected"),
    [(True, False, "*"), (False, False, ":"), (True, True, "**"), (False, True, "*:")],
)
def test_reply_indentation(use_bulleted: bool, nested: bool, expected: str):
    assert reply_indentation(use_bulleted, nested) == expected


def test_sign_text_appends_signature_once():
    assert sign_text(" Agree ") == "Agree--~~~~"
    assert sign_text("Agree --~~~~") == "Agree --~~~~"
    assert sign_text("Agree --~~~~~") == "Agree --~~~~~"


def test_format_reply_signs_and_indents():
    assert format_reply("Agree", "*") == "* Agree--~~~~\n"
    assert format_reply("Agree", ":", sign=False) == ": Agree\n"


def test_format_reply_uses_configured_signature():
    config = FormatterConfig(signature=" ~~~~")

    assert format_reply("Agree", "*", config) == "* Agree ~~~~\n"


def test_template_field_before_list_keeps_closing_braces_outside():
    result = build_wikitext("{{q|reason=* a\n* b}}", ":")

    assert result == ": {{q|reason=<ul><li>a</li><li>b</li></ul>}}\n"


def test_gallery_stays_on_its_own_lines():
    result = build_wikitext("a\n<gallery>\nF:x\n</gallery>\nb", ":")

    assert result == ": a\n<gallery>\nF:x\n</gallery>\n: b\n"


def test_crlf_line_endings_are_normalized():
    assert build_wikitext("a\r\nb", ":") == ": a<br> b\n"
    assert build_wikitext("a\r\nb", "") == "a<br>\nb\n"
