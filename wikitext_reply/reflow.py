"""Line break and indentation handling for reply wikitext."""

from __future__ import annotations

import logging
import re

from .config import FormatterConfig
from .constants import (
    BLOCK_TOKEN_PATTERN,
    GALLERY_LINE_PATTERN,
    GALLERY_TOKEN_PATTERN,
    KIND_BLOCK,
    KIND_GALLERY,
    KIND_TABLE,
    KIND_TEMPLATE,
    LIST_PREFIXES,
    MASK_PREFIX,
    MASK_SUFFIX,
    PNIE_PATTERN,
    TABLE_TOKEN_PATTERN,
)
from .exceptions import UnsupportedCombinationError
from .lists import list_markup_to_tags
from .masker import generate_tags_pattern
from .models import WrapperFlags

log = logging.getLogger(__name__)

LEADING_SPACES_PATTERN = re.compile(r"^ +", re.MULTILINE)
LIST_LINE_PATTERN = re.compile(rf"^[{re.escape(LIST_PREFIXES)}]", re.MULTILINE)
TEMPLATE_FIELD_BEFORE_LIST_PATTERN = re.compile(r"\|(?:[^|=}]*=)?(?=[:*#;])")
TEMPLATE_END_AFTER_LIST_PATTERN = re.compile(r"^([:*#;].*?)(}})\Z", re.MULTILINE)
GALLERY_AFTER_TEXT_PATTERN = re.compile(rf"(^|[^\n])({GALLERY_TOKEN_PATTERN})")
GALLERY_BEFORE_TEXT_PATTERN = re.compile(rf"{GALLERY_TOKEN_PATTERN}(?=\Z|[^\n])")
TABLE_TOKEN_SEARCH_PATTERN = re.compile(TABLE_TOKEN_PATTERN)
LIST_OR_BLOCK_BEFORE_NEWLINES_PATTERN = re.compile(
    rf"^((?:[:*#;].+|{re.escape(MASK_PREFIX)}\d+_(?:{KIND_TABLE}|{KIND_GALLERY})"
    rf"{re.escape(MASK_SUFFIX)}))(\n+)(?![:#])",
    re.MULTILINE,
)
PARAGRAPH_BREAK_PATTERN = re.compile(r"^(.*)\n\n+(?!:)", re.MULTILINE)
QUOTE_TAGS_PATTERN = re.compile(
    r"(<(?:blockquote|q)(?: [\w ]+(?:=[^<>]+?)?| *)>)(.*?)(</(?:blockquote|q)>)",
    re.IGNORECASE | re.DOTALL,
)
ANY_TAGS_PATTERN = generate_tags_pattern(["[a-z]+"])
NEWLINE_BEFORE_LIST_PATTERN = re.compile(r"\n[:*#;]")

ENTIRE_LINE_PATTERN = re.compile(
    rf"^{re.escape(MASK_PREFIX)}\d+_(?:{KIND_BLOCK}|{KIND_TEMPLATE})(?:_\d+)?"
    rf"{re.escape(MASK_SUFFIX)} *$"
)
HEADING_OR_RULE_PATTERN = re.compile(r"^(=+).*\1[ \t]*$|^----")


def prepend_indentation(indentation: str, line: str, config: FormatterConfig | None = None) -> str:
    """Prefix `line` with `indentation`.

    One space separates the two unless the line already starts with a list
    prefix or the configuration disables the space.

    Examples:
        prepend_indentation("*", "hello")  # "* hello"
        prepend_indentation("*", ":hello")  # "*:hello"
    """
    config = config or FormatterConfig()
    needs_space = (
        indentation and config.space_after_indentation and not LIST_LINE_PATTERN.match(line)
    )
    return indentation + (" " if needs_space else "") + line


def file_pattern_end(config: FormatterConfig) -> str:
    """Pattern fragment for an inline file embed ending a line."""
    namespaces = "|".join(re.escape(namespace) for namespace in config.file_namespaces)
    return rf"\[\[(?:{namespaces}):.+\]\]$"


def paragraph_template_code(config: FormatterConfig) -> str | None:
    """Return the paragraph template call, or None when none is configured."""
    if not config.paragraph_templates:
        return None
    return f"{{{{{config.paragraph_templates[0]}}}}}"


def find_wrapper_flags(text: str, indentation: str) -> WrapperFlags:
    """Detect tags that span lines or wrap list markup.

    Args:
        text: Masked reply text.
        indentation: Indentation marker; without one no flag is ever set.

    Returns:
        WrapperFlags: Flags steering the paragraph break strategy.

    Examples:
        find_wrapper_flags("<div>a\\nb</div>", ":")  # tags around multiple lines
    """
    if not indentation:
        return WrapperFlags()

    matches = [match.group(0) for match in ANY_TAGS_PATTERN.finditer(text)]
    matches += [match.group(0) for match in QUOTE_TAGS_PATTERN.finditer(text)]

    return WrapperFlags(
        tags_around_multiple_lines=any("\n" in match for match in matches),
        tags_around_list_markup=any(NEWLINE_BEFORE_LIST_PATTERN.search(match) for match in matches),
    )


def handle_indented_comment(
    code: str,
    indentation: str,
    rest_indentation: str,
    is_wrapped: bool,
    is_in_template: bool,
    flags: WrapperFlags,
    config: FormatterConfig | None = None,
) -> str:
    """Adapt list markup, continuation lines and paragraph breaks to the indentation.

    Args:
        code: Masked reply text (or template code).
        indentation: Indentation marker of the first line.
        rest_indentation: Indentation of continuation lines.
        is_wrapped: Whether list markup sits inside a tag or template and must
            become explicit list tags.
        is_in_template: Whether `code` is the code of a template.
        flags: Wrapper flags of the whole reply.
        config: Formatter configuration; defaults to `FormatterConfig()`.

    Returns:
        str: Processed text. Unchanged when `indentation` is empty.

    Raises:
        UnsupportedCombinationError: If a numbered-list indentation meets a
            table, or a gallery on a line of its own.
    """
    if not indentation:
        return code

    config = config or FormatterConfig()

    code = LEADING_SPACES_PATTERN.sub("", code)

    if LIST_LINE_PATTERN.search(code) and (is_wrapped or rest_indentation == "#"):
        if is_in_template:
            # Keep a field value out of the list it precedes.
            code = TEMPLATE_FIELD_BEFORE_LIST_PATTERN.sub(
                lambda match: match.group(0) + "\n", code, count=1
            )
            # The closing braces belong to the template, not the last item.
            code = TEMPLATE_END_AFTER_LIST_PATTERN.sub(r"\1\n\2", code)
        code = list_markup_to_tags(code)

    continuation_pattern = re.compile(
        rf"(\n+)([:*#;]|{TABLE_TOKEN_PATTERN}|{file_pattern_end(config)})",
        re.MULTILINE | re.IGNORECASE,
    )
    code = continuation_pattern.sub(
        lambda match: (
            ("\n\n\n" if len(match.group(1)) > 1 else "\n")
            + prepend_indentation(rest_indentation, match.group(2), config)
        ),
        code,
    )

    code = GALLERY_AFTER_TEXT_PATTERN.sub(
        lambda match: f"{match.group(1)}\n{match.group(2)}", code
    )
    code = GALLERY_BEFORE_TEXT_PATTERN.sub(lambda match: f"{match.group(0)}\n", code)

    if "#" in rest_indentation and TABLE_TOKEN_SEARCH_PATTERN.search(code):
        log.debug("Refusing table under numbered indentation %r", rest_indentation)
        raise UnsupportedCombinationError(UnsupportedCombinationError.TABLE)

    if rest_indentation == "#" and GALLERY_LINE_PATTERN.search(code):
        log.debug("Refusing gallery under numbered indentation")
        raise UnsupportedCombinationError(UnsupportedCombinationError.GALLERY)

    code = LIST_OR_BLOCK_BEFORE_NEWLINES_PATTERN.sub(
        lambda match: (
            match.group(1)
            + "\n"
            + prepend_indentation(
                rest_indentation, "\n\n" if len(match.group(2)) > 1 else "", config
            )
        ),
        code,
    )

    paragraph_template = paragraph_template_code(config)
    if paragraph_template:
        code = PARAGRAPH_BREAK_PATTERN.sub(
            lambda match: f"{match.group(1)}{paragraph_template}\n", code
        )
    elif flags.tags_around_multiple_lines:
        code = PARAGRAPH_BREAK_PATTERN.sub(lambda match: f"{match.group(1)}<br> \n", code)
    else:
        code = PARAGRAPH_BREAK_PATTERN.sub(
            lambda match: f"{match.group(1)}\n{prepend_indentation(rest_indentation, '', config)}",
            code,
        )

    return code


def process_newlines(
    code: str,
    indentation: str,
    is_in_template: bool = False,
    config: FormatterConfig | None = None,
) -> str:
    """Turn single newlines into ``<br>`` where the line break must stay visible.

    With an indentation the lines are also joined, since a reply item must fit
    on one line; continuation lines starting with ``:`` or ``#`` stay apart.
    No ``<br>`` is added next to whole-line tokens, headings, rules, file
    embeds, galleries, or block-level tags.

    Args:
        code: Text produced by `handle_indented_comment`.
        indentation: Indentation marker of the first line.
        is_in_template: Whether `code` is the code of a template; field
            boundaries then count as block boundaries.
        config: Formatter configuration; defaults to `FormatterConfig()`.

    Returns:
        str: Text with line breaks resolved.
    """
    config = config or FormatterConfig()

    file_pattern = re.compile(f"^{file_pattern_end(config)}", re.IGNORECASE)

    current_line_in_templates = "|=" if is_in_template else ""
    next_line_in_templates = r"|\||}}" if is_in_template else ""

    paragraph_template = paragraph_template_code(config)
    paragraph_template_pattern = re.escape(paragraph_template) if paragraph_template else "(?!)"

    current_line_ending_pattern = re.compile(
        rf"(?:<{PNIE_PATTERN}(?: [\w ]+?=[^<>]+?| ?\/?)>|<\/{PNIE_PATTERN}>|{BLOCK_TOKEN_PATTERN}"
        rf"|<br[ \n]*\/?>|{paragraph_template_pattern}{current_line_in_templates}) *$",
        re.IGNORECASE,
    )
    next_line_beginning_pattern = re.compile(
        rf"^(?:<\/{PNIE_PATTERN}>|<{PNIE_PATTERN}{next_line_in_templates})", re.IGNORECASE
    )

    if indentation:
        newlines_pattern = re.compile(r"^(.+)\n(?![:#])(?=(.*))", re.MULTILINE)
    else:
        newlines_pattern = re.compile(
            rf"^((?![:*#; ]).+)\n(?![\n:*#; ]|{TABLE_TOKEN_PATTERN})(?=(.*))", re.MULTILINE
        )

    def _keeps_plain_newline(current_line: str, next_line: str) -> bool:
        return bool(
            ENTIRE_LINE_PATTERN.search(current_line)
            or ENTIRE_LINE_PATTERN.search(next_line)
            or (
                not indentation
                and (
                    HEADING_OR_RULE_PATTERN.search(current_line)
                    or HEADING_OR_RULE_PATTERN.search(next_line)
                )
            )
            or file_pattern.search(current_line)
            or file_pattern.search(next_line)
            or GALLERY_LINE_PATTERN.search(current_line)
            or GALLERY_LINE_PATTERN.search(next_line)
            or current_line_ending_pattern.search(current_line)
            or next_line_beginning_pattern.search(next_line)
        )

    def _join(match: re.Match[str]) -> str:
        current_line, next_line = match.group(1), match.group(2)
        line_break = "" if _keeps_plain_newline(current_line, next_line) else "<br>"
        if line_break and indentation:
            line_break += " "
        newline = "" if indentation and not GALLERY_LINE_PATTERN.search(next_line) else "\n"
        return current_line + line_break + newline

    return newlines_pattern.sub(_join, code)


def process_code(
    code: str,
    indentation: str,
    rest_indentation: str,
    flags: WrapperFlags,
    is_in_template: bool,
    config: FormatterConfig | None = None,
) -> str:
    """Run the indentation pass, then the newline pass, over `code`."""
    code = handle_indented_comment(
        code,
        indentation,
        rest_indentation,
        is_in_template or flags.tags_around_list_markup,
        is_in_template,
        flags,
        config,
    )
    return process_newlines(code, indentation, is_in_template, config)
