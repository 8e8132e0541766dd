"""Assembly of a reply's final wikitext."""

from __future__ import annotations

import logging
import re

from .config import FormatterConfig
from .constants import DEFAULT_SIGNATURE, SIGNATURE_PATTERN
from .masker import TextMasker
from .models import WrapperFlags
from .reflow import find_wrapper_flags, prepend_indentation, process_code

log = logging.getLogger(__name__)

# Text starting with one of these already carries its own list marker.
# A leading ":" is a valid continuation under any indentation.
MARKED_START_PATTERN = re.compile(r"^[*#;]")


def rest_lines_indentation(indentation: str) -> str:
    """Indentation for the lines after the first one.

    Bullets become definition-list markers so continuation lines do not start
    new items.

    Examples:
        rest_lines_indentation("*")  # ":"
        rest_lines_indentation("*#")  # ":#"
    """
    return indentation.replace("*", ":") if indentation else ""


def build_wikitext(text: str, indentation: str, config: FormatterConfig | None = None) -> str:
    """Build the wikitext of one indented reply.

    Protected constructs are masked first; template code is processed with the
    template flag set before it is hidden. The reply is then reflowed,
    terminated with a newline, prefixed with the indentation and unmasked.

    Args:
        text: Reply text as typed by the user.
        indentation: Indentation marker, e.g. ``":"``, ``"*"``, ``"::"``,
            ``"#"``; empty for an unindented block.
        config: Formatter configuration; defaults to `FormatterConfig()`.

    Returns:
        str: Wikitext ready to be inserted into a discussion, ending with a
            newline.

    Raises:
        UnsupportedCombinationError: If a numbered-list indentation is combined
            with a table, or with a gallery on a line of its own.

    Examples:
        build_wikitext("hello", "*")  # "* hello\\n"
        build_wikitext("line one\\nline two", ":")  # ": line one<br> line two\\n"
    """
    config = config or FormatterConfig()
    indentation = indentation or ""
    rest_indentation = rest_lines_indentation(indentation)

    masker = TextMasker((text or "").replace("\r\n", "\n").strip())

    def _process_template(template_code: str) -> str:
        # Tables are line-anchored; hide them before the template's lines are joined.
        template_masker = TextMasker(template_code, masker.masked_texts).mask_tables()
        return process_code(
            template_masker.text,
            indentation,
            rest_indentation,
            WrapperFlags(),
            True,
            config,
        )

    masker.mask_sensitive_code(_process_template)

    flags = find_wrapper_flags(masker.text, indentation)
    log.debug("Wrapper flags for reply: %s", flags)

    masker.text = process_code(masker.text, indentation, rest_indentation, flags, False, config)
    masker.text += "\n"

    final_indentation = indentation
    if final_indentation and MARKED_START_PATTERN.match(masker.text):
        final_indentation = rest_indentation
    masker.text = prepend_indentation(final_indentation, masker.text, config)

    return masker.unmask().text


def reply_indentation(use_bulleted: bool, nested: bool = False) -> str:
    """Indentation marker for a reply.

    Args:
        use_bulleted: Whether the reply is a bullet item instead of an indented
            paragraph.
        nested: Whether the reply sits one level under a bulleted entry, as on
            candidate lists.

    Examples:
        reply_indentation(True)  # "*"
        reply_indentation(False, nested=True)  # "*:"
    """
    if nested:
        return "**" if use_bulleted else "*:"
    return "*" if use_bulleted else ":"


def sign_text(text: str, signature: str = DEFAULT_SIGNATURE) -> str:
    """Trim `text` and append `signature` unless the text is already signed."""
    text = (text or "").strip()
    if not SIGNATURE_PATTERN.search(text):
        text += signature
    return text


def format_reply(
    text: str, indentation: str, config: FormatterConfig | None = None, sign: bool = True
) -> str:
    """Sign `text` when requested, then build its wikitext."""
    config = config or FormatterConfig()
    if sign:
        text = sign_text(text, config.signature)
    return build_wikitext(text, indentation, config)
