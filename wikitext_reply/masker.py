"""Reversible masking of wikitext regions that later passes must not touch."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from .constants import (
    BLOCK_TAGS,
    GALLERY_TAGS,
    INLINE_TAGS,
    KIND_BLOCK,
    KIND_GALLERY,
    KIND_INLINE,
    KIND_TABLE,
    KIND_TEMPLATE,
    MASK_ANY_PATTERN,
    MASK_PREFIX,
    MASK_SUFFIX,
)

log = logging.getLogger(__name__)

CLOSED_TABLE_PATTERN = re.compile(r"^(:* *)(\{\|.*?\n\|\})", re.MULTILINE | re.DOTALL)
OPEN_TABLE_PATTERN = re.compile(r"^(:* *)(\{\|.*\n\|)", re.MULTILINE | re.DOTALL)
TEMPLATE_LENGTH_PATTERN = re.compile(
    rf"{re.escape(MASK_PREFIX)}\d+_{KIND_TEMPLATE}_(\d+){re.escape(MASK_SUFFIX)}"
)

TEMPLATE_START = "{{"
TEMPLATE_END = "}}"


def generate_tags_pattern(tags: Sequence[str]) -> re.Pattern[str]:
    """Build a pattern matching paired tags with the given names.

    The opening tag may carry attributes. Same-named tags do not nest, so the
    body is matched lazily up to the first closing tag.

    Args:
        tags: Tag names or regular-expression fragments matching tag names.

    Returns:
        re.Pattern[str]: Case-insensitive pattern; group 2 is the tag name.

    Examples:
        generate_tags_pattern(["pre", "source"]).search("<pre>x</pre>")
    """
    tags_joined = "|".join(tags)
    return re.compile(
        rf"(<({tags_joined})(?: [\w ]+(?:=[^<>]+?)?| *)>)(.*?)(</\2>)",
        re.IGNORECASE | re.DOTALL,
    )


def make_token(index: int, kind: str | None = None, length: int | None = None) -> str:
    """Render the placeholder token for a stored text.

    Examples:
        make_token(3, "template")  # "<<WIKIREPLY_MASK_3_template_WIKIREPLY>>"
    """
    kind_suffix = f"_{kind}" if kind else ""
    length_suffix = f"_{length}" if kind and length is not None else ""
    return f"{MASK_PREFIX}{index}{kind_suffix}{length_suffix}{MASK_SUFFIX}"


class TextMasker:
    """Replace protected substrings with placeholder tokens and restore them.

    Stored texts are indexed from 1. A stored text may itself contain tokens
    created earlier, so restoring repeats until nothing is left to replace.
    Every masking method returns the instance so calls can be chained.

    Attributes:
        text: Current text with masked regions replaced by tokens.
        masked_texts: Original substrings, in masking order.
    """

    def __init__(self, text: str, masked_texts: list[str] | None = None):
        self.text = text
        self.masked_texts = masked_texts if masked_texts is not None else []

    def _store(self, original: str) -> int:
        self.masked_texts.append(original)
        return len(self.masked_texts)

    def mask(
        self, pattern: re.Pattern[str] | str, kind: str | None = None, use_groups: bool = False
    ) -> TextMasker:
        """Mask every match of `pattern`.

        Args:
            pattern: Pattern whose matches are masked.
            kind: Optional kind embedded in the token.
            use_groups: When True, group 1 is kept in place as a prefix and only
                group 2 is masked.

        Returns:
            TextMasker: This instance.
        """

        def _replace(match: re.Match[str]) -> str:
            if use_groups:
                pre_text = match.group(1) or ""
                to_mask = match.group(2) or match.group(0)
            else:
                pre_text = ""
                to_mask = match.group(0)
            return pre_text + make_token(self._store(to_mask), kind)

        self.text = re.sub(pattern, _replace, self.text)
        return self

    def unmask_text(self, text: str, kind: str | None = None) -> str:
        """Restore the tokens of one kind (or of every kind) in `text`.

        Untyped tokens are restored together with any requested kind. Tokens
        whose index has no stored text are left in place.

        Args:
            text: Text containing tokens.
            kind: Kind to restore; all kinds when omitted.

        Returns:
            str: Text with the selected tokens replaced by their originals.
        """
        if kind:
            pattern = re.compile(
                rf"{re.escape(MASK_PREFIX)}(\d+)(?:_{re.escape(kind)}(?:_\d+)?)?"
                rf"{re.escape(MASK_SUFFIX)}"
            )
        else:
            pattern = MASK_ANY_PATTERN

        def _restore(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if 1 <= index <= len(self.masked_texts):
                return self.masked_texts[index - 1]
            log.debug("Leaving unresolved mask token %s in place", match.group(0))
            return match.group(0)

        # Each pass peels one level of nesting; stored texts only reference
        # earlier entries, so the depth is bounded by the store size.
        for _ in range(len(self.masked_texts) + 1):
            restored = pattern.sub(_restore, text)
            if restored == text:
                break
            text = restored

        return text

    def unmask(self, kind: str | None = None) -> TextMasker:
        """Restore the tokens of `kind` (or all tokens) in `self.text`."""
        self.text = self.unmask_text(self.text, kind)
        return self

    def mask_templates_recursively(
        self, handler: Callable[[str], str] | None = None, add_lengths: bool = False
    ) -> TextMasker:
        """Mask ``{{...}}`` constructs, innermost first.

        Openers are tracked on an explicit stack of offsets. An opener without
        a closer extends to the end of the text; a closer with no pending
        opener swallows everything before it. Neither case raises.

        Args:
            handler: Optional transform applied to each template's code before
                it is stored.
            add_lengths: When True, tokens also record the length of the stored
                code, counting inner templates at their own recorded lengths.

        Returns:
            TextMasker: This instance.
        """
        pos = 0
        stack: list[int] = []

        while True:
            left = self.text.find(TEMPLATE_START, pos)
            right = self.text.find(TEMPLATE_END, pos)

            if left != -1 and (right == -1 or left < right):
                stack.append(left)
                pos = left + len(TEMPLATE_START)
                continue

            if stack:
                left = stack.pop()
            elif right != -1:
                log.debug("Unbalanced template closer at offset %d, masking from start", right)
                left = 0
            else:
                break

            if right == -1:
                log.debug("Unclosed template opener at offset %d, masking to end", left)
                right = len(self.text)
            else:
                right += len(TEMPLATE_END)

            template = self.text[left:right]
            if handler:
                template = handler(template)

            length = None
            if add_lengths:
                length = len(
                    TEMPLATE_LENGTH_PATTERN.sub(lambda match: " " * int(match.group(1)), template)
                )

            token = make_token(self._store(template), KIND_TEMPLATE, length)
            self.text = self.text[:left] + token + self.text[right:]
            pos = left

        return self

    def mask_tags(self, tags: Sequence[str], kind: str) -> TextMasker:
        """Mask paired tags with the given names as `kind`."""
        return self.mask(generate_tags_pattern(tags), kind)

    def mask_tables(self) -> TextMasker:
        """Mask closed tables, then a table left open at the end of the text."""
        return self.mask(CLOSED_TABLE_PATTERN, KIND_TABLE, use_groups=True).mask(
            OPEN_TABLE_PATTERN, KIND_TABLE, use_groups=True
        )

    def mask_sensitive_code(self, template_handler: Callable[[str], str] | None = None) -> TextMasker:
        """Mask blocks, galleries, nowiki, templates and tables, in that order.

        Tags go first so template scanning never sees their contents. Tables go
        last because their line-anchored patterns need templates collapsed to
        single-line tokens.
        """
        return (
            self.mask_tags(BLOCK_TAGS, KIND_BLOCK)
            .mask_tags(GALLERY_TAGS, KIND_GALLERY)
            .mask_tags(INLINE_TAGS, KIND_INLINE)
            .mask_templates_recursively(template_handler)
            .mask_tables()
        )
