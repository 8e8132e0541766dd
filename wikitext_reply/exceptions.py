"""Package-specific exception types."""

from __future__ import annotations


class FormattingError(ValueError):
    """Base class for formatting-related errors.

    Represents errors encountered while turning reply text into wikitext.
    """


class UnsupportedCombinationError(FormattingError):
    """Raised when content cannot be rendered under the requested indentation.

    Numbered-list replies cannot carry tables, nor a gallery on a line of its
    own, without breaking the numbering.

    Args:
        code: Machine-readable reason, ``"numberedList-table"`` or
            ``"numberedList"``.
    """

    TABLE = "numberedList-table"
    GALLERY = "numberedList"

    def __init__(self, code: str):
        self.code = code
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Unsupported combination of content and indentation: {self.code}"
