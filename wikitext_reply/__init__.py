"""
wikitext-reply: Reply formatting for threaded wiki discussions.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    wikitext-reply --bulleted reply.txt

Library Usage:
    from wikitext_reply import build_wikitext

    wikitext = build_wikitext("Support, well sourced.", "*")
    # "* Support, well sourced.\\n"
"""

from .builder import (
    build_wikitext,
    format_reply,
    reply_indentation,
    rest_lines_indentation,
    sign_text,
)
from .config import ConfigError, FormatterConfig
from .exceptions import FormattingError, UnsupportedCombinationError
from .lists import build_list_tree, list_markup_to_tags, render_list_tree
from .masker import TextMasker
from .models import ListLine, ListNode, WrapperFlags
from .reflow import find_wrapper_flags, prepend_indentation, process_code

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "build_wikitext",
    "format_reply",
    "process_code",
    "find_wrapper_flags",
    "list_markup_to_tags",
    "build_list_tree",
    "render_list_tree",
    "TextMasker",
    # Utilities
    "prepend_indentation",
    "reply_indentation",
    "rest_lines_indentation",
    "sign_text",
    # Data models
    "FormatterConfig",
    "ListLine",
    "ListNode",
    "WrapperFlags",
    # Exceptions
    "ConfigError",
    "FormattingError",
    "UnsupportedCombinationError",
    # Version
    "__version__",
]
