"""Constants used across the wikitext-reply package."""

from __future__ import annotations

import re

# Mask tokens. The delimiters never occur in ordinary discussion text.
MASK_PREFIX = "<<WIKIREPLY_MASK_"
MASK_SUFFIX = "_WIKIREPLY>>"
MASK_ANY_PATTERN = re.compile(
    rf"{re.escape(MASK_PREFIX)}(\d+)(?:_\w+(?:_\d+)?)?{re.escape(MASK_SUFFIX)}"
)

# Mask kinds
KIND_BLOCK = "block"
KIND_GALLERY = "gallery"
KIND_INLINE = "inline"
KIND_TEMPLATE = "template"
KIND_TABLE = "table"

TABLE_TOKEN_PATTERN = rf"{re.escape(MASK_PREFIX)}\d+_{KIND_TABLE}{re.escape(MASK_SUFFIX)}"
GALLERY_TOKEN_PATTERN = rf"{re.escape(MASK_PREFIX)}\d+_{KIND_GALLERY}{re.escape(MASK_SUFFIX)}"
BLOCK_TOKEN_PATTERN = rf"{re.escape(MASK_PREFIX)}\d+_{KIND_BLOCK}{re.escape(MASK_SUFFIX)}"

# A line that holds nothing but a gallery token.
GALLERY_LINE_PATTERN = re.compile(rf"^{GALLERY_TOKEN_PATTERN}$", re.MULTILINE)

# Tags masked before templates, by kind
BLOCK_TAGS = ("pre", "source", "syntaxhighlight")
GALLERY_TAGS = ("gallery", "poem")
INLINE_TAGS = ("nowiki",)

# List markup
LIST_PREFIXES = ":;*#"
LIST_TAGS = {":": "dl", ";": "dl", "*": "ul", "#": "ol"}
ITEM_TAGS = {":": "dd", ";": "dt", "*": "li", "#": "li"}

# Elements that start or end a block; no <br> is needed next to them.
POPULAR_NOT_INLINE_ELEMENTS = (
    "BLOCKQUOTE",
    "CAPTION",
    "CENTER",
    "DD",
    "DIV",
    "DL",
    "DT",
    "FIGURE",
    "FIGCAPTION",
    "FORM",
    "H1",
    "H2",
    "H3",
    "H4",
    "H5",
    "H6",
    "HR",
    "INPUT",
    "LI",
    "LINK",
    "OL",
    "P",
    "PRE",
    "SECTION",
    "STYLE",
    "TABLE",
    "TBODY",
    "TD",
    "TFOOT",
    "TH",
    "THEAD",
    "TR",
    "UL",
)
PNIE_PATTERN = f"(?:{'|'.join(POPULAR_NOT_INLINE_ELEMENTS)})"

# Submission defaults
DEFAULT_SIGNATURE = "--~~~~"
SIGNATURE_PATTERN = re.compile(r"--~{3,}")
