"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache

from .blocks import Block, BlockKind
from .errors import ValidationError

VAR_PLACEHOLDER = "_VAR_"
ATTR_PLACEHOLDER = "_ATTR_"
CONST_PLACEHOLDER = "_CONST_"
PLACEHOLDERS = frozenset({VAR_PLACEHOLDER, ATTR_PLACEHOLDER, CONST_PLACEHOLDER})

JAVA_KEYWORDS = frozenset(
    """
    abstract assert boolean break byte case catch char class const continue
    default do double else enum extends final finally float for goto if
    implements import instanceof int interface long native new package private
    protected public return short static strictfp super switch synchronized
    this throw throws transient try void volatile while var record yield
    true false null
    """.split()
)

C_FAMILY_KEYWORDS = frozenset(
    """
    auto const_cast constexpr delete dynamic_cast explicit extern friend inline
    mutable namespace noexcept nullptr operator override reinterpret_cast
    signed sizeof static_cast struct template typedef typename union unsigned
    using virtual fun val let function typeof undefined
    """.split()
)

PYTHON_KEYWORDS = frozenset(keyword.kwlist) | frozenset({"self", "cls"})

DEFAULT_KEYWORDS = JAVA_KEYWORDS | C_FAMILY_KEYWORDS | PYTHON_KEYWORDS
DEFAULT_LINE_COMMENTS = ("#", "//")


@dataclass(frozen=True, slots=True)
class NormalizationConfig:
    normalize_names: bool = True
    normalize_attributes: bool = True
    normalize_constants: bool = True
    strip_comments: bool = True
    # None: every prefix in DEFAULT_LINE_COMMENTS.
    line_comments: tuple[str, ...] | None = None
    keywords: frozenset[str] = field(default=DEFAULT_KEYWORDS)


# Order matters: comments and literals must win over operators and names.
_LITERAL_AND_TOKEN_PATTERN = r"""
  | (?P<string>[rRbBfFuU]{0,2}"(?:\\.|[^"\\])*"?|[rRbBfFuU]{0,2}'(?:\\.|[^'\\])*'?)
  | (?P<number>\d[\w.]*|\.\d[\w.]*)
  | (?P<name>(?:[^\W\d]|\$)[\w$]*)
  | (?P<op>==|!=|<=|>=|&&|\|\||->|::|\+\+|--|<<|>>|\*\*|//|[^\s\w])
"""


@lru_cache(maxsize=16)
def _token_re(line_comments: tuple[str, ...]) -> re.Pattern[str]:
    comment_alts = [re.escape(prefix) + ".*" for prefix in line_comments]
    comment_alts.append(r"/\*.*?\*/")
    comment = "(?P<comment>" + "|".join(comment_alts) + ")"
    return re.compile(comment + _LITERAL_AND_TOKEN_PATTERN, re.VERBOSE)


def _tokens(text: str, cfg: NormalizationConfig) -> list[str]:
    out: list[str] = []
    prev = ""
    prefixes = (
        DEFAULT_LINE_COMMENTS if cfg.line_comments is None else cfg.line_comments
    )
    for m in _token_re(prefixes).finditer(text):
        kind = m.lastgroup
        tok = m.group()
        if kind == "comment":
            if cfg.strip_comments:
                continue
        elif kind in ("string", "number"):
            if cfg.normalize_constants:
                tok = CONST_PLACEHOLDER
        elif kind == "name" and tok not in PLACEHOLDERS and tok not in cfg.keywords:
            if prev == ".":
                if cfg.normalize_attributes:
                    tok = ATTR_PLACEHOLDER
            elif cfg.normalize_names:
                tok = VAR_PLACEHOLDER
        out.append(tok)
        prev = tok
    return out


def normalize_line(text: str, cfg: NormalizationConfig) -> str:
    """
    Canonical form of one source line.

    Literals become ``_CONST_``, non-keyword names ``_VAR_``, names after a
    dot ``_ATTR_``; comments are dropped and tokens are joined by single
    spaces. Applying it twice gives the same result as applying it once.
    """
    return " ".join(_tokens(text, cfg))


def normalize_content(
    content: Mapping[int, str], cfg: NormalizationConfig
) -> dict[int, str]:
    return {lineno: normalize_line(text, cfg) for lineno, text in content.items()}


def normalize_block(block: Block, cfg: NormalizationConfig) -> Block:
    if block.kind is BlockKind.TYPE:
        raise ValidationError("Type blocks are not normalized")
    return block.with_normalized(normalize_content(block.content, cfg))
