"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Iterator, Mapping

from .blocks import BlockKind
from .errors import ExtractionError
from .extractor import line_map_from_source, require_loop_kind, slice_lines

_TYPE_DECL_RE = re.compile(r"\b(?:class|interface|enum|record|struct)\s+[A-Za-z_]\w*")
_NESTED_TYPE_RE = re.compile(r"\b(?:class|interface|enum|record|struct)\b")
_LOOP_RE = re.compile(r"\b(for|while)\b")
_LOOP_KEYWORDS = {"for": BlockKind.FOR_LOOP, "while": BlockKind.WHILE_LOOP}
_CONTROL_HEAD_RE = re.compile(r"^(?:if|for|while|switch|catch|synchronized|do|try)\b")
_PAREN_HEADS = frozenset({"for", "while", "if", "switch", "synchronized"})
_WORD_RE = re.compile(r"[A-Za-z_$][\w$]*")


def mask_source(text: str) -> str:
    """
    Blank out comments and string literals, keeping offsets and newlines.

    Braces inside ``"{"`` or ``// }`` then no longer disturb brace matching.
    """
    out = list(text)
    n = len(text)

    def _blank(start: int, end: int) -> None:
        for k in range(start, end):
            if out[k] != "\n":
                out[k] = " "

    i = 0
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if ch == "/" and nxt == "/":
            j = text.find("\n", i)
            j = n if j == -1 else j
            _blank(i, j)
            i = j
        elif ch == "/" and nxt == "*":
            j = text.find("*/", i + 2)
            j = n if j == -1 else j + 2
            _blank(i, j)
            i = j
        elif ch in "\"'`":
            j = i + 1
            while j < n and text[j] != ch:
                if text[j] == "\n" and ch != "`":
                    break
                if text[j] == "\\":
                    j += 1
                j += 1
            j = min(j + 1, n)
            _blank(i, j)
            i = j
        else:
            i += 1
    return "".join(out)


class _Fragment:
    __slots__ = ("first", "line_starts", "text")

    def __init__(self, lines: Mapping[int, str]) -> None:
        if not lines:
            raise ExtractionError("Cannot scan an empty fragment")
        self.first = min(lines)
        raw = [lines.get(n, "") for n in range(self.first, max(lines) + 1)]
        self.text = mask_source("\n".join(raw))
        self.line_starts = [0]
        for row in raw[:-1]:
            self.line_starts.append(self.line_starts[-1] + len(row) + 1)

    def line_of(self, pos: int) -> int:
        return bisect_right(self.line_starts, pos) - 1 + self.first

    def skip_ws(self, pos: int) -> int:
        while pos < len(self.text) and self.text[pos].isspace():
            pos += 1
        return pos

    def match(self, pos: int, open_ch: str, close_ch: str) -> int:
        """Offset of the bracket closing the one at ``pos``, or -1."""
        depth = 0
        for k in range(pos, len(self.text)):
            ch = self.text[k]
            if ch == open_ch:
                depth += 1
            elif ch == close_ch:
                depth -= 1
                if depth == 0:
                    return k
        return -1

    def iter_type_bodies(self) -> Iterator[tuple[int, int, int]]:
        """Yield ``(decl_start, open_brace, close_brace)`` for top-level types."""
        depth_at = 0
        scanned = 0
        for m in _TYPE_DECL_RE.finditer(self.text):
            depth_at += self.text.count("{", scanned, m.start())
            depth_at -= self.text.count("}", scanned, m.start())
            scanned = m.start()
            if depth_at != 0:
                continue
            brace = self.text.find("{", m.end())
            semi = self.text.find(";", m.end())
            if brace == -1 or (semi != -1 and semi < brace):
                continue
            close = self.match(brace, "{", "}")
            if close == -1:
                raise ExtractionError(
                    f"Unbalanced braces in type declaration at line "
                    f"{self.line_of(m.start())}"
                )
            yield m.start(), brace, close


def _word_at(text: str, pos: int) -> str:
    m = _WORD_RE.match(text, pos)
    return m.group() if m else ""


def _simple_statement_end(frag: _Fragment, pos: int) -> int:
    depth = 0
    for k in range(pos, len(frag.text)):
        ch = frag.text[k]
        if ch in "({[":
            depth += 1
        elif ch in ")}]":
            depth -= 1
            if depth < 0:
                return -1
        elif ch == ";" and depth == 0:
            return k
    return -1


def _paren_end(frag: _Fragment, pos: int) -> int:
    paren = frag.skip_ws(pos)
    if paren >= len(frag.text) or frag.text[paren] != "(":
        return -1
    return frag.match(paren, "(", ")")


def _statement_end(frag: _Fragment, pos: int) -> int:
    """
    Offset of the last character of the statement starting at ``pos``, or -1.

    Control statements are followed through their bodies, so a braceless
    loop whose body is an ``if`` block or another loop ends where that body
    ends.
    """
    text = frag.text
    pos = frag.skip_ws(pos)
    if pos >= len(text):
        return -1
    if text[pos] == "{":
        return frag.match(pos, "{", "}")

    word = _word_at(text, pos)
    after_word = pos + len(word)
    if word in _PAREN_HEADS:
        close = _paren_end(frag, after_word)
        if close == -1:
            return -1
        end = _statement_end(frag, close + 1)
        if word == "if" and end != -1:
            nxt = frag.skip_ws(end + 1)
            if _word_at(text, nxt) == "else":
                return _statement_end(frag, nxt + len("else"))
        return end
    if word == "do":
        body_end = _statement_end(frag, after_word)
        if body_end == -1:
            return -1
        return _simple_statement_end(frag, body_end + 1)
    if word == "try":
        body = frag.skip_ws(after_word)
        if body < len(text) and text[body] == "(":
            body = _paren_end(frag, body) + 1
        end = _statement_end(frag, body) if body > 0 else -1
        while end != -1:
            nxt = frag.skip_ws(end + 1)
            handler = _word_at(text, nxt)
            if handler == "catch":
                close = _paren_end(frag, nxt + len(handler))
                end = _statement_end(frag, close + 1) if close != -1 else -1
            elif handler == "finally":
                end = _statement_end(frag, nxt + len(handler))
            else:
                break
        return end
    return _simple_statement_end(frag, pos)


def _is_method_header(header: str) -> bool:
    flat = " ".join(header.split())
    if "(" not in flat or ")" not in flat:
        return False
    if _NESTED_TYPE_RE.search(flat) or _CONTROL_HEAD_RE.match(flat):
        return False
    head, _, _ = flat.partition("(")
    tail = flat[flat.rfind(")") + 1 :]
    if "=" in head or "new " in head:
        return False
    return not any(tok in tail for tok in ("=", "->", ";"))


class BraceBlockExtractor:
    """Block boundaries for Java and other brace-delimited languages."""

    __slots__ = ()

    comment_prefixes = ("//",)

    def class_span(self, source: str) -> dict[int, str]:
        lines = line_map_from_source(source)
        if not lines:
            raise ExtractionError("Empty source")
        frag = _Fragment(lines)
        for decl_start, _, close in frag.iter_type_bodies():
            return slice_lines(lines, frag.line_of(decl_start), frag.line_of(close))
        raise ExtractionError("No type declaration found")

    def method_spans(self, class_lines: Mapping[int, str]) -> list[dict[int, str]]:
        frag = _Fragment(class_lines)
        body = next(frag.iter_type_bodies(), None)
        if body is None:
            raise ExtractionError("Fragment does not hold a type declaration")
        _, open_brace, close_brace = body

        spans: list[dict[int, str]] = []
        text = frag.text
        boundary = open_brace
        pos = open_brace + 1
        while pos < close_brace:
            ch = text[pos]
            if ch == "{":
                end = frag.match(pos, "{", "}")
                if end == -1:
                    break
                header = text[boundary + 1 : pos]
                if _is_method_header(header):
                    lead = len(header) - len(header.lstrip())
                    start_line = frag.line_of(boundary + 1 + lead)
                    spans.append(
                        slice_lines(class_lines, start_line, frag.line_of(end))
                    )
                boundary = end
                pos = end + 1
                continue
            if ch in ";}":
                boundary = pos
            pos += 1
        return spans

    def loop_spans(
        self, block_lines: Mapping[int, str], kind: BlockKind
    ) -> list[dict[int, str]]:
        loop_kind = require_loop_kind(kind)
        frag = _Fragment(block_lines)
        text = frag.text

        spans: list[dict[int, str]] = []
        covered = -1
        for m in _LOOP_RE.finditer(text):
            if m.start() < covered:
                continue
            paren = frag.skip_ws(m.end())
            if paren >= len(text) or text[paren] != "(":
                continue
            close_paren = frag.match(paren, "(", ")")
            if close_paren == -1:
                continue
            nxt = frag.skip_ws(close_paren + 1)
            if nxt >= len(text) or text[nxt] == ";":
                # do { } while (...); or an empty loop body
                continue
            end = _statement_end(frag, nxt)
            if end == -1:
                continue

            # The block's own loop header: keep scanning inside it.
            if not text[: m.start()].strip():
                continue

            covered = end
            if _LOOP_KEYWORDS[m.group(1)] is loop_kind:
                spans.append(
                    slice_lines(
                        block_lines, frag.line_of(m.start()), frag.line_of(end)
                    )
                )
        return spans
