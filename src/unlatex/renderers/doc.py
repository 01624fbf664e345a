#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/renderers/doc.py
"""Layout documents and the width-aware line breaker.

The LaTeX printer does not write text directly. It builds a *document* made
of the small set of layout primitives below, and :func:`print_doc` decides
where lines break. This is the classic Wadler/Prettier design:

- a ``str`` is printed as-is and must not contain newlines
- a ``list`` concatenates its parts
- :class:`Line` is a space (or nothing, for soft lines) when its enclosing
  group is flat, and a newline plus indentation when it is broken; hard
  lines always break
- :class:`Indent` adds one indentation level to the lines inside it
- :class:`Group` is printed flat when everything up to the next possible
  line break fits in the remaining width, and broken otherwise
- :class:`Fill` alternates contents and separators and only breaks a
  separator when the next content would not fit
- :class:`Verbatim` is emitted byte-for-byte, newlines included

Examples
--------
>>> words = ["lorem", "ipsum", "dolor", "sit", "amet"]
>>> print(print_doc(fill(join(LINE, words)), width=12))
lorem ipsum
dolor sit
amet

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Union, cast


@dataclass(frozen=True)
class Line:
    """A possible line break.

    Parameters
    ----------
    hard : bool, default False
        Always break
    soft : bool, default False
        Print nothing (instead of a space) when not broken

    """

    hard: bool = False
    soft: bool = False


@dataclass(frozen=True)
class Indent:
    """Indent the lines started inside ``contents`` by one level."""

    contents: Doc


@dataclass
class Group:
    """Print ``contents`` flat if it fits, broken otherwise.

    ``should_break`` forces the broken layout; :func:`propagate_breaks` sets
    it on every group that contains a hard line.
    """

    contents: Doc
    should_break: bool = False


@dataclass(frozen=True)
class Fill:
    """Alternating ``[content, separator, content, ...]`` filled greedily."""

    parts: tuple[Doc, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Verbatim:
    """Raw text printed unchanged; never re-indented or trimmed.

    Blanks at the end of a verbatim piece survive line breaks, which is how
    a control space (``\\ ``) keeps its space at the end of a line.
    """

    text: str


Doc = Union[str, list, Line, Indent, Group, Fill, Verbatim]

LINE = Line()
SOFTLINE = Line(soft=True)
HARDLINE = Line(hard=True)


def group(contents: Doc, should_break: bool = False) -> Group:
    return Group(contents, should_break)


def indent(contents: Doc) -> Indent:
    return Indent(contents)


def fill(parts: Sequence[Doc]) -> Fill:
    return Fill(tuple(parts))


def join(separator: Doc, docs: Sequence[Doc]) -> list:
    """Interleave ``docs`` with ``separator``."""
    result: list = []
    for i, doc in enumerate(docs):
        if i:
            result.append(separator)
        result.append(doc)
    return result


def propagate_breaks(doc: Doc) -> bool:
    """Mark every group that contains a hard line as broken.

    Returns
    -------
    bool
        True if ``doc`` contains a hard line

    """
    # found[-1] collects hard lines seen inside the innermost open group
    found = [False]
    stack: list[tuple[Doc, bool]] = [(doc, False)]
    while stack:
        current, closing = stack.pop()
        if closing:
            closed = cast(Group, current)
            if found.pop():
                closed.should_break = True
            found[-1] = found[-1] or closed.should_break
        elif isinstance(current, str):
            continue
        elif isinstance(current, Line):
            found[-1] = found[-1] or current.hard
        elif isinstance(current, Verbatim):
            found[-1] = found[-1] or "\n" in current.text
        elif isinstance(current, Indent):
            stack.append((current.contents, False))
        elif isinstance(current, Group):
            found.append(False)
            stack.append((current, True))
            stack.append((current.contents, False))
        else:
            parts = current.parts if isinstance(current, Fill) else current
            stack.extend((part, False) for part in parts)
    return found[0]


class _Mode(Enum):
    BREAK = "break"
    FLAT = "flat"


@dataclass(frozen=True)
class _FillTail:
    """The parts of a Fill from ``start`` on, without copying them."""

    parts: tuple[Doc, ...]
    start: int


_Command = tuple[int, _Mode, Union[Doc, _FillTail]]


def _fits(next_cmd: _Command, rest_cmds: list[_Command], width: int, must_be_flat: bool) -> bool:
    """Return True if the text up to the next line break fits in ``width``."""
    rest_index = len(rest_cmds)
    cmds = [next_cmd]
    while width >= 0:
        if not cmds:
            if rest_index == 0:
                return True
            rest_index -= 1
            cmds.append(rest_cmds[rest_index])
            continue

        ind, mode, doc = cmds.pop()
        if isinstance(doc, str):
            width -= len(doc)
        elif isinstance(doc, list):
            for part in reversed(doc):
                cmds.append((ind, mode, part))
        elif isinstance(doc, Indent):
            cmds.append((ind + 1, mode, doc.contents))
        elif isinstance(doc, Verbatim):
            newline = doc.text.find("\n")
            if newline != -1:
                return width - newline >= 0
            width -= len(doc.text)
        elif isinstance(doc, Group):
            if must_be_flat and doc.should_break:
                return False
            cmds.append((ind, _Mode.BREAK if doc.should_break else mode, doc.contents))
        elif isinstance(doc, (Fill, _FillTail)):
            parts = doc.parts
            start = doc.start if isinstance(doc, _FillTail) else 0
            for i in range(len(parts) - 1, start - 1, -1):
                cmds.append((ind, mode, parts[i]))
        elif isinstance(doc, Line):
            if mode is _Mode.BREAK or doc.hard:
                return True
            if not doc.soft:
                width -= 1
    return False


class DocPrinter:
    """Render a layout document to text.

    Parameters
    ----------
    width : int
        Target line width
    use_tabs : bool, default False
        Indent with one tab per level
    tab_width : int, default 2
        Spaces per level; also the width a tab counts for

    """

    def __init__(self, width: int, use_tabs: bool = False, tab_width: int = 2):
        self.width = width
        self.use_tabs = use_tabs
        self.tab_width = tab_width

    def _indentation(self, level: int) -> str:
        return "\t" * level if self.use_tabs else " " * (level * self.tab_width)

    def print(self, doc: Doc) -> str:
        """Lay out ``doc`` and return the text."""
        propagate_breaks(doc)

        out: list[str] = []
        protected = 0  # out[:protected] is never trimmed
        pos = 0
        cmds: list[_Command] = [(0, _Mode.BREAK, doc)]

        while cmds:
            ind, mode, current = cmds.pop()

            if isinstance(current, str):
                out.append(current)
                pos += len(current)
            elif isinstance(current, list):
                for part in reversed(current):
                    cmds.append((ind, mode, part))
            elif isinstance(current, Verbatim):
                out.append(current.text)
                protected = len(out)
                newline = current.text.rfind("\n")
                pos = len(current.text) - newline - 1 if newline != -1 else pos + len(current.text)
            elif isinstance(current, Indent):
                cmds.append((ind + 1, mode, current.contents))
            elif isinstance(current, Group):
                if mode is _Mode.FLAT and not current.should_break:
                    cmds.append((ind, _Mode.FLAT, current.contents))
                else:
                    flat_cmd: _Command = (ind, _Mode.FLAT, current.contents)
                    if not current.should_break and _fits(flat_cmd, cmds, self.width - pos, False):
                        cmds.append(flat_cmd)
                    else:
                        cmds.append((ind, _Mode.BREAK, current.contents))
            elif isinstance(current, (Fill, _FillTail)):
                self._fill(current, ind, mode, cmds, self.width - pos)
            elif isinstance(current, Line):
                if mode is _Mode.FLAT and not current.hard:
                    if not current.soft:
                        out.append(" ")
                        pos += 1
                else:
                    _trim(out, protected)
                    out.append("\n" + self._indentation(ind))
                    pos = ind * self.tab_width

        _trim(out, protected)
        return "".join(out)

    @staticmethod
    def _fill(doc: Union[Fill, _FillTail], ind: int, mode: _Mode, cmds: list[_Command], remaining: int) -> None:
        parts = doc.parts
        start = doc.start if isinstance(doc, _FillTail) else 0
        count = len(parts) - start
        if count <= 0:
            return

        content = parts[start]
        content_flat: _Command = (ind, _Mode.FLAT, content)
        content_break: _Command = (ind, _Mode.BREAK, content)
        content_fits = _fits(content_flat, [], remaining, True)
        if count == 1:
            cmds.append(content_flat if content_fits else content_break)
            return

        whitespace = parts[start + 1]
        whitespace_flat: _Command = (ind, _Mode.FLAT, whitespace)
        whitespace_break: _Command = (ind, _Mode.BREAK, whitespace)
        if count == 2:
            if content_fits:
                cmds.extend((whitespace_flat, content_flat))
            else:
                cmds.extend((whitespace_break, content_break))
            return

        rest: _Command = (ind, mode, _FillTail(parts, start + 2))
        pair_flat: _Command = (ind, _Mode.FLAT, [content, whitespace, parts[start + 2]])
        if _fits(pair_flat, [], remaining, True):
            cmds.extend((rest, whitespace_flat, content_flat))
        elif content_fits:
            cmds.extend((rest, whitespace_break, content_flat))
        else:
            cmds.extend((rest, whitespace_break, content_break))


def _trim(out: list[str], protected: int) -> None:
    """Remove trailing blanks from the current line."""
    while len(out) > protected:
        stripped = out[-1].rstrip(" \t")
        if stripped:
            out[-1] = stripped
            return
        out.pop()


def print_doc(doc: Doc, width: int = 80, use_tabs: bool = False, tab_width: int = 2) -> str:
    """Render a layout document to text.

    Parameters
    ----------
    doc : Doc
        Document to print
    width : int, default 80
        Target line width
    use_tabs : bool, default False
        Indent with tabs
    tab_width : int, default 2
        Spaces per indentation level

    Returns
    -------
    str
        The laid-out text, with trailing blanks removed at every line break
        and at the end

    """
    return DocPrinter(width, use_tabs, tab_width).print(doc)


def print_flat(doc: Doc) -> str:
    """Render ``doc`` on as few lines as possible (unbounded width)."""
    return DocPrinter(sys.maxsize).print(doc)
