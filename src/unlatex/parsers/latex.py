#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/parsers/latex.py
r"""LaTeX to AST parser.

This module converts LaTeX source into the node tree defined in
:mod:`unlatex.ast.nodes`. The parser never raises on malformed input: an
unclosed group, an ``\end`` without a matching ``\begin`` or a missing
argument is repaired in a predictable way, recorded as a
:class:`ParseDegradation` and logged at DEBUG level.

Parsing is driven by an explicit stack of frames (root, group, argument,
environment, math) rather than by recursion, so arbitrarily deep nesting is
handled without hitting the interpreter's recursion limit.

Examples
--------
>>> parser = LatexParser()
>>> root = parser.parse(r"\emph{hi} $x^2$")
>>> [type(node).__name__ for node in root.content]
['Macro', 'Whitespace', 'InlineMath']

"""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union, cast

from unlatex.ast.nodes import (
    Argument,
    Comment,
    DisplayMath,
    Environment,
    Group,
    InlineMath,
    Macro,
    MathEnvironment,
    Node,
    Parbreak,
    Root,
    Text,
    Verb,
    VerbatimEnvironment,
    Whitespace,
)
from unlatex.constants import WHITESPACE_CHARS
from unlatex.exceptions import InvalidOptionsError
from unlatex.options.latex import LatexParserOptions
from unlatex.parsers.lexer import TokenStream, advance_position, position_at, tokenize
from unlatex.parsers.macros import DEFAULT_ENVIRONMENT, ArgumentParsingMode, MacroSignature
from unlatex.parsers.tokens import Position, Span, Token, TokenKind

logger = logging.getLogger(__name__)

# Environment name after \begin or \end
_ENV_NAME_RE = re.compile(r"[ \t]*\{([^{}\\%$\n]*)\}")

_MATH_OPENERS = {"$": "$", "$$": "$$", "\\(": "\\)", "\\[": "\\]"}

_SCRIPT_TEXT_KINDS = (TokenKind.TEXT, TokenKind.PARAMETER)
_NOT_SCRIPT_ARGUMENTS = frozenset({"begin", "end", "verb", "(", ")", "[", "]"})


class DegradationKind(Enum):
    """Category of a recovery made while parsing malformed input."""

    UNCLOSED_GROUP = "unclosed_group"
    UNCLOSED_ENVIRONMENT = "unclosed_environment"
    UNCLOSED_MATH = "unclosed_math"
    UNCLOSED_VERBATIM = "unclosed_verbatim"
    UNMATCHED_CLOSE_BRACE = "unmatched_close_brace"
    UNMATCHED_END = "unmatched_end"
    UNKNOWN_MACRO = "unknown_macro"
    MISSING_ARGUMENT = "missing_argument"


@dataclass(frozen=True)
class ParseDegradation:
    """A non-fatal deviation from well-formed input.

    Parameters
    ----------
    kind : DegradationKind
        What was repaired
    message : str
        Human-readable description
    position : Position or None
        Where in the source the problem was detected

    """

    kind: DegradationKind
    message: str
    position: Optional[Position] = None


class _FrameKind(Enum):
    ROOT = "root"
    GROUP = "group"
    ARGUMENT = "argument"
    OPTIONAL = "optional"
    ENVIRONMENT = "environment"
    MATH = "math"


@dataclass
class _Frame:
    """An open container whose children are being collected."""

    kind: _FrameKind
    node: Union[Root, Group, Argument, Environment, MathEnvironment, InlineMath, DisplayMath]
    math: bool
    start: Position
    closer: str = ""  # math closing delimiter, or environment name

    @property
    def content(self) -> list[Node]:
        return self.node.content


_ArgumentOwner = Union[Macro, Environment, MathEnvironment, VerbatimEnvironment]


@dataclass
class _ArgumentsFrame:
    """Pending arguments of a macro or environment.

    ``on_close`` runs whenever the frame ends, also when it is closed early at
    the end of input; ``on_done`` runs only after all arguments were read.
    """

    owner: _ArgumentOwner
    letters: list[str]
    math: bool
    verbatim: bool
    start: Position
    name_end: Position
    on_done: Optional[Callable[[Position], None]] = field(default=None, repr=False)
    on_close: Optional[Callable[[Position], None]] = field(default=None, repr=False)


_StackEntry = Union[_Frame, _ArgumentsFrame]


class _TokenCursor:
    """Token lookahead buffer that can restart the lexer at any offset.

    Raw spans (``\\verb``, verbatim environments and arguments) are read
    straight from the source; afterwards the lexer is restarted behind them.
    """

    def __init__(self, source: str, start: int = 0):
        self.source = source
        self._tokens = iter(tokenize(source, start))
        self._buffer: deque[Token] = deque()

    def peek(self, k: int = 0) -> Optional[Token]:
        while len(self._buffer) <= k:
            token = next(self._tokens, None)
            if token is None:
                return None
            self._buffer.append(token)
        return self._buffer[k]

    def advance(self) -> Optional[Token]:
        if self.peek() is None:
            return None
        return self._buffer.popleft()

    def split(self, length: int) -> Token:
        """Consume the first ``length`` characters of the next (TEXT) token."""
        token = self._buffer.popleft()
        if length >= len(token.text):
            return token
        head_text = token.text[:length]
        middle = advance_position(token.position, head_text)
        self._buffer.appendleft(Token(token.kind, token.text[length:], middle, token.end))
        return Token(token.kind, head_text, token.position, middle)

    def resync(self, offset: int) -> None:
        self._tokens = iter(tokenize(self.source, offset))
        self._buffer.clear()


def _mode_is_math(mode: ArgumentParsingMode, inherited: bool) -> bool:
    if mode is ArgumentParsingMode.MATH:
        return True
    if mode is ArgumentParsingMode.TEXT:
        return False
    return inherited


def _describe(owner: _ArgumentOwner) -> str:
    if isinstance(owner, Macro):
        return f"{owner.escape_token}{owner.content}"
    return f"environment '{owner.env}'"


class LatexParser:
    r"""Parser converting LaTeX source into an AST.

    Parameters
    ----------
    options : LatexParserOptions or None, default = None
        Parser configuration; the default options use
        :data:`~unlatex.parsers.macros.DEFAULT_MACRO_TABLE`

    Attributes
    ----------
    degradations : list of ParseDegradation
        Recoveries made during the most recent parse

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not a LatexParserOptions instance

    Examples
    --------
    >>> parser = LatexParser()
    >>> root = parser.parse(r"\begin{foo} unterminated")
    >>> parser.degradations[0].kind
    <DegradationKind.UNCLOSED_ENVIRONMENT: 'unclosed_environment'>

    """

    def __init__(self, options: LatexParserOptions | None = None):
        if options is not None and not isinstance(options, LatexParserOptions):
            raise InvalidOptionsError(
                component_name="LatexParser",
                expected_type=LatexParserOptions,
                received_type=type(options),
            )
        self.options: LatexParserOptions = options or LatexParserOptions()
        self.degradations: list[ParseDegradation] = []
        self._source = ""
        self._eof = Position(1, 1, 0)
        self._cursor = _TokenCursor("")
        self._stack: list[_StackEntry] = []

    def parse(self, source: str) -> Root:
        """Parse LaTeX source into an AST.

        Parameters
        ----------
        source : str
            LaTeX source text

        Returns
        -------
        Root
            Root node spanning the complete source

        """
        return self.parse_tokens(tokenize(source))

    def parse_tokens(self, tokens: TokenStream) -> Root:
        """Parse a token stream into an AST.

        Parameters
        ----------
        tokens : TokenStream
            Tokens of a source string; raw spans are re-read from
            ``tokens.source``

        Returns
        -------
        Root
            Root node spanning from ``tokens.start`` to the end of the source

        """
        self.degradations = []
        self._source = tokens.source
        self._eof = tokens.end_position
        self._cursor = _TokenCursor(tokens.source, tokens.start)

        root = Root()
        root_start = position_at(tokens.source, tokens.start)
        self._stack = [_Frame(_FrameKind.ROOT, root, False, root_start)]

        while True:
            top = self._stack[-1]
            if isinstance(top, _ArgumentsFrame):
                self._step_arguments(top)
                continue
            token = self._cursor.peek()
            if token is None:
                break
            self._step(top, token)

        self._close_frames(0, self._eof)
        root.position = Span(root_start, self._eof)
        logger.debug("Parsed %d characters with %d degradation(s)", len(tokens.source), len(self.degradations))
        return root

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _degrade(self, kind: DegradationKind, message: str, position: Optional[Position]) -> None:
        where = f"{position.line}:{position.column}" if position is not None else "?"
        logger.debug("%s at %s: %s", kind.value, where, message)
        if self.options.record_degradations:
            self.degradations.append(ParseDegradation(kind, message, position))

    def _push(self, kind: _FrameKind, node: Node, math: bool, start: Position, closer: str = "") -> None:
        self._stack.append(_Frame(kind, node, math, start, closer))  # type: ignore[arg-type]

    def _pop_frame(self, end: Position) -> None:
        frame = cast(_Frame, self._stack.pop())
        frame.node.position = Span(frame.start, end)

    def _close_frames(self, index: int, end: Position) -> None:
        """Implicitly close every frame above ``index``, ending them at ``end``."""
        while len(self._stack) > index + 1:
            frame = self._stack.pop()
            if isinstance(frame, _ArgumentsFrame):
                frame.owner.position = Span(frame.start, end)
                if frame.on_close is not None:
                    frame.on_close(end)
                continue
            where = f"opened at line {frame.start.line}"
            if frame.kind is _FrameKind.ENVIRONMENT:
                self._degrade(
                    DegradationKind.UNCLOSED_ENVIRONMENT, f"Environment '{frame.closer}' {where} is never closed", frame.start
                )
            elif frame.kind is _FrameKind.MATH:
                self._degrade(DegradationKind.UNCLOSED_MATH, f"Math {where} is never closed", frame.start)
            else:
                self._degrade(DegradationKind.UNCLOSED_GROUP, f"Group {where} is never closed", frame.start)
            frame.node.position = Span(frame.start, end)

    def _find_math_frame(self) -> Optional[int]:
        """Index of the innermost math frame reachable through math-mode groups."""
        for index in range(len(self._stack) - 1, 0, -1):
            frame = self._stack[index]
            if isinstance(frame, _ArgumentsFrame):
                continue
            if frame.kind is _FrameKind.MATH:
                return index
            if frame.kind in (_FrameKind.GROUP, _FrameKind.ARGUMENT, _FrameKind.OPTIONAL) and frame.math:
                continue
            return None
        return None

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _step(self, frame: _Frame, token: Token) -> None:
        kind = token.kind
        cursor = self._cursor

        if kind is TokenKind.WHITESPACE:
            cursor.advance()
            frame.content.append(Parbreak(token.span) if token.newlines >= 2 else Whitespace(token.span))
        elif kind is TokenKind.COMMENT:
            self._parse_comment(frame, token)
        elif kind is TokenKind.BEGIN_GROUP:
            cursor.advance()
            group = Group()
            frame.content.append(group)
            self._push(_FrameKind.GROUP, group, frame.math, token.position)
        elif kind is TokenKind.END_GROUP:
            cursor.advance()
            if frame.kind in (_FrameKind.GROUP, _FrameKind.ARGUMENT):
                self._pop_frame(token.end)
            else:
                self._degrade(DegradationKind.UNMATCHED_CLOSE_BRACE, "Closing brace without an open group", token.position)
                frame.content.append(Text("}", token.span))
        elif kind is TokenKind.CLOSE_BRACKET and frame.kind is _FrameKind.OPTIONAL:
            cursor.advance()
            self._pop_frame(token.end)
        elif kind is TokenKind.MATH_SHIFT:
            self._parse_math_shift(frame, token)
        elif kind in (TokenKind.CONTROL_WORD, TokenKind.CONTROL_SYMBOL):
            self._parse_control(frame, token)
        elif kind in (TokenKind.SUPERSCRIPT, TokenKind.SUBSCRIPT) and frame.math:
            self._parse_script(frame, token)
        else:
            cursor.advance()
            frame.content.append(Text(token.text, token.span))

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _parse_comment(self, frame: _Frame, token: Token) -> None:
        self._cursor.advance()
        offset = token.position.offset
        line_start = self._source.rfind("\n", 0, offset) + 1
        sameline = bool(self._source[line_start:offset].strip())

        content = frame.content
        leading_whitespace = False
        if sameline and content and isinstance(content[-1], Whitespace):
            content.pop()
            leading_whitespace = True

        comment = Comment(
            token.text[1:], sameline=sameline, leading_whitespace=leading_whitespace, position=token.span
        )
        content.append(comment)

        # The comment swallows the line break and indentation that follow it
        following = self._cursor.peek()
        if following is not None and following.kind is TokenKind.WHITESPACE:
            self._cursor.advance()
            if following.newlines >= 2:
                comment.suffix_parbreak = True
                content.append(Parbreak(following.span))

    # ------------------------------------------------------------------
    # Math
    # ------------------------------------------------------------------

    def _open_math(self, frame: _Frame, delimiter: str, start: Position) -> None:
        node: Union[InlineMath, DisplayMath]
        if delimiter in ("$", "\\("):
            node = InlineMath(delimiter=delimiter)
        else:
            node = DisplayMath(delimiter=delimiter)
        frame.content.append(node)
        self._push(_FrameKind.MATH, node, True, start, _MATH_OPENERS[delimiter])

    def _close_math(self, index: int, token: Token, end: Position) -> None:
        self._close_frames(index, token.position)
        self._pop_frame(end)

    def _parse_math_shift(self, frame: _Frame, token: Token) -> None:
        self._cursor.advance()
        if not frame.math:
            self._open_math(frame, token.text, token.position)
            return

        index = self._find_math_frame()
        if index is not None:
            closer = self._stack[index].closer  # type: ignore[union-attr]
            if closer == token.text:
                self._close_math(index, token, token.end)
                return
            if closer == "$" and token.text == "$$":
                # "$$" inside inline math closes it and opens the next one
                middle = advance_position(token.position, "$")
                self._close_math(index, token, middle)
                outer = cast(_Frame, self._stack[-1])
                self._open_math(outer, "$", middle)
                return

        frame.content.append(Text(token.text, token.span))

    def _parse_script(self, frame: _Frame, token: Token) -> None:
        cursor = self._cursor
        cursor.advance()
        macro = Macro(token.text, escape_token="", position=token.span)
        frame.content.append(macro)

        following = cursor.peek()
        if following is not None and following.kind is TokenKind.WHITESPACE and following.newlines < 2:
            cursor.advance()
            following = cursor.peek()

        if following is None:
            self._degrade(DegradationKind.MISSING_ARGUMENT, f"Missing argument for {token.text}", token.position)
            return

        if following.kind is TokenKind.BEGIN_GROUP:
            self._stack.append(_ArgumentsFrame(macro, ["m"], True, False, token.position, token.end))
            return

        if following.kind in _SCRIPT_TEXT_KINDS:
            head = cast(Token, cursor.split(1) if following.kind is TokenKind.TEXT else cursor.advance())
            macro.args.append(Argument("", "", [Text(head.text, head.span)], head.span))
            macro.position = Span(token.position, head.end)
            return

        if (
            following.kind in (TokenKind.CONTROL_WORD, TokenKind.CONTROL_SYMBOL)
            and following.name not in _NOT_SCRIPT_ARGUMENTS
            and following.name not in WHITESPACE_CHARS
        ):
            cursor.advance()
            inner = Macro(following.name, position=following.span)
            argument = Argument("", "", [inner], following.span)
            macro.args.append(argument)
            macro.position = Span(token.position, following.end)
            signature = self._signature(following)
            if signature is not None and signature.arguments:

                def finish(end: Position) -> None:
                    argument.position = Span(following.position, end)
                    macro.position = Span(token.position, end)

                self._stack.append(
                    _ArgumentsFrame(
                        inner,
                        list(signature.arguments),
                        _mode_is_math(signature.parsing_mode, True),
                        signature.parsing_mode is ArgumentParsingMode.VERBATIM,
                        following.position,
                        following.end,
                        on_close=finish,
                    )
                )
            return

        self._degrade(DegradationKind.MISSING_ARGUMENT, f"Missing argument for {token.text}", token.position)

    # ------------------------------------------------------------------
    # Control sequences
    # ------------------------------------------------------------------

    def _signature(self, token: Token) -> Optional[MacroSignature]:
        signature = self.options.macro_table.macro(token.name)
        if signature is None and token.kind is TokenKind.CONTROL_WORD:
            self._degrade(DegradationKind.UNKNOWN_MACRO, f"Unknown macro {token.text}", token.position)
        return signature

    def _parse_control(self, frame: _Frame, token: Token) -> None:
        name = token.name

        if token.kind is TokenKind.CONTROL_SYMBOL and name in WHITESPACE_CHARS:
            # Control space; a backslash before a line break counts as one too
            self._cursor.advance()
            frame.content.append(Macro(" ", position=token.span))
            return
        if name == "begin":
            self._parse_begin(frame, token)
            return
        if name == "end":
            self._parse_end(frame, token)
            return
        if name == "verb":
            self._parse_verb(frame, token)
            return
        if token.text in ("\\(", "\\[") and not frame.math:
            self._cursor.advance()
            self._open_math(frame, token.text, token.position)
            return
        if token.text in ("\\)", "\\]") and frame.math:
            index = self._find_math_frame()
            if index is not None and self._stack[index].closer == token.text:  # type: ignore[union-attr]
                self._cursor.advance()
                self._close_math(index, token, token.end)
                return

        self._parse_macro(frame, token)

    def _parse_macro(self, frame: _Frame, token: Token) -> None:
        self._cursor.advance()
        macro = Macro(token.name, position=token.span)
        frame.content.append(macro)

        signature = self._signature(token)
        if signature is None or not signature.arguments:
            return
        self._stack.append(
            _ArgumentsFrame(
                macro,
                list(signature.arguments),
                _mode_is_math(signature.parsing_mode, frame.math),
                signature.parsing_mode is ArgumentParsingMode.VERBATIM,
                token.position,
                token.end,
            )
        )

    def _parse_verb(self, frame: _Frame, token: Token) -> None:
        source = self._source
        self._cursor.advance()

        i = token.end.offset
        env = "verb"
        if i < len(source) and source[i] == "*":
            env = "verb*"
            i += 1

        close = -1
        if i < len(source) and source[i] not in WHITESPACE_CHARS:
            close = source.find(source[i], i + 1)
            newline = source.find("\n", i + 1)
            if newline != -1 and newline < close:
                close = -1

        if close == -1:
            self._degrade(DegradationKind.UNCLOSED_VERBATIM, "\\verb is not closed on the same line", token.position)
            frame.content.append(Macro("verb", position=token.span))
            # The lexer already treats the rest as ordinary input
            return

        end = advance_position(token.end, source[token.end.offset : close + 1])
        frame.content.append(Verb(source[i + 1 : close], escape=source[i], env=env, position=Span(token.position, end)))
        self._cursor.resync(close + 1)

    # ------------------------------------------------------------------
    # Environments
    # ------------------------------------------------------------------

    def _parse_begin(self, frame: _Frame, token: Token) -> None:
        self._cursor.advance()
        match = _ENV_NAME_RE.match(self._source, token.end.offset)
        if match is None or not match.group(1).strip():
            self._degrade(DegradationKind.MISSING_ARGUMENT, "\\begin without an environment name", token.position)
            frame.content.append(Macro("begin", position=token.span))
            return

        name = match.group(1).strip()
        self._cursor.resync(match.end())
        name_end = advance_position(token.end, match.group(0))

        signature = self.options.macro_table.environment(name) or DEFAULT_ENVIRONMENT
        mode = signature.content_mode
        node: Union[Environment, MathEnvironment, VerbatimEnvironment]
        if mode is ArgumentParsingMode.VERBATIM:
            node = VerbatimEnvironment(name)
        elif mode is ArgumentParsingMode.MATH:
            node = MathEnvironment(name)
        else:
            node = Environment(name)
        frame.content.append(node)
        body_math = _mode_is_math(mode, frame.math)

        def open_body(end: Position) -> None:
            if isinstance(node, VerbatimEnvironment):
                self._read_verbatim_body(node, token.position, end)
            else:
                self._push(_FrameKind.ENVIRONMENT, node, body_math, token.position, name)

        self._stack.append(
            _ArgumentsFrame(node, list(signature.arguments), frame.math, False, token.position, name_end, open_body)
        )

    def _read_verbatim_body(self, node: VerbatimEnvironment, start: Position, body_start: Position) -> None:
        source = self._source
        pattern = re.compile(r"\\end[ \t]*\{[ \t]*" + re.escape(node.env) + r"[ \t]*\}")
        match = pattern.search(source, body_start.offset)
        if match is None:
            self._degrade(
                DegradationKind.UNCLOSED_ENVIRONMENT, f"Environment '{node.env}' is never closed", start
            )
            node.content = source[body_start.offset :]
            node.position = Span(start, self._eof)
            self._cursor.resync(len(source))
            return

        node.content = source[body_start.offset : match.start()]
        node.position = Span(start, advance_position(body_start, source[body_start.offset : match.end()]))
        self._cursor.resync(match.end())

    def _parse_end(self, frame: _Frame, token: Token) -> None:
        self._cursor.advance()
        match = _ENV_NAME_RE.match(self._source, token.end.offset)
        if match is None or not match.group(1).strip():
            self._degrade(DegradationKind.MISSING_ARGUMENT, "\\end without an environment name", token.position)
            frame.content.append(Macro("end", position=token.span))
            return

        raw = match.group(1)
        name = raw.strip()
        self._cursor.resync(match.end())
        end = advance_position(token.end, match.group(0))

        for index in range(len(self._stack) - 1, 0, -1):
            candidate = self._stack[index]
            if isinstance(candidate, _Frame) and candidate.kind is _FrameKind.ENVIRONMENT and candidate.closer == name:
                self._close_frames(index, token.position)
                self._pop_frame(end)
                return

        self._degrade(DegradationKind.UNMATCHED_END, f"\\end{{{name}}} without a matching \\begin", token.position)
        prefix = match.group(0)[: match.group(0).index("{") + 1]
        text_start = advance_position(token.end, prefix + raw[: len(raw) - len(raw.lstrip())])
        argument_start = advance_position(token.end, prefix[:-1])
        text = Text(name, Span(text_start, advance_position(text_start, name)))
        frame.content.append(
            Macro("end", [Argument("{", "}", [text], Span(argument_start, end))], position=Span(token.position, end))
        )

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def _has_closing_bracket(self) -> bool:
        """Look ahead from an opening bracket for its ``]`` at brace depth 0."""
        depth = 0
        k = 1
        while True:
            token = self._cursor.peek(k)
            if token is None:
                return False
            if token.kind is TokenKind.BEGIN_GROUP:
                depth += 1
            elif token.kind is TokenKind.END_GROUP:
                if depth == 0:
                    return False
                depth -= 1
            elif token.kind is TokenKind.CLOSE_BRACKET and depth == 0:
                return True
            elif token.kind is TokenKind.WHITESPACE and token.newlines >= 2:
                return False
            k += 1

    def _verbatim_argument(self, open_token: Token) -> Argument:
        source = self._source
        start = open_token.end.offset
        depth = 0
        i = start
        while i < len(source):
            char = source[i]
            if char == "\\":
                i += 2
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    break
                depth -= 1
            i += 1

        if i >= len(source):
            self._degrade(DegradationKind.UNCLOSED_GROUP, "Verbatim argument is never closed", open_token.position)
            raw = source[start:]
            end = self._eof
            self._cursor.resync(len(source))
        else:
            raw = source[start:i]
            end = advance_position(open_token.end, source[start : i + 1])
            self._cursor.resync(i + 1)

        content: list[Node] = []
        if raw:
            content.append(Text(raw, Span(open_token.end, advance_position(open_token.end, raw))))
        return Argument("{", "}", content, Span(open_token.position, end))

    def _step_arguments(self, frame: _ArgumentsFrame) -> None:
        cursor = self._cursor
        owner = frame.owner

        while frame.letters:
            letter = frame.letters.pop(0)
            token = cursor.peek()

            if letter == "s":
                if token is not None and token.kind is TokenKind.TEXT and token.text.startswith("*"):
                    star = cursor.split(1)
                    owner.args.append(Argument("", "", [Text("*", star.span)], star.span))
                continue

            if letter == "o":
                if token is not None and token.kind is TokenKind.OPEN_BRACKET and self._has_closing_bracket():
                    cursor.advance()
                    argument = Argument("[", "]")
                    owner.args.append(argument)
                    self._push(_FrameKind.OPTIONAL, argument, frame.math, token.position)
                    return
                continue

            # Mandatory arguments may follow a single line break
            if token is not None and token.kind is TokenKind.WHITESPACE and token.newlines < 2:
                following = cursor.peek(1)
                if following is not None and following.kind is TokenKind.BEGIN_GROUP:
                    cursor.advance()
                    token = following

            if token is None or token.kind is not TokenKind.BEGIN_GROUP:
                self._degrade(
                    DegradationKind.MISSING_ARGUMENT,
                    f"Missing argument for {_describe(owner)}",
                    token.position if token is not None else self._eof,
                )
                frame.letters.clear()
                break

            cursor.advance()
            if letter == "v" or frame.verbatim:
                owner.args.append(self._verbatim_argument(token))
                continue

            argument = Argument("{", "}")
            owner.args.append(argument)
            self._push(_FrameKind.ARGUMENT, argument, frame.math, token.position)
            return

        self._stack.pop()
        last = owner.args[-1].position if owner.args else None
        end = last.end if last is not None else frame.name_end
        owner.position = Span(frame.start, end)
        if frame.on_close is not None:
            frame.on_close(end)
        if frame.on_done is not None:
            frame.on_done(end)


def parse_latex(source: str, options: LatexParserOptions | None = None) -> Root:
    """Parse LaTeX source with a fresh :class:`LatexParser`.

    Parameters
    ----------
    source : str
        LaTeX source text
    options : LatexParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Root
        Parsed document

    """
    return LatexParser(options).parse(source)
