#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the LaTeX parser."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from unlatex.ast import (
    Argument,
    Comment,
    DisplayMath,
    Environment,
    Group,
    InlineMath,
    Macro,
    MathEnvironment,
    Parbreak,
    Root,
    Text,
    ValidationVisitor,
    Verb,
    VerbatimEnvironment,
    Whitespace,
    iter_nodes,
    strip_positions,
)
from unlatex.exceptions import InvalidOptionsError
from unlatex.options import LatexFormatOptions, LatexParserOptions
from unlatex.parsers.latex import DegradationKind, LatexParser, parse_latex


def _content(source: str) -> list:
    root = strip_positions(parse_latex(source))
    assert isinstance(root, Root)
    return root.content


@pytest.mark.unit
class TestBasicParsing:
    """Test parsing of well-formed input."""

    def test_macro_whitespace_math(self) -> None:
        """Test the top-level node sequence of a short fragment."""
        root = parse_latex(r"\emph{hi} $x^2$")
        assert [type(node) for node in root.content] == [Macro, Whitespace, InlineMath]

    def test_macro_arguments(self) -> None:
        """Test that a known macro consumes its mandatory argument."""
        assert _content(r"\emph{hi}") == [Macro("emph", [Argument("{", "}", [Text("hi")])])]

    def test_star_optional_mandatory(self) -> None:
        """Test the full argument layout of a sectioning command."""
        (macro,) = _content(r"\section*[short]{Long}")
        assert macro.content == "section"
        assert [arg.open_mark for arg in macro.args] == ["", "[", "{"]
        assert macro.args[0].is_star
        assert macro.args[1].is_optional
        assert macro.args[2].content == [Text("Long")]

    def test_optional_argument_must_be_adjacent(self) -> None:
        """Test that whitespace before a bracket ends the optional argument."""
        content = _content(r"\item [x]")
        assert content[0] == Macro("item")
        assert Text("[") in content

    def test_mandatory_argument_after_line_break(self) -> None:
        """Test that a single line break may separate a macro and its argument."""
        (macro,) = _content("\\emph\n{x}")
        assert macro.args == [Argument("{", "}", [Text("x")])]

    def test_group(self) -> None:
        """Test a plain brace group."""
        assert _content("{a b}") == [Group([Text("a"), Whitespace(), Text("b")])]

    def test_parbreak(self) -> None:
        """Test that a blank line is a paragraph break."""
        assert _content("a\n\nb") == [Text("a"), Parbreak(), Text("b")]

    def test_control_space(self) -> None:
        """Test that a backslash before a space or line break is a control space."""
        assert _content("a\\ b") == [Text("a"), Macro(" "), Text("b")]
        assert _content("a\\\nb") == [Text("a"), Macro(" "), Text("b")]

    def test_root_spans_source(self) -> None:
        """Test that the root position covers the complete input."""
        source = "Hello\n\\emph{world}\n"
        root = parse_latex(source)
        assert root.position is not None
        assert root.position.start.offset == 0
        assert root.position.end.offset == len(source)

    def test_positions_are_nested(self) -> None:
        """Test that every child lies within its parent."""
        root = parse_latex(r"\section{A} \begin{itemize}\item $x^{2}$ \end{itemize}")
        validator = ValidationVisitor(strict=False)
        root.accept(validator)
        assert validator.errors == []


@pytest.mark.unit
class TestComments:
    """Test comment attachment."""

    def test_sameline_comment(self) -> None:
        """Test a comment at the end of a line of text."""
        assert _content("a % comment\nb") == [
            Text("a"),
            Comment(" comment", sameline=True, leading_whitespace=True),
            Text("b"),
        ]

    def test_own_line_comment(self) -> None:
        """Test a comment on a line of its own."""
        assert _content("a\n% c\nb") == [Text("a"), Whitespace(), Comment(" c"), Text("b")]

    def test_comment_without_leading_whitespace(self) -> None:
        """Test a comment directly after text."""
        content = _content("a% c\nb")
        assert content[1] == Comment(" c", sameline=True, leading_whitespace=False)

    def test_comment_followed_by_blank_line(self) -> None:
        """Test that the paragraph break after a comment is kept."""
        assert _content("% c\n\nb") == [Comment(" c", suffix_parbreak=True), Parbreak(), Text("b")]


@pytest.mark.unit
class TestMath:
    """Test math mode parsing."""

    def test_inline_math_with_script(self) -> None:
        """Test that a superscript takes a single character argument."""
        (math,) = _content("$x^2$")
        assert math == InlineMath([Text("x"), Macro("^", [Argument("", "", [Text("2")])], escape_token="")])

    def test_script_splits_text(self) -> None:
        """Test that only the first character after a script is its argument."""
        (math,) = _content("$x^23$")
        assert math.content[1].args[0].content == [Text("2")]
        assert math.content[2] == Text("3")

    def test_braced_script(self) -> None:
        """Test a subscript with a braced argument."""
        (math,) = _content("$x_{ij}$")
        assert math.content[1] == Macro("_", [Argument("{", "}", [Text("ij")])], escape_token="")

    def test_script_outside_math_is_text(self) -> None:
        """Test that ^ in text mode is ordinary text."""
        assert _content("x^2") == [Text("x"), Text("^"), Text("2")]

    def test_display_math_delimiters(self) -> None:
        """Test both display math delimiters."""
        (bracket,) = _content(r"\[x\]")
        (dollars,) = _content("$$x$$")
        assert bracket == DisplayMath([Text("x")], delimiter="\\[")
        assert dollars == DisplayMath([Text("x")], delimiter="$$")

    def test_double_dollar_inside_inline_math(self) -> None:
        """Test that $$ inside inline math closes it and opens the next one."""
        first, second = _content("$a$$b$")
        assert first == InlineMath([Text("a")])
        assert second == InlineMath([Text("b")])
        assert second.position.start.offset == 3

    def test_paren_inline_math(self) -> None:
        """Test inline math with \\( \\) delimiters."""
        (math,) = _content(r"\(a\)")
        assert math == InlineMath([Text("a")], delimiter="\\(")

    def test_math_environment(self) -> None:
        """Test that math environments parse their body in math mode."""
        (env,) = _content(r"\begin{equation}x^2\end{equation}")
        assert isinstance(env, MathEnvironment)
        assert env.env == "equation"
        assert env.content[1].content == "^"

    def test_text_inside_math(self) -> None:
        """Test that \\text switches back to text mode."""
        (math,) = _content(r"$\text{a $b$}$")
        text_macro = math.content[0]
        assert text_macro.content == "text"
        assert isinstance(text_macro.args[0].content[-1], InlineMath)


@pytest.mark.unit
class TestVerbatim:
    """Test raw content handling."""

    def test_verb(self) -> None:
        """Test inline verbatim."""
        assert _content(r"\verb|a  {b|") == [Verb("a  {b", escape="|")]
        assert _content(r"\verb*+x+") == [Verb("x", escape="+", env="verb*")]

    def test_verbatim_environment(self) -> None:
        """Test that a verbatim body is kept byte-for-byte."""
        (env,) = _content("\\begin{verbatim}\n  x  {\n\\end{verbatim}")
        assert env == VerbatimEnvironment("verbatim", "\n  x  {\n")

    def test_verbatim_argument(self) -> None:
        """Test that \\url keeps its argument raw, comment characters included."""
        (macro,) = _content(r"\url{a%b_c}")
        assert macro.args[0].content == [Text("a%b_c")]


@pytest.mark.unit
class TestDegradations:
    """Test recovery from malformed input."""

    def test_unterminated_environment(self) -> None:
        """Test that an environment without \\end runs to the end of input."""
        source = r"\begin{foo} unterminated"
        parser = LatexParser()
        root = parser.parse(source)

        (env,) = root.content
        assert isinstance(env, Environment)
        assert env.env == "foo"
        assert env.position.end.offset == len(source)
        assert [d.kind for d in parser.degradations] == [DegradationKind.UNCLOSED_ENVIRONMENT]

    def test_unknown_macro(self) -> None:
        """Test that an unknown macro takes no arguments."""
        parser = LatexParser()
        root = strip_positions(parser.parse(r"\unknownmacro{x}"))
        assert root.content == [Macro("unknownmacro"), Group([Text("x")])]
        assert parser.degradations[0].kind is DegradationKind.UNKNOWN_MACRO

    def test_unmatched_close_brace(self) -> None:
        """Test that a stray closing brace becomes text."""
        parser = LatexParser()
        root = strip_positions(parser.parse("a}"))
        assert root.content == [Text("a"), Text("}")]
        assert parser.degradations[0].kind is DegradationKind.UNMATCHED_CLOSE_BRACE

    def test_unclosed_group(self) -> None:
        """Test that an unclosed group ends at the end of input."""
        parser = LatexParser()
        root = parser.parse("{a")
        assert root.content[0].position.end.offset == 2
        assert parser.degradations[0].kind is DegradationKind.UNCLOSED_GROUP

    def test_unmatched_end(self) -> None:
        """Test that \\end without \\begin is kept as a macro."""
        parser = LatexParser()
        root = strip_positions(parser.parse(r"\end{foo}"))
        assert root.content == [Macro("end", [Argument("{", "}", [Text("foo")])])]
        assert parser.degradations[0].kind is DegradationKind.UNMATCHED_END

    def test_missing_argument(self) -> None:
        """Test a known macro at the end of input."""
        parser = LatexParser()
        root = parser.parse(r"\emph")
        assert root.content[0].args == []
        assert parser.degradations[0].kind is DegradationKind.MISSING_ARGUMENT

    def test_unclosed_math(self) -> None:
        """Test inline math without a closing delimiter."""
        parser = LatexParser()
        root = parser.parse("$x")
        assert isinstance(root.content[0], InlineMath)
        assert parser.degradations[0].kind is DegradationKind.UNCLOSED_MATH

    def test_end_closes_inner_frames(self) -> None:
        """Test that \\end implicitly closes groups opened inside the environment."""
        parser = LatexParser()
        root = strip_positions(parser.parse(r"\begin{center}{a\end{center}b"))
        env, text = root.content
        assert env.content == [Group([Text("a")])]
        assert text == Text("b")

    def test_recording_can_be_disabled(self) -> None:
        """Test that degradations are not kept when recording is off."""
        parser = LatexParser(LatexParserOptions(record_degradations=False))
        parser.parse("{a")
        assert parser.degradations == []

    def test_deep_nesting(self) -> None:
        """Test that deeply nested groups do not exhaust the stack."""
        depth = 5000
        root = parse_latex("{" * depth + "x" + "}" * depth)
        assert sum(isinstance(node, Group) for node in iter_nodes(root)) == depth


@pytest.mark.unit
class TestParserOptions:
    """Test parser configuration."""

    def test_wrong_options_type(self) -> None:
        """Test that formatting options are rejected by the parser."""
        with pytest.raises(InvalidOptionsError):
            LatexParser(LatexFormatOptions())  # type: ignore[arg-type]

    def test_parse_tokens_from_offset(self) -> None:
        """Test parsing a token stream that starts inside the source."""
        from unlatex.parsers.lexer import tokenize

        root = LatexParser().parse_tokens(tokenize("skip {b}", start=5))
        assert root.position.start.offset == 5
        assert strip_positions(root).content == [Group([Text("b")])]

    def test_custom_macro(self) -> None:
        """Test teaching the parser a new macro."""
        from unlatex.parsers.macros import DEFAULT_MACRO_TABLE, MacroSignature

        table = DEFAULT_MACRO_TABLE.extend(macros={"todo": MacroSignature("o m")})
        root = strip_positions(parse_latex(r"\todo[inline]{fix}", LatexParserOptions(macro_table=table)))
        (macro,) = root.content
        assert [arg.open_mark for arg in macro.args] == ["[", "{"]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestParserProperties:
    """Property-based tests for the parser."""

    @given(st.text(max_size=200))
    def test_parse_never_raises(self, source: str) -> None:
        """Test that any string parses to a root spanning the input."""
        root = parse_latex(source)
        assert root.position is not None
        assert root.position.end.offset == len(source)

    @given(st.text(alphabet=st.sampled_from("ab \n{}[]$\\%&^_"), max_size=80))
    def test_children_within_parents(self, source: str) -> None:
        """Test position nesting on inputs dense in special characters."""
        validator = ValidationVisitor(strict=False)
        parse_latex(source).accept(validator)
        assert validator.errors == []
