"""Define the token kinds and the flags which steer the rendering."""
import enum
from typing import Mapping, FrozenSet


class TokenKind(enum.Enum):
    """
    List the kinds of tokens handed over by the lexer.

    Only the quoted literals, axis names, double colons, ellipses and
    the concatenation operator influence the rendering; all the other kinds are
    rendered uniformly.
    """

    BARE = "bare"
    NUMBER = "number"
    VAR_NAME = "var_name"
    FUNCTION_NAME = "function_name"
    ELEMENT_NAME = "element_name"
    QUOTED = "quoted"
    AXIS_NAME = "axis_name"
    DCOLON = "dcolon"
    DOTDOTDOT = "dotdotdot"
    UNDERSCORE = "underscore"
    SLASH = "slash"
    AT = "at"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    COMMA = "comma"
    DOT = "dot"
    MINUS = "minus"
    PLUS = "plus"
    OPERATOR = "operator"
    EOS = "eos"


STR_TO_TOKEN_KIND = {
    literal.value: literal for literal in TokenKind
}  # type: Mapping[str, TokenKind]

# Segments of these kinds are never followed by a separating space so that
# ``child::para`` renders without a gap.
GLUED_KINDS = frozenset(
    [TokenKind.AXIS_NAME, TokenKind.DCOLON]
)  # type: FrozenSet[TokenKind]


class QuoteFlags(enum.Flag):
    """Capture which quote characters a segment text contains."""

    NONE = 0
    SINGLE = enum.auto()
    DOUBLE = enum.auto()
    BOTH = enum.auto()


class RenderFlags(enum.Flag):
    """Steer how the quoted literals are marshalled into the text."""

    NONE = 0

    #: Wrap quoted literals in quote characters.
    QUOTES = enum.auto()

    #: Double the braces in quoted literals (attribute-value template context).
    BRACES = enum.auto()
