"""
Decode the escape sequences found inside the quoted literals.

The decoding never fails. Malformed hexadecimal digits degrade to
the replacement character U+FFFD so that the translation can carry on.
"""
import string
from typing import Mapping

from icontract import require, ensure

#: Code point substituted whenever an escape sequence carries malformed digits
REPLACEMENT_CHARACTER = 0xFFFD

UTF_WIDTH4 = 4
UTF_WIDTH6 = 6

_CONTROL_ESCAPES = {
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
}  # type: Mapping[str, bytes]

# ``\u+HHHH`` carries four digits, ``\u-HHHHHH`` six.
_SIGN_TO_WIDTH = {"+": UTF_WIDTH4, "-": UTF_WIDTH6}  # type: Mapping[str, int]


def _is_hex(character: str) -> bool:
    # NOTE: ``int(..., 16)`` accepts non-ASCII digits as well, so we check
    # explicitly against the ASCII hexadecimal digits.
    return len(character) == 1 and character in string.hexdigits


@require(lambda width: width in (UTF_WIDTH4, UTF_WIDTH6))
@require(lambda text, width: len(text) == width)
@ensure(lambda result: 0 <= result <= 0xFFFFFF)
def hex_word(text: str, width: int) -> int:
    """
    Parse the ``width`` hexadecimal digits of ``text`` as a code point.

    Return :py:data:`REPLACEMENT_CHARACTER` if any of the digits is malformed.

    >>> hex_word("00e9", UTF_WIDTH4)
    233

    >>> hex_word("01F60z", UTF_WIDTH6) == REPLACEMENT_CHARACTER
    True
    """
    value = 0
    for character in text:
        if not _is_hex(character):
            return REPLACEMENT_CHARACTER

        value = (value << 4) | int(character, 16)

    return value


@require(lambda code_point: 0 <= code_point <= 0xFFFFFF)
@ensure(lambda result: 1 <= len(result) <= 4)
def encode_code_point(code_point: int) -> bytes:
    """
    Encode the ``code_point`` with the UTF-8 length classes.

    Mind that we do not validate the code point. Surrogates and values above
    U+10FFFF are encoded with the same bit layout as the valid ones and the lead
    byte of the four-byte class keeps only the lowest three bits.

    >>> encode_code_point(0x41)
    b'A'

    >>> encode_code_point(0xE9)
    b'\\xc3\\xa9'
    """
    if code_point <= 0x7F:
        return bytes([code_point])

    elif code_point <= 0x7FF:
        return bytes([0xC0 | ((code_point >> 6) & 0x1F), 0x80 | (code_point & 0x3F)])

    elif code_point <= 0xFFFF:
        return bytes(
            [
                0xE0 | (code_point >> 12),
                0x80 | ((code_point >> 6) & 0x3F),
                0x80 | (code_point & 0x3F),
            ]
        )

    else:
        return bytes(
            [
                0xF0 | ((code_point >> 18) & 0x7),
                0x80 | ((code_point >> 12) & 0x3F),
                0x80 | ((code_point >> 6) & 0x3F),
                0x80 | (code_point & 0x3F),
            ]
        )


@ensure(
    lambda text, result: "\\" in text or result == text.encode("utf-8"),
    "Text without backslashes is only UTF-8 encoded",
)
def decode_escapes(text: str) -> bytes:
    r"""
    Decode the escape sequences in the inside of a quoted literal.

    The ``text`` excludes the delimiting quotes. We understand:

    * ``\n``, ``\r`` and ``\t`` as control characters,
    * ``\xHH`` as a Latin-1 character,
    * ``\u+HHHH`` and ``\u-HHHHHH`` as a code point, and
    * any other escaped character as itself.

    The result is encoded as UTF-8.

    >>> decode_escapes(r"a\tb")
    b'a\tb'

    >>> decode_escapes(r"caf\u+00e9")
    b'caf\xc3\xa9'

    >>> decode_escapes(r"\"quoted\"")
    b'"quoted"'
    """
    writer = bytearray()

    i = 0
    while i < len(text):
        character = text[i]

        if character != "\\":
            writer.extend(character.encode("utf-8"))
            i += 1
            continue

        if i + 1 == len(text):
            # A lone trailing backslash escapes nothing, so we keep it.
            writer.append(ord("\\"))
            break

        escaped = text[i + 1]
        i += 2

        if escaped in _CONTROL_ESCAPES:
            writer.extend(_CONTROL_ESCAPES[escaped])

        elif escaped == "x":
            digits = text[i : i + 2]
            i += len(digits)

            if len(digits) == 2 and all(_is_hex(digit) for digit in digits):
                # NOTE: Values above 0x7F are Latin-1 characters which take two
                # bytes in UTF-8.
                writer.extend(encode_code_point(int(digits, 16)))
            else:
                writer.extend(encode_code_point(REPLACEMENT_CHARACTER))

        elif escaped == "u":
            width = _SIGN_TO_WIDTH.get(text[i]) if i < len(text) else None

            if width is None or len(text) - (i + 1) < width:
                writer.append(ord("u"))
                continue

            code_point = hex_word(text[i + 1 : i + 1 + width], width)
            i += 1 + width

            writer.extend(encode_code_point(code_point))

        else:
            writer.extend(escaped.encode("utf-8"))

    return bytes(writer)
