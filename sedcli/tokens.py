"""
sedcli token classifier and option matcher.

Classification (classify)
- SHORT: "-" followed by exactly one ASCII letter, nothing else ("-d").
- LONG: "--" followed by an ASCII letter and anything after it ("--device",
  "--key=value" is a long token named "key=value"; no inline values exist).
- UNRECOGNIZED: everything else, including "", "-", "-9", "-dx", "--", "--9".

Matching (matches / find)
- "-x" matches a descriptor whose short name is "x".
- "--name" matches a descriptor whose long name is exactly "name" (case-sensitive).
- The first match in table order wins.

Pseudo-options
- --help / -H and --version / -V are recognized through the same matcher.
"""
import enum
from collections import namedtuple


class TokenKind(enum.Enum):
    SHORT = "short"
    LONG = "long"
    UNRECOGNIZED = "unrecognized"


Token = namedtuple("Token", ("kind", "name", "raw"))
Token.__doc__ = """
classified argv token: kind (TokenKind), name (letter or long name, None when
unrecognized) and raw (the original token).
"""


def _isletter(character):
    return character.isascii() and character.isalpha()


def classify(token):
    """
    Classify a raw argv token as a short option, a long option or unrecognized text.

    Examples
    - classify("-d")        -> Token(SHORT, "d", "-d")
    - classify("--device")  -> Token(LONG, "device", "--device")
    - classify("-9")        -> Token(UNRECOGNIZED, None, "-9")
    """
    if not token or token[0] != "-":
        return Token(TokenKind.UNRECOGNIZED, None, token)
    if len(token) > 1 and _isletter(token[1]):
        if len(token) == 2:
            return Token(TokenKind.SHORT, token[1], token)
        return Token(TokenKind.UNRECOGNIZED, None, token)
    if token[1:2] == "-" and len(token) > 2 and _isletter(token[2]):
        return Token(TokenKind.LONG, token[2:], token)
    return Token(TokenKind.UNRECOGNIZED, None, token)


def recognized(token):
    return classify(token).kind is not TokenKind.UNRECOGNIZED


def matches(token, long_name, short_name=None):
    """
    Whether a raw token designates the given long/short name pair.
    """
    if not token or token[0] != "-":
        return False
    if short_name and token == "-" + short_name:
        return True
    return token[1:2] == "-" and token[2:] == long_name


def find(options, token):
    """
    First option of the table designated by the token, or None.
    """
    for option in options:
        if matches(token, option.long_name, option.short_name):
            return option
    return None


def is_help(token):
    return matches(token, "help", "H")


def is_version(token):
    return matches(token, "version", "V")


def looks_like_option(token):
    """
    Whether a token ends an argument span: it starts with "-" and has more after it.

    Broader than classify(): "-9" and "--" end a span even though they are
    not valid options.
    """
    return len(token) > 1 and token[0] == "-"


__all__ = (
    "TokenKind",
    "Token",
    "classify",
    "recognized",
    "matches",
    "find",
    "is_help",
    "is_version",
    "looks_like_option",
)
