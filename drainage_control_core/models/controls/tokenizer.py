"""Splitting control rule text into clause lines of tokens.

Tokens are separated by whitespace; a token containing spaces is written between double
quotes. Everything after a ``;`` is a comment. When the text contains section headers (such
as ``[CONTROLS]``), only the lines of the ``[CONTROLS]`` section are used.
"""

import re
import typing as t

import pyparsing as pp

CONTROLS_SECTION = "CONTROLS"

_SECTION_HEADER = re.compile(r"^\s*\[(?P<name>[^\]]+)\]\s*(;.*)?$")


def _build_grammar() -> pp.ParserElement:
    quoted = pp.QuotedString('"')
    word = pp.Regex(r"[^\s;]+")
    line = pp.ZeroOrMore(quoted | word)
    line.ignore(pp.Literal(";") + pp.restOfLine)
    return line


_GRAMMAR = _build_grammar()


def tokenize(line: str) -> t.List[str]:
    """Split a single line into tokens

    :param line: A line of control rule text
    :returns: The tokens of the line, empty for a blank or comment line
    """
    return list(_GRAMMAR.parseString(line, parseAll=True))


def iter_clause_lines(
    text: t.Union[str, t.Iterable[str]]
) -> t.Iterator[t.Tuple[int, t.List[str]]]:
    """Iterate over the non-empty lines of control rule text

    :param text: The text, either as a single string or as separate lines
    :returns: Iterator of ``(line number, tokens)``, line numbers start at 1
    """
    lines = text.splitlines() if isinstance(text, str) else list(text)
    has_sections = any(_SECTION_HEADER.match(line) for line in lines)
    in_controls = not has_sections

    for lineno, line in enumerate(lines, start=1):
        if match := _SECTION_HEADER.match(line):
            in_controls = match.group("name").strip().upper() == CONTROLS_SECTION
            continue
        if not in_controls:
            continue
        if tokens := tokenize(line):
            yield lineno, tokens
