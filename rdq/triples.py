from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Triple:
    subject: str
    predicate: str
    object: str
    is_literal: bool = True
    datatype: str | None = None
    language: str | None = None

    def object_text(self) -> str:
        if not self.is_literal:
            return self.object
        text = '"' + self.object + '"'
        if self.language:
            return f"{text}@{self.language}"
        if self.datatype:
            return f"{text}^^<{self.datatype}>"
        return text

    def __str__(self) -> str:
        return f"{self.subject} - {self.predicate} - {self.object_text()}"


class TripleParseError(ValueError):
    pass


_BNODE = r"[A-Za-z0-9_](?:[A-Za-z0-9_.\-]*[A-Za-z0-9_\-])?"

_LINE_REGEX = re.compile(
    r"^\s*"
    rf"(?:<(?P<s_iri>[^<>\s]*)>|_:(?P<s_bnode>{_BNODE}))\s*"
    r"<(?P<p_iri>[^<>\s]*)>\s*"
    r"(?:"
    r"<(?P<o_iri>[^<>\s]*)>|"
    rf"_:(?P<o_bnode>{_BNODE})|"
    r"\"(?P<lexical>(?:[^\"\\]|\\.)*)\""
    r"(?:@(?P<lang>[A-Za-z]+(?:-[A-Za-z0-9]+)*)|\^\^<(?P<datatype>[^<>\s]*)>)?"
    r")\s*\.\s*(?:#.*)?$"
)

_ESCAPE_REGEX = re.compile(r"\\(?:u([0-9A-Fa-f]{4})|U([0-9A-Fa-f]{8})|(.))")

_ECHARS = {
    "t": "\t",
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "f": "\f",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


def _unescape_char(match: re.Match) -> str:
    short, long, char = match.groups()
    if short or long:
        return chr(int(short or long, 16))
    if char not in _ECHARS:
        raise ValueError(f"Invalid escape sequence: \\{char}")
    return _ECHARS[char]


def unescape(text: str) -> str:
    return _ESCAPE_REGEX.sub(_unescape_char, text)


def parse_ntriples(lines: Iterable[str], source: str) -> list[Triple]:
    triples: list[Triple] = []
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _LINE_REGEX.match(stripped)
        if not match:
            raise TripleParseError(f"{source}:{lineno}: malformed N-Triples statement")
        groups = match.groupdict()
        subject = groups["s_iri"] if groups["s_iri"] is not None else "_:" + groups["s_bnode"]
        try:
            if groups["lexical"] is not None:
                triple = Triple(
                    subject=unescape(subject),
                    predicate=unescape(groups["p_iri"]),
                    object=unescape(groups["lexical"]),
                    is_literal=True,
                    datatype=groups["datatype"],
                    language=groups["lang"],
                )
            else:
                obj = groups["o_iri"] if groups["o_iri"] is not None else "_:" + groups["o_bnode"]
                triple = Triple(
                    subject=unescape(subject),
                    predicate=unescape(groups["p_iri"]),
                    object=unescape(obj),
                    is_literal=False,
                )
        except ValueError as exc:
            raise TripleParseError(f"{source}:{lineno}: {exc}") from exc
        triples.append(triple)
    return triples
