"""Label selector parsing.

Accepts the Kubernetes label-selector text syntax::

    env=prod,tier!=cache,app in (api,web),!legacy,owner

and turns it into a structured :class:`LabelSelector` with ``matchLabels``
and ``matchExpressions``. Only parsing and structural validation happen
here; matching is done by the API server.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ark_client.errors import MalformedSelectorError

OP_IN = "In"
OP_NOT_IN = "NotIn"
OP_EXISTS = "Exists"
OP_DOES_NOT_EXIST = "DoesNotExist"

_NAME_MAX_LENGTH = 63
_PREFIX_MAX_LENGTH = 253
_NAME_RE = re.compile(r"^[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$")
_PREFIX_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")

_IDENT = "identifier"
_EOS = "end of string"
_SPECIAL = ("!=", "==", "!", "=", ",", "(", ")", "<", ">")
_SPECIAL_CHARS = frozenset("!=,()<>")


@dataclass(frozen=True)
class SelectorRequirement:
    key: str
    operator: str
    values: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        payload: dict = {"key": self.key, "operator": self.operator}
        if self.values:
            payload["values"] = list(self.values)
        return payload


@dataclass(frozen=True)
class LabelSelector:
    match_labels: tuple[tuple[str, str], ...] = ()
    match_expressions: tuple[SelectorRequirement, ...] = ()

    def is_empty(self) -> bool:
        return not self.match_labels and not self.match_expressions

    def to_dict(self) -> dict:
        payload: dict = {}
        if self.match_labels:
            payload["matchLabels"] = dict(self.match_labels)
        if self.match_expressions:
            payload["matchExpressions"] = [req.to_dict() for req in self.match_expressions]
        return payload

    @classmethod
    def from_dict(cls, data: dict | None) -> LabelSelector:
        if not data:
            return cls()
        labels = data.get("matchLabels") or {}
        expressions = [
            SelectorRequirement(
                key=str(item.get("key", "")),
                operator=str(item.get("operator", "")),
                values=tuple(sorted(set(item.get("values") or []))),
            )
            for item in data.get("matchExpressions") or []
        ]
        return _canonical(dict(labels), expressions)


def _canonical(labels: dict[str, str], expressions: list[SelectorRequirement]) -> LabelSelector:
    return LabelSelector(
        match_labels=tuple(sorted(labels.items())),
        match_expressions=tuple(
            sorted(expressions, key=lambda req: (req.key, req.operator, req.values))
        ),
    )


def _tokenize(text: str) -> Iterator[tuple[str, str]]:
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        special = next((tok for tok in _SPECIAL if text.startswith(tok, pos)), None)
        if special is not None:
            yield special, special
            pos += len(special)
            continue
        start = pos
        while pos < length and not text[pos].isspace() and text[pos] not in _SPECIAL_CHARS:
            pos += 1
        yield _IDENT, text[start:pos]
    yield _EOS, ""


def _validate_key(key: str) -> None:
    prefix, sep, name = key.rpartition("/")
    if sep and (not prefix or "/" in prefix):
        raise MalformedSelectorError(f"invalid label key {key!r}: must have at most one '/'")
    if sep and (len(prefix) > _PREFIX_MAX_LENGTH or not _PREFIX_RE.match(prefix)):
        raise MalformedSelectorError(
            f"invalid label key {key!r}: prefix must be a DNS-1123 subdomain"
        )
    if not name or len(name) > _NAME_MAX_LENGTH or not _NAME_RE.match(name):
        raise MalformedSelectorError(
            f"invalid label key {key!r}: name must be 63 characters or less, begin and end "
            "with an alphanumeric character, and contain only '-', '_', '.' or alphanumerics"
        )


def _validate_value(value: str) -> None:
    if value == "":
        return
    if len(value) > _NAME_MAX_LENGTH or not _NAME_RE.match(value):
        raise MalformedSelectorError(
            f"invalid label value {value!r}: must be 63 characters or less, begin and end "
            "with an alphanumeric character, and contain only '-', '_', '.' or alphanumerics"
        )


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = list(_tokenize(text))
        self._pos = 0

    def _peek(self) -> tuple[str, str]:
        return self._tokens[self._pos]

    def _consume(self) -> tuple[str, str]:
        token = self._tokens[self._pos]
        if token[0] != _EOS:
            self._pos += 1
        return token

    def _unexpected(self, literal: str, expected: str) -> MalformedSelectorError:
        found = literal if literal else _EOS
        return MalformedSelectorError(f"unable to parse requirement: found {found!r}, expected: {expected}")

    def parse(self) -> LabelSelector:
        labels: dict[str, str] = {}
        expressions: list[SelectorRequirement] = []
        if self._peek()[0] == _EOS:
            return LabelSelector()
        while True:
            kind, literal = self._peek()
            if kind not in (_IDENT, "!"):
                raise self._unexpected(literal, "!, identifier, or 'end of string'")
            self._parse_requirement(labels, expressions)
            kind, literal = self._consume()
            if kind == _EOS:
                break
            if kind != ",":
                raise self._unexpected(literal, "',' or 'end of string'")
            if self._peek()[0] not in (_IDENT, "!"):
                raise self._unexpected(self._peek()[1], "identifier after ','")
        return _canonical(labels, expressions)

    def _parse_requirement(
        self,
        labels: dict[str, str],
        expressions: list[SelectorRequirement],
    ) -> None:
        negated = False
        if self._peek()[0] == "!":
            self._consume()
            negated = True
        kind, key = self._consume()
        if kind != _IDENT:
            raise self._unexpected(key, "identifier")
        _validate_key(key)

        if self._peek()[0] in (_EOS, ","):
            expressions.append(
                SelectorRequirement(key=key, operator=OP_DOES_NOT_EXIST if negated else OP_EXISTS)
            )
            return
        if negated:
            raise self._unexpected(self._peek()[1], "',' or 'end of string' after '!key'")

        kind, literal = self._consume()
        if kind == _IDENT and literal in ("in", "notin"):
            values = self._parse_value_set(key, literal)
            operator = OP_IN if literal == "in" else OP_NOT_IN
            expressions.append(SelectorRequirement(key=key, operator=operator, values=values))
            return
        if kind in ("=", "=="):
            labels[key] = self._parse_exact_value()
            return
        if kind == "!=":
            value = self._parse_exact_value()
            expressions.append(SelectorRequirement(key=key, operator=OP_NOT_IN, values=(value,)))
            return
        if kind in ("<", ">"):
            raise MalformedSelectorError(f"invalid selector operator {literal!r} for key {key!r}")
        raise self._unexpected(literal, "in, notin, =, ==, !=")

    def _parse_exact_value(self) -> str:
        kind, literal = self._peek()
        if kind in (_EOS, ","):
            return ""
        if kind != _IDENT:
            raise self._unexpected(literal, "identifier")
        self._consume()
        _validate_value(literal)
        return literal

    def _parse_value_set(self, key: str, operator: str) -> tuple[str, ...]:
        kind, literal = self._consume()
        if kind != "(":
            raise self._unexpected(literal, "'('")
        values: list[str] = []
        while True:
            kind, literal = self._consume()
            if kind == ")" and not values:
                raise MalformedSelectorError(
                    f"for {operator!r} operator on key {key!r}, values set can't be empty"
                )
            if kind != _IDENT:
                raise self._unexpected(literal, "identifier")
            _validate_value(literal)
            values.append(literal)
            kind, literal = self._consume()
            if kind == ")":
                break
            if kind != ",":
                raise self._unexpected(literal, "',' or ')'")
        return tuple(sorted(set(values)))


def parse_selector(text: str) -> LabelSelector:
    return _Parser(text).parse()


def _format_requirement(req: SelectorRequirement) -> str:
    if req.operator == OP_EXISTS:
        return req.key
    if req.operator == OP_DOES_NOT_EXIST:
        return f"!{req.key}"
    if req.operator == OP_NOT_IN and len(req.values) == 1:
        return f"{req.key}!={req.values[0]}"
    keyword = "in" if req.operator == OP_IN else "notin"
    return f"{req.key} {keyword} ({','.join(req.values)})"


def format_selector(selector: LabelSelector) -> str:
    parts = [(key, f"{key}={value}") for key, value in selector.match_labels]
    parts.extend((req.key, _format_requirement(req)) for req in selector.match_expressions)
    return ",".join(text for _, text in sorted(parts, key=lambda item: item[0]))


class LabelSelectorFlag:
    """argparse ``type=`` for ``-l/--selector``."""

    def parse(self, raw: str) -> LabelSelector:
        return parse_selector(raw)

    def serialize(self, value: LabelSelector) -> str:
        return format_selector(value)

    def __call__(self, raw: str) -> LabelSelector:
        return self.parse(raw)


__all__ = [
    "LabelSelector",
    "LabelSelectorFlag",
    "OP_DOES_NOT_EXIST",
    "OP_EXISTS",
    "OP_IN",
    "OP_NOT_IN",
    "SelectorRequirement",
    "format_selector",
    "parse_selector",
]
