from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from .adapters.pmap_parser import (
    IMAGE_PREFIX,
    METADATA_DELIM,
    heading_level,
    parse_image,
    trim_line,
)


@dataclass
class Finding:
    severity: str  # "info" | "warn" | "error"
    message: str
    line: int | None = None  # 1-based


class LintRule(Protocol):
    id: str

    def check(self, text: str) -> list[Finding]:
        pass


def _body_start(lines: list[str]) -> int | None:
    """Index of the first line after the metadata block, None if it never closes."""
    if not lines or lines[0] != METADATA_DELIM:
        return 0
    for i in range(1, len(lines)):
        if lines[i] == METADATA_DELIM:
            return i + 1
    return None


def _body_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, trimmed line) for lines the parser turns into sections."""
    lines = [trim_line(ln) for ln in text.split("\n")]
    start = _body_start(lines)
    if start is None:
        return
    for i in range(start, len(lines)):
        yield i + 1, lines[i]


class UnclosedMetadataRule:
    id = "unclosed-metadata"

    def check(self, text: str) -> list[Finding]:
        lines = [trim_line(ln) for ln in text.split("\n")]
        if _body_start(lines) is not None:
            return []
        return [
            Finding(
                "error",
                "Metadata block is never closed; the rest of the document is ignored",
                1,
            )
        ]


class MalformedImageRule:
    id = "malformed-image"

    def check(self, text: str) -> list[Finding]:
        return [
            Finding("warn", f"Malformed image declaration: {line}", n)
            for n, line in _body_lines(text)
            if line.startswith(IMAGE_PREFIX) and parse_image(line) is None
        ]


class EmptyHeadingRule:
    id = "empty-heading"

    def check(self, text: str) -> list[Finding]:
        return [
            Finding("warn", "Heading has no text", n)
            for n, line in _body_lines(text)
            if line.startswith("#") and not trim_line(line[heading_level(line):])
        ]


class EmptyListItemRule:
    id = "empty-list-item"

    def check(self, text: str) -> list[Finding]:
        return [
            Finding("info", "List item has no text", n)
            for n, line in _body_lines(text)
            if line == "-"
        ]


DEFAULT_RULES: list[LintRule] = [
    UnclosedMetadataRule(),
    MalformedImageRule(),
    EmptyHeadingRule(),
    EmptyListItemRule(),
]


def lint_text(text: str, rules: list[LintRule] | None = None) -> list[Finding]:
    findings: list[Finding] = []
    for rule in DEFAULT_RULES if rules is None else rules:
        findings.extend(rule.check(text))
    return sorted(findings, key=lambda f: f.line or 0)
