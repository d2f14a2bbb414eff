"""Tests for the pmap linter."""

from pmap.lint import (
    EmptyHeadingRule,
    MalformedImageRule,
    UnclosedMetadataRule,
    lint_text,
)


def test_clean_document_has_no_findings():
    """Test a well-formed document passes."""
    text = "---\ntitle: Ok\n---\n# Heading\n- item\n[image: a.png | alt]\nText"
    assert lint_text(text) == []


def test_unclosed_metadata():
    """Test the unclosed block is reported as an error."""
    findings = UnclosedMetadataRule().check("---\ntitle: Draft\n# Lost heading")
    assert len(findings) == 1
    assert findings[0].severity == "error"
    assert findings[0].line == 1


def test_unclosed_metadata_suppresses_body_rules():
    """Test lines swallowed by the block aren't linted as content."""
    findings = lint_text("---\n#\n[image:")
    assert [f.severity for f in findings] == ["error"]


def test_malformed_image():
    """Test image lines the parser would drop."""
    findings = MalformedImageRule().check("ok\n[image: a.png\n[image: b.png]")
    assert len(findings) == 1
    assert findings[0].line == 2
    assert findings[0].severity == "warn"


def test_empty_heading():
    """Test headings with no text."""
    findings = EmptyHeadingRule().check("# Fine\n###\n")
    assert [f.line for f in findings] == [2]


def test_metadata_lines_are_skipped():
    """Test the metadata block itself isn't linted as body."""
    findings = lint_text("---\n#\n-\n---\nBody")
    assert findings == []


def test_findings_sorted_by_line():
    """Test findings from all rules come back in line order."""
    findings = lint_text("-\n#\n[image:")
    assert [(f.line, f.severity) for f in findings] == [(1, "info"), (2, "warn"), (3, "warn")]


def test_byte_order_mark_before_metadata():
    """Test a BOM-prefixed closed block is not reported as unclosed."""
    assert lint_text("\ufeff---\ntitle: T\n---\nBody") == []
