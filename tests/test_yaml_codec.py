"""Tests for document serialization."""

import json

import pytest
import yaml

from pmap.adapters.pmap_parser import parse_pmap
from pmap.adapters.yaml_codec import (
    document_from_dict,
    document_to_dict,
    dump_json,
    dump_yaml,
    section_from_dict,
    section_to_dict,
)
from pmap.core.model import LinkSection, PmapData

SAMPLE = """---
title: Sample
---
# Intro
Hello **world**
- one
- two
[image: pic.png | A picture]
"""


def test_document_to_dict_shape():
    """Test each section only carries its own fields."""
    data = document_to_dict(parse_pmap(SAMPLE))
    assert data == {
        "title": "Sample",
        "sections": [
            {"type": "heading", "content": "Intro", "level": 1},
            {"type": "text", "content": "Hello **world**"},
            {"type": "list", "items": ["one", "two"]},
            {"type": "image", "url": "pic.png", "alt": "A picture"},
        ],
    }


def test_missing_metadata_is_omitted():
    """Test title/description keys are absent rather than null."""
    data = document_to_dict(parse_pmap("Just text"))
    assert "title" not in data
    assert "description" not in data


def test_from_dict_restores_document():
    """Test a serialized document reads back equal."""
    doc = parse_pmap(SAMPLE)
    assert document_from_dict(document_to_dict(doc)) == doc


def test_link_section_serializes():
    """Test the reserved link kind still has a wire form."""
    section = LinkSection(url="https://example.com", content="Example")
    data = section_to_dict(section)
    assert data == {"type": "link", "url": "https://example.com", "content": "Example"}
    assert section_from_dict(data) == section


def test_unknown_section_type_raises():
    """Test malformed serialized input is rejected."""
    with pytest.raises(ValueError, match="Unknown section type"):
        section_from_dict({"type": "table"})


def test_dump_json():
    """Test JSON output parses back to the dict form."""
    doc = parse_pmap(SAMPLE)
    assert json.loads(dump_json(doc)) == document_to_dict(doc)


def test_dump_yaml_keeps_key_order_and_unicode():
    """Test YAML output keeps metadata first and non-ASCII text readable."""
    doc = PmapData(title="Café", sections=())
    out = dump_yaml(doc)
    assert out.startswith("title: Café")
    assert yaml.safe_load(out) == {"title": "Café", "sections": []}
