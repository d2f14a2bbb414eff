"""Tests for heading slugs."""

from pmap.core.utils import SlugRegistry, slugify


def test_slugify_basic():
    """Test basic slugification."""
    assert slugify("Getting started") == "getting-started"
    assert slugify("Hello World") == "hello-world"


def test_slugify_drops_markup_and_punctuation():
    """Test inline markup characters don't leak into ids."""
    assert slugify("**Bold** move!") == "bold-move"
    assert slugify("[Docs](http://x)") == "docshttpx"


def test_slugify_accents_and_dashes():
    """Test accents are stripped and dash variants collapse."""
    assert slugify("Café — menu") == "cafe-menu"
    assert slugify("Riemann–Christoffel") == "riemann-christoffel"


def test_slugify_empty():
    """Test empty and punctuation-only text."""
    assert slugify("") == ""
    assert slugify("!!!") == ""


def test_registry_deduplicates():
    """Test repeated headings get numbered slugs."""
    slugs = SlugRegistry()
    assert slugs.unique("Intro") == "intro"
    assert slugs.unique("Intro") == "intro-1"
    assert slugs.unique("intro") == "intro-2"
    assert slugs.unique("") == "section"
