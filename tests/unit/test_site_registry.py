"""Unit tests for SiteSelectorRegistry."""

import pytest

from joblens.contexts.intake.site_registry import SiteSelectorRegistry, SiteSelectors

CUSTOM_SELECTORS = """
sites:
  acme:
    url_pattern: 'acme\\.example/jobs'
    title: [h1.job]
    company: []
    location: []
    description: [.desc]
    salary: []
    skills: .chip
    live:
      title: [h1.job, h2]
      title_from_document: true
description_fallbacks:
  - main
  - body
"""


@pytest.fixture
def custom_registry(tmp_path):
    path = tmp_path / "selectors.yaml"
    path.write_text(CUSTOM_SELECTORS, encoding="utf-8")
    return SiteSelectorRegistry(selectors_path=path)


@pytest.mark.unit
def test_default_registry_sites():
    """Test the packaged selectors cover every supported site."""
    registry = SiteSelectorRegistry()
    assert registry.selectors_path.exists()
    assert registry.site_keys() == ["linkedin", "internshala", "generic"]


@pytest.mark.unit
def test_selectors_cached():
    registry = SiteSelectorRegistry()

    first = registry.get_selectors("linkedin")
    assert registry.get_selectors("linkedin") is first
    assert registry.get_selectors("linkedin", live=True) is not first


@pytest.mark.unit
def test_live_overrides_replace_cascades():
    registry = SiteSelectorRegistry()
    base = registry.get_selectors("linkedin")
    live = registry.get_selectors("linkedin", live=True)

    assert base.title_from_document is False
    assert live.title_from_document is True
    assert live.title != base.title
    assert live.salary == ()
    assert live.skills == ""
    # Fields without an override keep the base cascade
    assert live.url_pattern == base.url_pattern


@pytest.mark.unit
def test_internshala_body_fallback():
    selectors = SiteSelectorRegistry().get_selectors("internshala")
    assert selectors.description_body_chars == 5000
    assert selectors.matches_url("https://internshala.com/internship/detail/x")


@pytest.mark.unit
def test_generic_has_no_url_pattern():
    selectors = SiteSelectorRegistry().get_selectors("generic")
    assert selectors.url_pattern == ""
    assert not selectors.matches_url("https://example.com/jobs/1")


@pytest.mark.unit
def test_unknown_site():
    with pytest.raises(KeyError, match="monster"):
        SiteSelectorRegistry().get_selectors("monster")


@pytest.mark.unit
def test_missing_selectors_file(tmp_path):
    registry = SiteSelectorRegistry(selectors_path=tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        registry.get_selectors("linkedin")


@pytest.mark.unit
def test_description_fallbacks_end_with_body():
    fallbacks = SiteSelectorRegistry().description_fallbacks()
    assert fallbacks[0] == ".jobs-description__content"
    assert fallbacks[-1] == "body"


@pytest.mark.unit
def test_custom_selectors_file(custom_registry):
    selectors = custom_registry.get_selectors("acme")

    assert selectors == SiteSelectors(
        site="acme",
        url_pattern=r"acme\.example/jobs",
        title=("h1.job",),
        company=(),
        location=(),
        description=(".desc",),
        salary=(),
        skills=".chip",
    )
    assert selectors.matches_url("https://ACME.example/jobs/9")
    assert custom_registry.get_selectors("acme", live=True).title == ("h1.job", "h2")
    assert custom_registry.description_fallbacks() == ("main", "body")


@pytest.mark.unit
def test_clear_cache(custom_registry):
    first = custom_registry.get_selectors("acme")
    custom_registry.clear_cache()
    reloaded = custom_registry.get_selectors("acme")

    assert reloaded is not first
    assert reloaded == first
