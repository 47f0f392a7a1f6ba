import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
SELECTORS_PATH = Path(
    os.getenv("SITE_SELECTORS_PATH", str(Path(__file__).parent / "site_selectors.yaml"))
)


@dataclass(frozen=True)
class SiteSelectors:
    """
    Selector cascades for one site.

    Attributes:
        site: Site key in the selectors file
        url_pattern: Regex that identifies the site from a URL ("" for generic)
        title / company / location / description / salary: Ordered CSS selectors
        skills: One CSS selector list whose every match is a skill chip ("" for none)
        title_from_document: Fall back to the tab title when no title selector matches
        description_body_chars: Fall back to this much body text when no
            description container exists (0 disables)
    """

    site: str
    url_pattern: str
    title: tuple[str, ...]
    company: tuple[str, ...]
    location: tuple[str, ...]
    description: tuple[str, ...]
    salary: tuple[str, ...]
    skills: str
    title_from_document: bool = False
    description_body_chars: int = 0

    def matches_url(self, url: str) -> bool:
        return bool(self.url_pattern) and re.search(self.url_pattern, url or "", re.IGNORECASE) is not None

    @classmethod
    def from_config(cls, site: str, config: Dict[str, Any]) -> "SiteSelectors":
        return cls(
            site=site,
            url_pattern=config.get("url_pattern") or "",
            title=tuple(config.get("title") or ()),
            company=tuple(config.get("company") or ()),
            location=tuple(config.get("location") or ()),
            description=tuple(config.get("description") or ()),
            salary=tuple(config.get("salary") or ()),
            skills=config.get("skills") or "",
            title_from_document=bool(config.get("title_from_document", False)),
            description_body_chars=int(config.get("description_body_chars") or 0),
        )


class SiteSelectorRegistry:
    """
    Registry for loading and caching per-site selector cascades.

    Selectors live in site_selectors.yaml (override with SITE_SELECTORS_PATH) so
    a site redesign is a data change rather than a code change.
    """

    def __init__(self, selectors_path: Path = None):
        """
        Initialize the selector registry.

        Args:
            selectors_path: Path to the selectors YAML. Defaults to
                           SITE_SELECTORS_PATH from environment
        """
        if selectors_path is None:
            selectors_path = SELECTORS_PATH

        self.selectors_path = Path(selectors_path)
        self._config: Optional[Dict[str, Any]] = None
        self._cache: Dict[tuple[str, bool], SiteSelectors] = {}

    def _load(self) -> Dict[str, Any]:
        if self._config is None:
            if not self.selectors_path.exists():
                raise FileNotFoundError(f"Site selectors not found at {self.selectors_path}")
            config = OmegaConf.load(self.selectors_path)
            self._config = OmegaConf.to_container(config, resolve=True)
        return self._config

    def get_selectors(self, site: str, live: bool = False) -> SiteSelectors:
        """
        Get the selector cascades for a site, loading and caching if necessary.

        Args:
            site: Site key (e.g., 'linkedin')
            live: Apply the site's "live" overrides used during page-change detection

        Returns:
            SiteSelectors for the site

        Raises:
            KeyError: If the site has no entry
        """
        key = (site, live)
        if key in self._cache:
            return self._cache[key]

        sites = self._load().get("sites") or {}
        if site not in sites:
            raise KeyError(f"No selectors configured for site '{site}'")

        config = dict(sites[site])
        overrides = config.pop("live", None) or {}
        if live:
            config.update(overrides)

        selectors = SiteSelectors.from_config(site, config)
        self._cache[key] = selectors
        return selectors

    def site_keys(self) -> list[str]:
        """Configured sites in file order."""
        return list((self._load().get("sites") or {}).keys())

    def description_fallbacks(self) -> tuple[str, ...]:
        """Selectors searched when a description is too short."""
        return tuple(self._load().get("description_fallbacks") or ())

    def clear_cache(self):
        """Drop loaded selectors so the file is re-read on next use."""
        self._config = None
        self._cache.clear()
