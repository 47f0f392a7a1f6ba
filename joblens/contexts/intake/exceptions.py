"""Exceptions raised while extracting a job posting from a page."""


class ExtractionFailed(Exception):
    """
    Raised inside a site extractor when no job title can be resolved.

    The top-level extractor treats this as "no job on this page" and returns
    None; it never reaches callers of extract_job_data().
    """

    def __init__(self, site: str, url: str, reason: str = "no job title found"):
        self.site = site
        self.url = url
        self.reason = reason
        super().__init__(f"{site} extraction failed for {url}: {reason}")
