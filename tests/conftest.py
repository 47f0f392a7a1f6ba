"""Shared fixtures: in-memory store, fake clocks, job page builders and a fake backend."""

import httpx
import pytest

from joblens.contexts.analysis.backend_client import BackendClient
from joblens.utils.kv_store import MemoryStore


class FakeClock:
    """Manually advanced clock; call it to read the time."""

    def __init__(self, start=0):
        self.value = start

    def __call__(self):
        return self.value

    def advance(self, amount):
        self.value += amount


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock(start=1_000.0)


@pytest.fixture
def ms_clock():
    return FakeClock(start=1_700_000_000_000)


LONG_DESCRIPTION = (
    "About the job. We are looking for a backend engineer to build data services. "
    "Responsibilities include designing APIs in Python and running them on AWS. "
    "Requirements: 3-5 years of experience with Python, Docker and PostgreSQL."
)


def linkedin_page(title="Senior Engineer", company="Acme Corp", description=LONG_DESCRIPTION, extra=""):
    """Minimal LinkedIn job details markup."""
    title_html = f'<h1 class="job-details-jobs-unified-top-card__job-title">{title}</h1>' if title else ""
    company_html = (
        f'<div class="job-details-jobs-unified-top-card__company-name"><a>{company}</a></div>'
        if company
        else ""
    )
    return f"""
    <html>
      <head><title>{title or 'Jobs'} | LinkedIn</title></head>
      <body>
        <nav>Home Jobs Messaging</nav>
        <div class="jobs-details">
          {title_html}
          {company_html}
          <span class="job-details-jobs-unified-top-card__bullet">Bengaluru, India</span>
          <div class="jobs-description__content"><p>{description}</p></div>
        </div>
        {extra}
      </body>
    </html>
    """


def generic_page(body, title="Careers"):
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture
def make_linkedin_page():
    return linkedin_page


@pytest.fixture
def make_generic_page():
    return generic_page


@pytest.fixture
def long_description():
    return LONG_DESCRIPTION


ANALYSIS_RESULT = {
    "match_percentage": 72,
    "matched_skills": ["python", "docker"],
    "missing_skills": ["postgresql"],
    "ats_keywords_missing": ["microservices"],
    "experience_required": "3-5 years",
    "hidden_requirements": [],
    "resume_improvement_suggestions": ["Quantify API latency work"],
    "recommended_projects": [],
    "confidence_score": 0.8,
}


class FakeBackend:
    """
    Request handler for httpx.MockTransport.

    Replies with status/body (JSON) or raw text, or raises error. Every
    request is recorded.
    """

    def __init__(self, status=200, body=None, text=None, error=None):
        self.status = status
        self.body = ANALYSIS_RESULT if body is None else body
        self.text = text
        self.error = error
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self):
        return httpx.MockTransport(self)

    def client_factory(self, base_url):
        return BackendClient(base_url, transport=self.transport)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def analysis_result():
    return dict(ANALYSIS_RESULT)


@pytest.fixture
def job_data():
    """Wire-shape posting with a description long enough to analyze."""
    return {
        "title": "Senior Engineer",
        "company": "Acme Corp",
        "location": "Bengaluru, India",
        "experience": "3-5 years",
        "salary": "Not disclosed",
        "description": LONG_DESCRIPTION,
        "skills": [],
        "site": "linkedin",
        "url": "https://www.linkedin.com/jobs/view/3812345678/",
        "extractedAt": "2024-05-01T10:00:00",
    }
