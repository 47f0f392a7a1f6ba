"""
Intake Context

Responsibilities:
- Detects which job site (if any) a page belongs to
- Extracts a structured job posting through per-site selector cascades
- Tracks the job currently being viewed and decides new/same/stale

Owns: Job page extraction and job identity
Never: Parses resumes or calls the analysis backend
"""
