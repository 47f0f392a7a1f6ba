"""
JobLens - job posting and resume extraction with a guarded match analysis

Extracts structured records from job pages and resumes, tracks which job is
currently being viewed, and guards the paid analysis call with a daily quota
and a result cache.

Architecture:
- Intake Context: Job page extraction, identity and change detection
- Resume Context: Resume decoding, section segmentation and field extraction
- Analysis Context: Quota ledger, result cache, backend client and coordinator
"""

__version__ = "0.1.0"
