"""
Analysis Context

Responsibilities:
- Guards the backend analysis call with a daily quota and a per-URL result cache
- Talks to the analysis backend (/analyze, /health)
- Routes typed messages between execution contexts and pushes results to tabs
- Persists resume, settings, history and per-tab job state

Owns: Quota ledger, result cache, backend client, message boundary
Never: Parses pages or resumes itself
"""
