"""
Resume Context

Responsibilities:
- Decodes resume documents (plain text, PDF, DOCX) into text
- Segments resume text into labeled sections
- Extracts name, email, skills, education, experience, projects, certifications

Owns: Resume text acquisition and field extraction
Never: Talks to the analysis backend or touches quota/cache state
"""
