"""
Job Board API
A document-store backed job board: accounts, profiles, jobs and applications.

Architecture:
- MongoDB: Users and Jobs, each with embedded sub-collections
- FastAPI: REST/JSON surface with a {success, message, ...} envelope
- JWT: Bearer authentication for every mutation
"""

__version__ = "1.0.0"
