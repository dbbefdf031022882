"""Membership registry service.

Registration, referee confirmation, member profiles and credentials,
served over a FastAPI HTTP API.
"""

__version__ = "0.1.0"
