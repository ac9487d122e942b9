"""Warden: user authentication, session cookies and user/role administration."""

__version__ = "0.1.0"
