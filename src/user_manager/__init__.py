"""User management service.

This package contains the user record model, its validation rules, the
service that orchestrates persistence, and the HTTP surface on top of it.
"""

__version__ = "0.1.0"
