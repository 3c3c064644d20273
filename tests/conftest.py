"""Test configuration for the user manager."""

from tests.fixtures import *  # noqa: F401,F403
