"""Test configuration and fixtures for the membership registry."""

from tests.fixtures import *  # noqa: F401,F403
