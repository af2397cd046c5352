"""Test configuration and fixtures for the storefront."""

from tests.fixtures import *  # noqa: F401,F403
