"""Shared pytest fixtures."""

from .app import *  # noqa: F401,F403
from .backend import *  # noqa: F401,F403
