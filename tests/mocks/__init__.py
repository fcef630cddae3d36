"""
Test doubles for DevEnvKit tests.
"""

from .runner import FakeRunner

__all__ = ["FakeRunner"]
