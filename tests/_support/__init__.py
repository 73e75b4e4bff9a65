"""
Test support utilities for warden tests.

Helpers that are not fixtures but are shared across test modules.
"""
