"""Unit tests for the chat record store.

Entity helpers and repository behavior are exercised against a fresh
in-memory SQLite database per test.
"""
