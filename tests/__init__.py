#!/usr/bin/env python3
"""
Test suite for the kudos notification dispatcher.

    # Run all tests
    python -m pytest tests/ -v

    # Skip the tests that build a SQLite database
    python -m pytest tests/ -v -m "not db"

Database tests use a throwaway SQLite file per test (see conftest.py); no
external services are needed.
"""
