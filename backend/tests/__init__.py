"""
Test Suite

This module contains all tests for the iRequest backend.

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Pytest fixtures (SQLite database, users, clients)
    ├── unit/               # Unit tests
    │   ├── test_engine/    # Lifecycle engine, permissions, transitions
    │   ├── test_repositories/
    │   ├── test_services/  # Service layer tests
    │   └── test_utils/     # Utility tests
    └── integration/        # Integration tests
        └── test_api/       # API endpoint tests

To run tests:
    pytest backend/tests/
    pytest backend/tests/unit/
    pytest backend/tests/integration/
"""
