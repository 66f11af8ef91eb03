"""
Exercise engine test suite.

    tests/
    ├── conftest.py   # Fixtures: fake inference backend, in-memory store, exercise builders
    └── unit/         # Isolated tests; Redis and LiteLLM are mocked

Run from the repository root:

    pytest -v
    pytest backend/tests/unit/test_scoring.py -v
"""
