"""
Integration tests.

These talk to a real Redis and are skipped unless USE_REAL_REDIS=1:

    USE_REAL_REDIS=1 pytest tests/integration -m integration
"""
