"""Integration tests for HOIST.

These tests drive the real git binary against throwaway repositories under
the pytest temporary directory. No network access or credentials are needed.
They are skipped when git is not installed or is older than 2.32.

Tests are marked with @pytest.mark.integration and can be run with:
    pytest tests/integration/ -m integration

To skip integration tests:
    pytest -m "not integration"
"""
