"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["AI_GATEWAY_API_KEY"] = "test-gateway-key"
    os.environ["RESEND_API_KEY"] = "test-resend-key"
    os.environ["RECALL_ENV"] = "test"
