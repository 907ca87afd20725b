"""Integration tests for pytoon library.

These tests use real API credentials and make actual API calls. They are
marked with @pytest.mark.integration and skipped when credentials are missing.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables (or entries in a .env file at the project root):
    TOONAPI_TEST_USERNAME: Tenant account name
    TOONAPI_TEST_PASSWORD: Tenant account password
    TOONAPI_TEST_CONSUMER_KEY: Toon API consumer key
    TOONAPI_TEST_CONSUMER_SECRET: Toon API consumer secret
    TOONAPI_TEST_TENANT_ID: Tenant identifier (optional, defaults to eneco)
    TOONAPI_TEST_BASE_URL: API base URL (optional, defaults to production)
"""
