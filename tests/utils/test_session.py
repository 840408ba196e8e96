"""
Tests for session utilities.
"""

import httpx

from hdfs_landing.utils import create_session_with_retry


class TestSessionUtilities:
    """Test session utility functions."""

    def test_create_session_with_retry(self):
        """Test the default client."""
        session = create_session_with_retry()

        assert isinstance(session, httpx.Client)
        assert session.timeout.connect == 30.0
        assert session.timeout.read == 300.0
        assert session.follow_redirects
        assert not session.is_closed
        session.close()

    def test_basic_auth(self):
        """Test credentials become basic authentication."""
        session = create_session_with_retry(auth=("svc_user", "secret"), verify=False, timeout=5.0)
        assert isinstance(session.auth, httpx.BasicAuth)
        assert session.timeout.connect == 5.0
        session.close()

    def test_basic_auth_header_sent(self, httpx_mock):
        """Test the Authorization header reaches the server."""
        route = httpx_mock.get("https://knox.example.com/x").mock(return_value=httpx.Response(200))
        with create_session_with_retry(auth=("svc_user", "secret")) as session:
            session.get("https://knox.example.com/x")
        assert route.calls.last.request.headers["Authorization"].startswith("Basic ")
