"""Unit tests for the autologin handshake.

Tests ClientBuilder.authenticate with a stub intranet:
- Cookie extraction from Set-Cookie headers
- Session cookie attached to every later request
- Own-profile lookup sets the client login
- Failure kinds: UnreachableRemote, InvalidStatusCode, CookieNotFound,
  InternalError, and propagated self-fetch failures
"""

import httpx
import pytest

from epitech_intra.auth import ClientBuilder, extract_session_cookie
from epitech_intra.client import IntraClient
from epitech_intra.config import IntraConfig
from epitech_intra.errors import (
    CookieNotFoundError,
    InternalError,
    InvalidStatusCodeError,
    ParserError,
    RetryLimitError,
    UnreachableRemoteError,
)
from intranet_test_helpers import AUTOLOGIN, AUTOLOGIN_PATH, SESSION_COOKIE


def _builder(stub, config) -> ClientBuilder:
    return ClientBuilder(AUTOLOGIN, config=config, http_transport=stub.transport)


class TestExtractSessionCookie:
    """Test Set-Cookie scanning."""

    def test_picks_user_cookie_among_others(self):
        response = httpx.Response(
            302,
            headers=[
                ("Set-Cookie", "language=fr; Path=/"),
                ("Set-Cookie", "user=abc123; Path=/; HttpOnly"),
            ],
        )
        assert extract_session_cookie(response) == "user=abc123"

    def test_cookie_without_attributes(self):
        response = httpx.Response(302, headers={"Set-Cookie": "user=abc123"})
        assert extract_session_cookie(response) == "user=abc123"

    def test_first_user_cookie_wins(self):
        response = httpx.Response(
            302,
            headers=[("Set-Cookie", "user=first; Path=/"), ("Set-Cookie", "user=second")],
        )
        assert extract_session_cookie(response) == "user=first"

    def test_prefix_must_match_exactly(self):
        response = httpx.Response(
            302, headers=[("Set-Cookie", "username=abc"), ("Set-Cookie", "xuser=abc")]
        )
        assert extract_session_cookie(response) is None

    def test_no_cookie_header(self):
        assert extract_session_cookie(httpx.Response(302)) is None


class TestAuthenticateSuccess:
    """Test the complete handshake."""

    @pytest.mark.asyncio
    async def test_client_login_matches_profile(self, logged_in_stub, intra_config):
        client = await _builder(logged_in_stub, intra_config).authenticate()

        assert isinstance(client, IntraClient)
        assert client.login == "jane.doe@epitech.eu"
        assert client.autologin == AUTOLOGIN
        await client.aclose()

    @pytest.mark.asyncio
    async def test_redirect_not_followed(self, logged_in_stub, intra_config):
        client = await _builder(logged_in_stub, intra_config).authenticate()

        # Redirect target "/" never requested
        assert logged_in_stub.requests_to("/") == []
        assert len(logged_in_stub.requests_to(AUTOLOGIN_PATH)) == 1
        await client.aclose()

    @pytest.mark.asyncio
    async def test_profile_fetched_with_session_cookie(self, logged_in_stub, intra_config):
        client = await _builder(logged_in_stub, intra_config).authenticate()

        (profile_request,) = logged_in_stub.requests_to("/user")
        assert profile_request.headers["Cookie"] == SESSION_COOKIE
        assert profile_request.url.params["format"] == "json"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_later_requests_carry_cookie(self, logged_in_stub, intra_config):
        logged_in_stub.add_json("/user/filter/location", [])
        async with await _builder(logged_in_stub, intra_config).authenticate() as client:
            await client.fetch_locations()

        (request,) = logged_in_stub.requests_to("/user/filter/location")
        assert request.headers["Cookie"] == SESSION_COOKIE

    @pytest.mark.asyncio
    async def test_retry_count_applied(self, logged_in_stub, intra_config):
        builder = _builder(logged_in_stub, intra_config).retry_count(7)
        async with await builder.authenticate() as client:
            assert client.retry_count == 7

    @pytest.mark.asyncio
    async def test_default_retry_count_from_config(self, logged_in_stub):
        config = IntraConfig(_env_file=None)
        async with await _builder(logged_in_stub, config).authenticate() as client:
            assert client.retry_count == 5

    @pytest.mark.asyncio
    async def test_not_memoized(self, logged_in_stub, intra_config):
        builder = _builder(logged_in_stub, intra_config)
        first = await builder.authenticate()
        second = await builder.authenticate()

        assert first is not second
        assert first.transport is not second.transport
        assert len(logged_in_stub.requests_to(AUTOLOGIN_PATH)) == 2
        await first.aclose()
        await second.aclose()

    @pytest.mark.asyncio
    async def test_fluent_builder(self, logged_in_stub, intra_config):
        builder = ClientBuilder(config=intra_config, http_transport=logged_in_stub.transport)
        client = await builder.autologin(AUTOLOGIN).authenticate()
        assert client.login == "jane.doe@epitech.eu"
        await client.aclose()

    def test_from_config_reads_autologin(self):
        config = IntraConfig(_env_file=None, intra_autologin=AUTOLOGIN, intra_retry_count=2)
        builder = ClientBuilder.from_config(config)
        assert builder._autologin == AUTOLOGIN
        assert builder._retry_count == 2

    def test_builder_entry_point_on_client(self):
        assert isinstance(IntraClient.builder(), ClientBuilder)


class TestAuthenticateFailures:
    """Test each handshake failure kind."""

    @pytest.mark.asyncio
    async def test_url_without_scheme_is_unreachable(self, intra_config):
        with pytest.raises(UnreachableRemoteError):
            await ClientBuilder("toto", config=intra_config).authenticate()

    @pytest.mark.asyncio
    async def test_connect_failure_is_unreachable(self, intra_config):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        builder = ClientBuilder(
            AUTOLOGIN, config=intra_config, http_transport=httpx.MockTransport(refuse)
        )
        with pytest.raises(UnreachableRemoteError):
            await builder.authenticate()

    @pytest.mark.asyncio
    async def test_error_status_is_invalid_status_code(self, stub, intra_config):
        stub.add_json(AUTOLOGIN_PATH, {"message": "Invalid autologin"}, status_code=403)

        with pytest.raises(InvalidStatusCodeError) as exc_info:
            await _builder(stub, intra_config).authenticate()

        assert exc_info.value.status_code == 403
        assert "403" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_cookie(self, stub, intra_config):
        stub.add_login_redirect("language=fr; Path=/")

        with pytest.raises(CookieNotFoundError):
            await _builder(stub, intra_config).authenticate()

        # No profile lookup without a session
        assert stub.requests_to("/user") == []

    @pytest.mark.asyncio
    async def test_no_autologin_is_internal_error(self, intra_config):
        with pytest.raises(InternalError):
            await ClientBuilder(config=intra_config).authenticate()

    @pytest.mark.asyncio
    async def test_unparseable_profile_propagates(self, stub, intra_config):
        stub.add_login_redirect(SESSION_COOKIE)
        stub.add("/user", lambda request: httpx.Response(200, text="<html>login</html>"))

        with pytest.raises(ParserError):
            await _builder(stub, intra_config).authenticate()

    @pytest.mark.asyncio
    async def test_unreachable_profile_propagates(self, stub, intra_config):
        stub.add_login_redirect(SESSION_COOKIE)

        def drop(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        stub.add("/user", drop)

        with pytest.raises(RetryLimitError):
            await _builder(stub, intra_config).authenticate()

        assert len(stub.requests_to("/user")) == intra_config.intra_retry_count

    def test_invalid_retry_count_rejected(self):
        with pytest.raises(ValueError):
            ClientBuilder(AUTOLOGIN).retry_count(0)
