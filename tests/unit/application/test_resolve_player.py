"""Tests for ResolvePlayerUseCase."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from kodik_samples import (
    API_URL,
    PAGE_HTML,
    PAGE_URL,
    PLAIN_360,
    PLAYER_SCRIPT_URL,
    FakeTransport,
    FixedUserAgents,
    player_api_payload,
)

from kodikarr.application.use_cases.resolve_player import ResolvePlayerUseCase
from kodikarr.domain.exceptions import (
    InvalidResponseError,
    LinkDecodeError,
    MissingFieldError,
    NoDomainFoundError,
    NoEndpointMarkerError,
    TransportError,
)
from kodikarr.infrastructure.kodik.decoder import LinkDecoder, ShiftCache
from kodikarr.infrastructure.kodik.endpoint_cache import EndpointCache

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_uc(
    transport: FakeTransport,
    user_agents: FixedUserAgents,
    endpoint_cache: EndpointCache,
    shift_cache: ShiftCache,
) -> ResolvePlayerUseCase:
    return ResolvePlayerUseCase(
        transport=transport,
        user_agents=user_agents,
        endpoint_cache=endpoint_cache,
        link_decoder=LinkDecoder(shift_cache),
    )


@pytest.fixture()
def uc(
    fake_transport: FakeTransport,
    user_agents: FixedUserAgents,
    endpoint_cache: EndpointCache,
    shift_cache: ShiftCache,
) -> ResolvePlayerUseCase:
    return _make_uc(fake_transport, user_agents, endpoint_cache, shift_cache)


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestHappyPath:
    async def test_returns_decoded_links(self, uc: ResolvePlayerUseCase) -> None:
        response = await uc.execute(PAGE_URL)

        assert [link.src for link in response.links.quality_360] == [PLAIN_360]
        assert response.links.quality_480[0].src == PLAIN_360.replace(
            "/360.mp4", "/480.mp4"
        )
        assert response.links.quality_720[0].src == PLAIN_360.replace(
            "/360.mp4", "/720.mp4"
        )
        assert response.links.quality_720[0].mime_type == "application/x-mpegURL"

    async def test_request_sequence(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        await uc.execute(PAGE_URL)

        assert [url for url, _ in fake_transport.gets] == [
            PAGE_URL,
            PLAYER_SCRIPT_URL,
        ]
        assert [url for url, _, _ in fake_transport.posts] == [API_URL]

    async def test_page_fetch_sends_user_agent(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        await uc.execute(PAGE_URL)
        _, headers = fake_transport.gets[0]
        assert headers == {"User-Agent": "TestAgent/1.0"}

    async def test_api_headers(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        await uc.execute(PAGE_URL)
        _, headers, _ = fake_transport.posts[0]
        assert headers == {
            "Origin": "https://kodik.info",
            "Accept": "application/json, text/javascript, */*; q=0.01",
            "Referer": "https://kodik.info",
            "User-Agent": "TestAgent/1.0",
            "X-Requested-With": "XMLHttpRequest",
        }

    async def test_form_fields_in_order(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        await uc.execute(PAGE_URL)
        _, _, fields = fake_transport.posts[0]
        assert fields == [
            ("type", "video"),
            ("hash", "060cab655974d46835b3f4405807acc2"),
            ("id", "91873"),
            ("bad_user", "true"),
            ("info", "{}"),
            ("cdn_is_working", "true"),
        ]

    async def test_shift_is_remembered(
        self, uc: ResolvePlayerUseCase, shift_cache: ShiftCache
    ) -> None:
        await uc.execute(PAGE_URL)
        assert shift_cache.get() == 8


# ---------------------------------------------------------------------------
# Endpoint cache
# ---------------------------------------------------------------------------


class TestEndpointCacheReuse:
    async def test_second_call_skips_player_script(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        await uc.execute(PAGE_URL)
        await uc.execute(PAGE_URL)

        fetched = [url for url, _ in fake_transport.gets]
        assert fetched.count(PLAYER_SCRIPT_URL) == 1
        assert fetched.count(PAGE_URL) == 2
        assert len(fake_transport.posts) == 2

    async def test_cache_shared_between_use_cases(
        self,
        user_agents: FixedUserAgents,
        endpoint_cache: EndpointCache,
        shift_cache: ShiftCache,
    ) -> None:
        first = FakeTransport(
            pages={PAGE_URL: PAGE_HTML, PLAYER_SCRIPT_URL: "console.log(1)"},
            api_payload=player_api_payload(),
        )
        second = FakeTransport(
            pages={PAGE_URL: PAGE_HTML},
            api_payload=player_api_payload(),
        )

        # No endpoint marker: nothing is cached
        with pytest.raises(NoEndpointMarkerError):
            await _make_uc(first, user_agents, endpoint_cache, shift_cache).execute(
                PAGE_URL
            )
        assert endpoint_cache.try_read() is None
        assert first.posts == []

        async def _script(url: str) -> str:
            return '$.ajax({type:"POST",url:atob("L2d2aQ=="),cache:!1})'

        await endpoint_cache.discover_if_absent("kodik.info", PAGE_HTML, _script)
        await _make_uc(second, user_agents, endpoint_cache, shift_cache).execute(
            PAGE_URL
        )
        assert [url for url, _ in second.gets] == [PAGE_URL]
        assert second.posts[0][0] == "https://kodik.info/gvi"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    async def test_no_domain(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        with pytest.raises(NoDomainFoundError):
            await uc.execute("not a url")
        assert fake_transport.gets == []

    async def test_missing_hash_stops_before_discovery(
        self,
        user_agents: FixedUserAgents,
        endpoint_cache: EndpointCache,
        shift_cache: ShiftCache,
    ) -> None:
        page = PAGE_HTML.replace(
            "videoInfo.hash = '060cab655974d46835b3f4405807acc2';", ""
        )
        transport = FakeTransport(pages={PAGE_URL: page})

        with pytest.raises(MissingFieldError) as exc_info:
            await _make_uc(transport, user_agents, endpoint_cache, shift_cache).execute(
                PAGE_URL
            )

        assert exc_info.value.field == "hash"
        assert [url for url, _ in transport.gets] == [PAGE_URL]
        assert transport.posts == []
        assert endpoint_cache.try_read() is None

    async def test_page_fetch_error_propagates(
        self,
        user_agents: FixedUserAgents,
        endpoint_cache: EndpointCache,
        shift_cache: ShiftCache,
    ) -> None:
        error = TransportError("connection refused", url=PAGE_URL)
        transport = FakeTransport(get_error=error)

        with pytest.raises(TransportError) as exc_info:
            await _make_uc(transport, user_agents, endpoint_cache, shift_cache).execute(
                PAGE_URL
            )

        assert exc_info.value is error
        assert len(transport.gets) == 1

    async def test_api_error_propagates(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        error = TransportError("bad gateway", url=API_URL)
        fake_transport.post_error = error

        with pytest.raises(TransportError) as exc_info:
            await uc.execute(PAGE_URL)

        assert exc_info.value is error
        assert len(fake_transport.posts) == 1

    async def test_response_without_links(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        fake_transport.api_payload = {"advert_script": ""}
        with pytest.raises(InvalidResponseError):
            await uc.execute(PAGE_URL)

    async def test_undecodable_link(
        self, uc: ResolvePlayerUseCase, fake_transport: FakeTransport
    ) -> None:
        fake_transport.api_payload = {
            "links": {"360": [{"src": "!!!", "type": "application/x-mpegURL"}]}
        }
        with pytest.raises(LinkDecodeError):
            await uc.execute(PAGE_URL)


# ---------------------------------------------------------------------------
# Decoding happens once per call
# ---------------------------------------------------------------------------


class TestSingleDecode:
    async def test_decode_all_called_once(self, uc: ResolvePlayerUseCase) -> None:
        original = LinkDecoder.decode_all
        with patch.object(
            LinkDecoder, "decode_all", autospec=True, side_effect=original
        ) as spy:
            await uc.execute(PAGE_URL)

        assert spy.call_count == 1

    async def test_links_are_plain_after_call(self, uc: ResolvePlayerUseCase) -> None:
        response = await uc.execute(PAGE_URL)
        for link in response.links.quality_360 + response.links.quality_720:
            assert link.src.startswith("https://")
