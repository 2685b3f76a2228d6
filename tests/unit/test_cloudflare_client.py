"""
tests/unit/test_cloudflare_client.py

Unit tests for providers/cloudflare_client.py.
All Cloudflare API calls are intercepted by respx — no real network traffic.
"""

from __future__ import annotations

import json
import pytest
import httpx

from providers.cloudflare_client import CloudflareClient, create_verified_client
from providers.dns_provider import DnsRecord, Zone
from exceptions import ConfigError, DnsProviderError

_ZONE = "zone123"
_TOKEN = "test-token"
_BASE = "https://api.cloudflare.com/client/v4"


def _cf_response(result, success=True, result_info=None):
    """Helper: build a Cloudflare-shaped JSON response dict."""
    body = {"success": success, "result": result, "errors": []}
    if result_info is not None:
        body["result_info"] = result_info
    return body


def _record_dict(**kwargs):
    return {
        "id": kwargs.get("id", "rec1"),
        "name": kwargs.get("name", "home.example.com"),
        "content": kwargs.get("content", "203.0.113.5"),
        "type": kwargs.get("type", "A"),
        "ttl": 1,
        "proxied": kwargs.get("proxied", False),
        "zone_id": _ZONE,
    }


# ---------------------------------------------------------------------------
# verify_token / create_verified_client
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_verify_token_returns_status(mock_http):
    """verify_token returns the status reported by Cloudflare."""
    route = mock_http.get(f"{_BASE}/user/tokens/verify").mock(
        return_value=httpx.Response(200, json=_cf_response({"id": "tok", "status": "active"}))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        status = await cf.verify_token()

    assert status == "active"
    assert route.calls.last.request.headers["Authorization"] == f"Bearer {_TOKEN}"


@pytest.mark.asyncio
async def test_create_verified_client_rejects_empty_token(mock_http):
    """An empty token is a configuration error raised before any request."""
    route = mock_http.get(f"{_BASE}/user/tokens/verify")
    async with httpx.AsyncClient() as client:
        with pytest.raises(ConfigError):
            await create_verified_client(client, "")

    assert not route.called


@pytest.mark.asyncio
async def test_create_verified_client_rejects_inactive_token(mock_http):
    """A token Cloudflare reports as disabled is a configuration error."""
    mock_http.get(f"{_BASE}/user/tokens/verify").mock(
        return_value=httpx.Response(200, json=_cf_response({"id": "tok", "status": "disabled"}))
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(ConfigError, match="disabled"):
            await create_verified_client(client, _TOKEN)


@pytest.mark.asyncio
async def test_create_verified_client_returns_client_for_active_token(mock_http):
    mock_http.get(f"{_BASE}/user/tokens/verify").mock(
        return_value=httpx.Response(200, json=_cf_response({"id": "tok", "status": "active"}))
    )
    async with httpx.AsyncClient() as client:
        cf = await create_verified_client(client, _TOKEN)

    assert isinstance(cf, CloudflareClient)


@pytest.mark.asyncio
async def test_verify_token_raises_on_http_error(mock_http):
    """verify_token raises DnsProviderError on HTTP 401."""
    mock_http.get(f"{_BASE}/user/tokens/verify").mock(
        return_value=httpx.Response(401, json={"success": False, "errors": [{"message": "Invalid API Token"}]})
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        with pytest.raises(DnsProviderError):
            await cf.verify_token()


# ---------------------------------------------------------------------------
# get_zone
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_zone_returns_exact_match(mock_http):
    """get_zone returns the zone whose name equals the requested domain."""
    route = mock_http.get(f"{_BASE}/zones").mock(
        return_value=httpx.Response(200, json=_cf_response([
            {"id": "other", "name": "sub.example.com"},
            {"id": _ZONE, "name": "example.com"},
        ]))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        zone = await cf.get_zone("example.com")

    assert zone == Zone(id=_ZONE, name="example.com")
    assert route.calls.last.request.url.params["name"] == "example.com"


@pytest.mark.asyncio
async def test_get_zone_returns_none_when_not_found(mock_http):
    """get_zone returns None when the result list is empty."""
    mock_http.get(f"{_BASE}/zones").mock(
        return_value=httpx.Response(200, json=_cf_response([]))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        zone = await cf.get_zone("missing.org")

    assert zone is None


# ---------------------------------------------------------------------------
# list_records
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_records_returns_all_records(mock_http):
    """list_records returns every record as DnsRecord instances."""
    records = [
        _record_dict(id="r1", name="a.example.com"),
        _record_dict(id="r2", name="a.example.com", type="AAAA", content="2001:db8::1"),
    ]
    mock_http.get(f"{_BASE}/zones/{_ZONE}/dns_records").mock(
        return_value=httpx.Response(200, json=_cf_response(
            records, result_info={"page": 1, "per_page": 100, "total_pages": 1}
        ))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        result = await cf.list_records(_ZONE)

    assert len(result) == 2
    assert all(isinstance(r, DnsRecord) for r in result)
    assert [r.type for r in result] == ["A", "AAAA"]


@pytest.mark.asyncio
async def test_list_records_follows_pagination(mock_http):
    """list_records keeps requesting pages until total_pages is reached."""
    route = mock_http.get(f"{_BASE}/zones/{_ZONE}/dns_records").mock(
        side_effect=[
            httpx.Response(200, json=_cf_response(
                [_record_dict(id="r1")], result_info={"page": 1, "total_pages": 2}
            )),
            httpx.Response(200, json=_cf_response(
                [_record_dict(id="r2")], result_info={"page": 2, "total_pages": 2}
            )),
        ]
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        result = await cf.list_records(_ZONE)

    assert [r.id for r in result] == ["r1", "r2"]
    assert route.call_count == 2
    assert route.calls[1].request.url.params["page"] == "2"


@pytest.mark.asyncio
async def test_list_records_raises_on_api_failure(mock_http):
    """list_records raises DnsProviderError when success=false."""
    mock_http.get(f"{_BASE}/zones/{_ZONE}/dns_records").mock(
        return_value=httpx.Response(200, json={"success": False, "errors": [{"message": "bad zone"}], "result": []})
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        with pytest.raises(DnsProviderError):
            await cf.list_records(_ZONE)


@pytest.mark.asyncio
async def test_list_records_raises_on_network_error(mock_http):
    mock_http.get(f"{_BASE}/zones/{_ZONE}/dns_records").mock(
        side_effect=httpx.ConnectError("unreachable")
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        with pytest.raises(DnsProviderError):
            await cf.list_records(_ZONE)


# ---------------------------------------------------------------------------
# create_record / update_record / delete_record
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_record_sends_type_content_and_proxied(mock_http):
    """create_record POSTs the full record and returns the created DnsRecord."""
    route = mock_http.post(f"{_BASE}/zones/{_ZONE}/dns_records").mock(
        return_value=httpx.Response(200, json=_cf_response(
            _record_dict(id="new", type="AAAA", content="2001:db8::5", proxied=True)
        ))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        result = await cf.create_record(_ZONE, "AAAA", "home.example.com", "2001:db8::5", True)

    payload = json.loads(route.calls.last.request.content)
    assert payload == {
        "type": "AAAA",
        "name": "home.example.com",
        "content": "2001:db8::5",
        "ttl": 1,
        "proxied": True,
    }
    assert result.id == "new"
    assert result.proxied is True


@pytest.mark.asyncio
async def test_update_record_patches_content_and_proxied(mock_http):
    """update_record PATCHes only content and proxied."""
    existing = DnsRecord(id="rec1", name="home.example.com", content="203.0.113.5",
                         type="A", proxied=False, ttl=1, zone_id=_ZONE)
    route = mock_http.patch(f"{_BASE}/zones/{_ZONE}/dns_records/rec1").mock(
        return_value=httpx.Response(200, json=_cf_response(_record_dict(content="203.0.113.9")))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        result = await cf.update_record(_ZONE, existing, "203.0.113.9", False)

    assert json.loads(route.calls.last.request.content) == {"content": "203.0.113.9", "proxied": False}
    assert result.content == "203.0.113.9"


@pytest.mark.asyncio
async def test_delete_record_issues_delete(mock_http):
    route = mock_http.delete(f"{_BASE}/zones/{_ZONE}/dns_records/rec1").mock(
        return_value=httpx.Response(200, json=_cf_response({"id": "rec1"}))
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        await cf.delete_record(_ZONE, "rec1")

    assert route.called


@pytest.mark.asyncio
async def test_delete_record_raises_on_http_error(mock_http):
    """delete_record raises DnsProviderError on HTTP 404."""
    mock_http.delete(f"{_BASE}/zones/{_ZONE}/dns_records/gone").mock(
        return_value=httpx.Response(404, json={"success": False, "errors": [{"message": "Record not found"}]})
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        with pytest.raises(DnsProviderError):
            await cf.delete_record(_ZONE, "gone")


@pytest.mark.asyncio
async def test_request_raises_on_non_json_body(mock_http):
    mock_http.get(f"{_BASE}/zones").mock(
        return_value=httpx.Response(200, text="<html>gateway</html>")
    )
    async with httpx.AsyncClient() as client:
        cf = CloudflareClient(client, _TOKEN)
        with pytest.raises(DnsProviderError, match="non-JSON"):
            await cf.get_zone("example.com")
