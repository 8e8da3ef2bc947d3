"""
Live tests — real HTTP through httpx against an httpbin-compatible service.

Requires environment variables:
  RESTREE_INTEGRATION  — any value enables these tests
  RESTREE_BASE_URL     — (optional) defaults to https://httpbin.org

Run: RESTREE_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

import restree
from restree import HttpTransport

SKIP = not os.environ.get("RESTREE_INTEGRATION")
BASE_URL = os.environ.get("RESTREE_BASE_URL", "https://httpbin.org")

pytestmark = pytest.mark.skipif(SKIP, reason="RESTREE_INTEGRATION not set")


def make_tree():
    api = restree.root(BASE_URL).header("X-Restree", "live")
    api.add("anything").add("status", "status/{code}")
    api.anything.add("item", "{kind}/{id}")
    return api


class TestLiveRequests:
    @pytest.mark.asyncio
    async def test_get_with_params_and_query(self):
        async with HttpTransport() as transport:
            api = make_tree()
            api.anything.item.in_("get", lambda d: d["url"])
            tree = api.compile(transport)
            response = await tree.anything.item(kind="books", id=42).get(query={"q": "a b"})
        assert response.ok
        assert "/anything/books/42?q=a" in response.data

    @pytest.mark.asyncio
    async def test_post_echoes_json_and_headers(self):
        async with HttpTransport() as transport:
            tree = make_tree().compile(transport)
            response = await tree.anything.post(body={"name": "restree"})
        assert response.status_code == 200
        assert response.data["json"] == {"name": "restree"}
        assert response.data["headers"]["X-Restree"] == "live"

    @pytest.mark.asyncio
    async def test_failure_status_reaches_fail_callback(self):
        failures = []
        async with HttpTransport() as transport:
            tree = make_tree().compile(transport)
            await tree.status(code=418).get(fail=lambda status, data: failures.append(status))
        assert failures == [418]
