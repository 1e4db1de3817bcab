"""Tests for the readme.io client and the fetch / push sync service."""

import datetime
import json

import httpx
import pytest

from docsync.exceptions import ConfigError
from docsync.models.config import SyncConfig
from docsync.models.page import Page
from docsync.services.readme_api import ReadmeClient
from docsync.services.sync import build_push_payload, fetch_categories, push_page

_CONFIG = SyncConfig(api_key="secret", docs_version="2.0", api_base_url="https://api.test/v1")


class _FakeReadme:
    """In-memory stand-in for the readme.io docs API."""

    def __init__(self, docs=None, categories=None, put_status=200):
        self.docs = docs or {}
        self.categories = categories or {}
        self.put_status = put_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        if request.method == "GET" and path.startswith("/categories/"):
            category = path.split("/")[2]
            if category not in self.categories:
                return httpx.Response(404, json={"error": "CATEGORY_NOTFOUND"})
            return httpx.Response(200, json=self.categories[category])
        if path.startswith("/docs/"):
            slug = path.split("/")[2]
            if slug not in self.docs:
                return httpx.Response(404, json={"error": "DOC_NOTFOUND"})
            if request.method == "GET":
                return httpx.Response(200, json=self.docs[slug])
            if request.method == "PUT":
                if self.put_status != 200:
                    return httpx.Response(self.put_status, json={"error": "CONFLICT"})
                self.docs[slug] = json.loads(request.content)
                return httpx.Response(200, json=self.docs[slug])
        return httpx.Response(405)

    def client(self) -> ReadmeClient:
        return ReadmeClient(_CONFIG, transport=httpx.MockTransport(self))


class TestReadmeClient:
    @pytest.mark.asyncio
    async def test_sends_auth_and_version_header(self):
        fake = _FakeReadme(docs={"intro": {"slug": "intro", "body": ""}})
        async with fake.client() as client:
            await client.get_doc("intro")

        request = fake.requests[0]
        assert request.url == "https://api.test/v1/docs/intro"
        assert request.headers["x-readme-version"] == "2.0"
        assert request.headers["authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        async with _FakeReadme().client() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_doc("missing")

    def test_requires_remote_options(self):
        with pytest.raises(ConfigError, match="apikey"):
            ReadmeClient(SyncConfig(docs_version="2.0"))


class TestFetchCategories:
    @pytest.mark.asyncio
    async def test_writes_pages_and_children(self, tmp_path):
        fake = _FakeReadme(
            categories={
                "guides": [
                    {"slug": "intro", "children": [{"slug": "setup", "children": []}]},
                    {"slug": "faq"},
                ]
            },
            docs={
                "intro": {"slug": "intro", "title": "Intro", "excerpt": "", "body": "Welcome"},
                "setup": {"slug": "setup", "title": "Setup", "body": "Install it"},
                "faq": {"slug": "faq", "title": "FAQ", "body": "Q&A"},
            },
        )
        async with fake.client() as client:
            written = await fetch_categories(client, ["guides"], tmp_path)

        assert written == [
            tmp_path / "guides" / "intro.md",
            tmp_path / "guides" / "intro" / "setup.md",
            tmp_path / "guides" / "faq.md",
        ]
        setup = Page.from_file(tmp_path / "guides" / "intro" / "setup.md", tmp_path)
        assert setup.parent_slug == "intro"
        assert setup.headers == {"title": "Setup"}
        assert setup.content == "Install it"

    @pytest.mark.asyncio
    async def test_missing_doc_does_not_stop_fetch(self, tmp_path):
        fake = _FakeReadme(
            categories={"guides": [{"slug": "gone"}, {"slug": "faq"}]},
            docs={"faq": {"slug": "faq", "title": "FAQ", "body": "Q&A"}},
        )
        async with fake.client() as client:
            written = await fetch_categories(client, ["guides", "unknown"], tmp_path)
        assert written == [tmp_path / "guides" / "faq.md"]


class TestPushPage:
    @staticmethod
    def _local(body: str = "New body") -> Page:
        return Page(category="guides", slug="intro", content=body, headers={"title": "Intro"})

    @staticmethod
    def _remote(body: str = "Old body") -> dict:
        return {"_id": "abc", "slug": "intro", "title": "Intro", "body": body, "hidden": False}

    @pytest.mark.asyncio
    async def test_unchanged_page_is_not_pushed(self):
        fake = _FakeReadme(docs={"intro": {"slug": "intro", "title": "Intro", "body": "Same"}})
        async with fake.client() as client:
            outcome = await push_page(client, self._local("Same"))
        assert outcome == "unchanged"
        assert [request.method for request in fake.requests] == ["GET"]

    @pytest.mark.asyncio
    async def test_changed_page_is_pushed(self):
        fake = _FakeReadme(docs={"intro": self._remote()})
        page = self._local()
        async with fake.client() as client:
            outcome = await push_page(client, page)

        assert outcome == "pushed"
        sent = fake.docs["intro"]
        assert sent["body"] == "New body"
        assert sent["_id"] == "abc"
        assert sent["lastUpdatedHash"] == page.hash

    @pytest.mark.asyncio
    async def test_dry_run_does_not_push(self):
        fake = _FakeReadme(docs={"intro": self._remote()})
        async with fake.client() as client:
            outcome = await push_page(client, self._local(), dry_run=True)
        assert outcome == "dry_run"
        assert fake.docs["intro"]["body"] == "Old body"

    @pytest.mark.asyncio
    async def test_conflict_is_reported(self):
        fake = _FakeReadme(docs={"intro": self._remote()}, put_status=409)
        async with fake.client() as client:
            assert await push_page(client, self._local()) == "conflict"

    @pytest.mark.asyncio
    async def test_server_error_is_reported(self):
        fake = _FakeReadme(docs={"intro": self._remote()}, put_status=500)
        async with fake.client() as client:
            assert await push_page(client, self._local()) == "failed"

    @pytest.mark.asyncio
    async def test_missing_remote_doc_is_reported(self):
        async with _FakeReadme().client() as client:
            assert await push_page(client, self._local()) == "failed"

    @pytest.mark.asyncio
    async def test_date_header_is_pushed_as_string(self):
        fake = _FakeReadme(docs={"intro": self._remote()})
        page = Page(category="guides", slug="intro", content="New body", headers={"updated": datetime.date(2024, 1, 1)})
        async with fake.client() as client:
            outcome = await push_page(client, page)
        assert outcome == "pushed"
        assert fake.docs["intro"]["updated"] == "2024-01-01"

    def test_payload_merges_headers_over_remote(self):
        page = Page(slug="intro", content="Body", headers={"title": "New title"})
        payload = build_push_payload({"slug": "intro", "title": "Old", "order": 3}, page)
        assert payload == {
            "slug": "intro",
            "title": "New title",
            "order": 3,
            "body": "Body",
            "lastUpdatedHash": page.hash,
        }
