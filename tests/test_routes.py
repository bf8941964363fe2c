"""End-to-end tests for the public and admin HTTP routes."""

from fastapi.testclient import TestClient

from app.adapters.store.in_memory import InMemoryCatalogStore


class TestToolRoutes:
    def test_list_tools(self, client: TestClient) -> None:
        resp = client.get("/v1/tools")

        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 7
        assert body["page"] == 1
        assert body["tools"][0]["slug"] == "chatgpt"
        assert resp.headers["Cache-Control"].startswith("public, s-maxage=")
        assert "ETag" in resp.headers

    def test_list_tools_with_filters(self, client: TestClient) -> None:
        resp = client.get("/v1/tools", params={"category": "Image AI", "sort": "name"})

        assert [t["slug"] for t in resp.json()["tools"]] == ["midjourney"]

    def test_tool_detail(self, client: TestClient) -> None:
        resp = client.get("/v1/tools/midjourney")

        assert resp.status_code == 200
        body = resp.json()
        assert body["tool"]["name"] == "Midjourney"
        assert body["metadata"]["title"] == "Midjourney - aItoolfinder"

    def test_unknown_tool_is_404(self, client: TestClient) -> None:
        resp = client.get("/v1/tools/unknown")

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "tool_not_found"

    def test_compare(self, client: TestClient) -> None:
        resp = client.get("/v1/compare", params={"tools": "chatgpt,claude"})

        assert resp.status_code == 200
        assert [c["tool"]["slug"] for c in resp.json()["tools"]] == ["chatgpt", "claude"]

    def test_compare_too_many_is_400(self, client: TestClient) -> None:
        resp = client.get("/v1/compare", params={"tools": "chatgpt,claude,midjourney,runway,elevenlabs"})

        assert resp.status_code == 400
        assert resp.json()["error"]["details"]["max_tools"] == 4

    def test_compare_unknown_is_404(self, client: TestClient) -> None:
        resp = client.get("/v1/compare", params={"tools": "chatgpt,ghost"})

        assert resp.status_code == 404
        assert resp.json()["error"]["details"]["slugs"] == ["ghost"]


class TestPostRoutes:
    def test_list_posts_hides_scheduled(self, client: TestClient) -> None:
        resp = client.get("/v1/posts")

        assert [p["slug"] for p in resp.json()] == ["midjourney-tips", "chatgpt-review"]

    def test_post_detail(self, client: TestClient) -> None:
        resp = client.get("/v1/posts/chatgpt-review")

        assert resp.status_code == 200
        assert resp.json()["related_tools"][0]["slug"] == "chatgpt"

    def test_scheduled_post_is_404(self, client: TestClient) -> None:
        assert client.get("/v1/posts/runway-guide").status_code == 404


class TestAdminRoutes:
    def test_create_post_now(self, client: TestClient, admin_headers: dict) -> None:
        resp = client.post(
            "/v1/admin/posts",
            headers=admin_headers,
            json={"title": "Claude Guide", "content_html": "<p>hi</p>", "published_at": "now"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["post"]["slug"] == "claude-guide"
        assert body["message"] == "Post published successfully!"
        assert client.get("/v1/posts/claude-guide").status_code == 200

    def test_create_post_accepts_and_ignores_tool_slug(
        self, client: TestClient, store: InMemoryCatalogStore, admin_headers: dict
    ) -> None:
        resp = client.post(
            "/v1/admin/posts",
            headers=admin_headers,
            json={
                "title": "Copilot Tips",
                "content_html": "<p>x</p>",
                "published_at": "now",
                "tool_slug": "github-copilot",
            },
        )

        assert resp.status_code == 200
        assert "tool_slug" not in store._posts["copilot-tips"].model_dump()

    def test_create_post_auto_schedules(self, client: TestClient, admin_headers: dict) -> None:
        resp = client.post(
            "/v1/admin/posts",
            headers=admin_headers,
            json={"title": "Later", "content_html": "<p>x</p>"},
        )

        body = resp.json()
        assert body["scheduled_for"]
        assert body["message"].startswith("Post created successfully! Scheduled for ")

    def test_create_post_missing_fields(self, client: TestClient, admin_headers: dict) -> None:
        resp = client.post("/v1/admin/posts", headers=admin_headers, json={"title": "No body"})

        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Title and content_html are required"

    def test_autofill(self, client: TestClient, admin_headers: dict) -> None:
        resp = client.post(
            "/v1/admin/posts/autofill",
            headers=admin_headers,
            json={"content": "<h1>Claude 101</h1><p>Intro.</p>", "tool_name": "Claude"},
        )

        assert resp.status_code == 200
        assert resp.json()["title"] == "Claude 101"

    def test_tools_needing_posts(self, client: TestClient, admin_headers: dict) -> None:
        body = client.get("/v1/admin/tools-needing-posts", headers=admin_headers).json()

        assert body["success"] is True
        assert body["count"] == 4

    def test_seed_into_empty_store(self, rate_limiter, admin_headers: dict) -> None:
        from app.core.app_factory import create_app

        store = InMemoryCatalogStore()
        client = TestClient(create_app(catalog_store=store, rate_limiter=rate_limiter))

        resp = client.post("/v1/admin/seed", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "categories": 6, "tools": 7, "enriched": 0}
        assert client.get("/v1/tools").json()["total"] == 7

    def test_admin_requires_secret(self, client: TestClient) -> None:
        assert client.post("/v1/admin/seed").status_code == 401
