"""
Tests for the public page payloads and the sitemap
"""
from xml.etree import ElementTree

from conftest import article_payload, project_payload
from portfolio.pages.main import PageRenderer, PageRoute, build_project, generate_sitemap, project_param_set


def test_unknown_project_page_is_404(client):
    response = client.get("/projects/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Page not found"}


def test_page_created_after_prerender_is_built_on_demand(app, admin_client, client):
    """A slug unknown at startup is generated on first request, then cached"""
    assert app.state.pages.prerender_all() == 4

    admin_client.post("/api/projects", json=project_payload(slug="fresh-project"))

    first = client.get("/projects/fresh-project")
    second = client.get("/projects/fresh-project")

    assert first.status_code == 200
    assert first.headers["X-Cache"] == "MISS"
    assert first.json()["props"]["project"]["slug"] == "fresh-project"
    assert second.headers["X-Cache"] == "HIT"
    assert second.json()["generatedAt"] == first.json()["generatedAt"]


def test_missing_page_is_not_cached(admin_client, client):
    assert client.get("/projects/later").status_code == 404

    admin_client.post("/api/projects", json=project_payload(slug="later"))

    assert client.get("/projects/later").status_code == 200


def test_page_payload_shape(client):
    response = client.get("/about")

    assert response.status_code == 200
    body = response.json()
    assert body["page"] == "/about"
    assert body["props"] == {"resume": None}
    assert body["revalidate"] == 60
    assert response.headers["Cache-Control"] == "s-maxage=60, stale-while-revalidate"


def test_home_lists_newest_content_first(admin_client, client):
    admin_client.post("/api/projects", json=project_payload(slug="older", title="Zeta"))
    admin_client.post("/api/projects", json=project_payload(slug="newer", title="Alpha"))
    admin_client.post("/api/articles", json=article_payload(slug="jan", date="2024-01-05"))
    admin_client.post("/api/articles", json=article_payload(slug="mar", date="2024-03-05"))

    props = client.get("/").json()["props"]

    assert [p["slug"] for p in props["projects"]] == ["newer", "older"]
    assert [a["slug"] for a in props["articles"]] == ["mar", "jan"]


def test_stale_page_is_served_then_regenerated(app, admin_client, client, clock):
    client.get("/articles")
    admin_client.post("/api/articles", json=article_payload())

    cached = client.get("/articles")
    assert cached.headers["X-Cache"] == "HIT"
    assert cached.json()["props"]["articles"] == []

    clock.advance(61)
    stale = client.get("/articles")
    assert stale.headers["X-Cache"] == "STALE"
    assert stale.json()["props"]["articles"] == []

    app.state.pages.cache.wait_for_background(timeout=5)
    fresh = client.get("/articles")
    assert fresh.headers["X-Cache"] == "HIT"
    assert [a["slug"] for a in fresh.json()["props"]["articles"]] == ["scaling-reads"]


def test_pages_degrade_when_store_is_unreachable(unreachable_store, page_cache):
    renderer = PageRenderer(unreachable_store, cache=page_cache)

    assert renderer.prerender_all() == 4
    _, result, _ = renderer.render("projects")
    assert result.props == {"projects": []}


def test_fallback_false_rejects_unknown_params(store, page_cache):
    route = PageRoute(
        "project",
        "/projects/{slug}",
        build_project,
        build_param_set=project_param_set,
        fallback=False,
    )
    renderer = PageRenderer(store, cache=page_cache, routes=[route])
    renderer.prerender_all()

    key, result, _ = renderer.render("project", slug="anything")

    assert key == "/projects/anything"
    assert result.not_found
    assert page_cache.get(key) is None


def test_build_project_reports_missing_record(store):
    assert build_project(store, "ghost").not_found


def test_sitemap(admin_client, client):
    admin_client.post("/api/projects", json=project_payload())
    admin_client.post("/api/articles", json=article_payload())

    response = client.get("/sitemap.xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    root = ElementTree.fromstring(response.content)
    ns = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
    locs = [loc.text for loc in root.findall("sm:url/sm:loc", ns)]
    assert "https://example.dev/projects/ledger-service" in locs
    assert "https://example.dev/articles/scaling-reads" in locs
    lastmods = [lastmod.text for lastmod in root.findall("sm:url/sm:lastmod", ns)]
    assert lastmods == ["2024-03-01"]


def test_generate_sitemap_static_entries():
    xml = generate_sitemap([], [], "https://example.dev")

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    root = ElementTree.fromstring(xml.split("\n", 1)[1])
    assert len(root) == 4
