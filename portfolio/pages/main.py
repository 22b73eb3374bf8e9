"""
Public pages

Each page declares a ``build_props`` function and, for pages with a slug,
a ``build_param_set`` listing the slugs known at build time. Payloads go
through the RegenerationCache; the front end renders them.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union
from xml.etree import ElementTree

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from portfolio.content.api import (
    get_article_by_slug,
    get_project_by_slug,
    get_resume,
    list_articles,
    list_projects,
)
from portfolio.pages.regeneration import MISS, PageResult, RegenerationCache
from portfolio.shared import config
from portfolio.shared.database import DocumentStore
from portfolio.shared.errors import PageBuildError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


# ──────────────────────────────────────────────────────────────────────────────
# Page data
# ──────────────────────────────────────────────────────────────────────────────

def build_home(store: DocumentStore) -> PageResult:
    return PageResult(
        props={
            "projects": list_projects(store, sort_by="created_at"),
            "articles": list_articles(store, sort_by="date"),
        },
        revalidate=config.PAGE_REVALIDATE_SECONDS,
    )


def build_projects(store: DocumentStore) -> PageResult:
    return PageResult(
        props={"projects": list_projects(store, sort_by="created_at")},
        revalidate=config.PAGE_REVALIDATE_SECONDS,
    )


def build_project(store: DocumentStore, slug: str) -> PageResult:
    project = get_project_by_slug(store, slug)
    if not project:
        return PageResult(not_found=True)
    return PageResult(props={"project": project}, revalidate=config.PAGE_REVALIDATE_SECONDS)


def project_param_set(store: DocumentStore) -> List[dict]:
    return [{"slug": project["slug"]} for project in list_projects(store)]


def build_articles(store: DocumentStore) -> PageResult:
    return PageResult(
        props={"articles": list_articles(store, sort_by="date")},
        revalidate=config.PAGE_REVALIDATE_SECONDS,
    )


def build_article(store: DocumentStore, slug: str) -> PageResult:
    article = get_article_by_slug(store, slug)
    if not article:
        return PageResult(not_found=True)
    return PageResult(props={"article": article}, revalidate=config.PAGE_REVALIDATE_SECONDS)


def article_param_set(store: DocumentStore) -> List[dict]:
    return [{"slug": article["slug"]} for article in list_articles(store, sort_by="date")]


def build_about(store: DocumentStore) -> PageResult:
    # resume may be None; the front end shows a placeholder
    return PageResult(props={"resume": get_resume(store)}, revalidate=config.PAGE_REVALIDATE_SECONDS)


@dataclass(frozen=True)
class PageRoute:
    name: str
    path: str
    build_props: Callable[..., PageResult]
    build_param_set: Optional[Callable[[DocumentStore], List[dict]]] = None
    fallback: Union[str, bool] = "blocking"

    def key(self, **params) -> str:
        return self.path.format(**params)


PAGES = [
    PageRoute("home", "/", build_home),
    PageRoute("projects", "/projects", build_projects),
    PageRoute("project", "/projects/{slug}", build_project, build_param_set=project_param_set),
    PageRoute("articles", "/articles", build_articles),
    PageRoute("article", "/articles/{slug}", build_article, build_param_set=article_param_set),
    PageRoute("about", "/about", build_about),
]


def _param_key(params: dict) -> tuple:
    return tuple(sorted(params.items()))


class PageRenderer:
    """Binds page routes to a store and a regeneration cache."""

    def __init__(
        self,
        store: DocumentStore,
        cache: Optional[RegenerationCache] = None,
        routes: List[PageRoute] = PAGES,
    ):
        self.store = store
        self.cache = cache or RegenerationCache()
        self.routes: Dict[str, PageRoute] = {route.name: route for route in routes}
        self._known_params: Dict[str, set] = {}

    def _builder(self, route: PageRoute, params: dict) -> Callable[[], PageResult]:
        return lambda: route.build_props(self.store, **params)

    def render(self, name: str, **params) -> tuple[str, PageResult, str]:
        """Return ``(key, result, cache_state)`` for one page request."""
        route = self.routes[name]
        key = route.key(**params)

        if route.build_param_set and route.fallback is False:
            if _param_key(params) not in self._known_params.get(name, set()):
                return key, PageResult(not_found=True), MISS

        result, state = self.cache.render(key, self._builder(route, params))
        return key, result, state

    def prerender_all(self) -> int:
        """Build every page known at startup. Returns the number of pages built."""
        built = 0
        for route in self.routes.values():
            if route.build_param_set:
                param_sets = route.build_param_set(self.store)
                self._known_params[route.name] = {_param_key(p) for p in param_sets}
            else:
                param_sets = [{}]

            for params in param_sets:
                try:
                    self.cache.prerender(route.key(**params), self._builder(route, params))
                    built += 1
                except PageBuildError:
                    logger.warning(f"Skipped prerender of {route.key(**params)}")

        logger.info(f"Prerendered {built} pages")
        return built


def get_renderer(request: Request) -> PageRenderer:
    return request.app.state.pages


def page_response(renderer: PageRenderer, name: str, **params) -> JSONResponse:
    key, result, state = renderer.render(name, **params)
    if result.not_found:
        raise HTTPException(status_code=404, detail="Page not found")

    headers = {"X-Cache": state}
    if result.revalidate is not None:
        headers["Cache-Control"] = f"s-maxage={result.revalidate}, stale-while-revalidate"

    return JSONResponse(
        content={
            "page": key,
            "props": result.props,
            "revalidate": result.revalidate,
            "generatedAt": result.generated_at.isoformat(),
        },
        headers=headers,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/")
def home_page(renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "home")


@router.get("/projects")
def projects_page(renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "projects")


@router.get("/projects/{slug}")
def project_page(slug: str, renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "project", slug=slug)


@router.get("/articles")
def articles_page(renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "articles")


@router.get("/articles/{slug}")
def article_page(slug: str, renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "article", slug=slug)


@router.get("/about")
def about_page(renderer: PageRenderer = Depends(get_renderer)):
    return page_response(renderer, "about")


def _add_url(urlset, loc: str, changefreq: str, priority: str, lastmod: Optional[str] = None):
    url = ElementTree.SubElement(urlset, "url")
    ElementTree.SubElement(url, "loc").text = loc
    if lastmod:
        ElementTree.SubElement(url, "lastmod").text = lastmod
    ElementTree.SubElement(url, "changefreq").text = changefreq
    ElementTree.SubElement(url, "priority").text = priority


def generate_sitemap(projects: List[dict], articles: List[dict], site_url: str) -> str:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    _add_url(urlset, site_url, "weekly", "1.0")
    _add_url(urlset, f"{site_url}/about", "monthly", "0.8")
    _add_url(urlset, f"{site_url}/projects", "weekly", "0.9")
    _add_url(urlset, f"{site_url}/articles", "weekly", "0.9")

    for project in projects:
        _add_url(urlset, f"{site_url}/projects/{project['slug']}", "monthly", "0.7")
    for article in articles:
        _add_url(urlset, f"{site_url}/articles/{article['slug']}", "monthly", "0.7",
                 lastmod=article.get("date"))

    body = ElementTree.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


@router.get("/sitemap.xml", include_in_schema=False)
def sitemap(renderer: PageRenderer = Depends(get_renderer)):
    """Rendered on every request, not cached."""
    store = renderer.store
    xml = generate_sitemap(
        list_projects(store, sort_by="created_at"),
        list_articles(store, sort_by="date"),
        config.SITE_URL,
    )
    return Response(content=xml, media_type="application/xml")
