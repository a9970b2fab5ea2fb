"""
Async client for the FetchSERP API.

Every endpoint method validates its required parameters, then hands a
RequestDescriptor to the shared RequestExecutor.
"""

import logging
from typing import Any, Optional, Sequence

import httpx

from .config import Settings, load_config
from .executor import RequestExecutor
from .models import RequestDescriptor
from .validation import require, require_any

logger = logging.getLogger(__name__)

# Public endpoint methods, in API path order
ENDPOINTS = (
    "get_backlinks",
    "get_domain_emails",
    "get_domain_infos",
    "get_keywords_search_volume",
    "get_keywords_suggestions",
    "get_long_tail_keywords",
    "get_moz_domain_analysis",
    "get_page_indexation",
    "get_domain_ranking",
    "scrape_page",
    "scrape_domain",
    "scrape_page_js",
    "scrape_page_js_with_proxy",
    "get_serp",
    "get_serp_html",
    "get_serp_js",
    "get_serp_js_result",
    "get_serp_ai_mode",
    "get_serp_text",
    "get_user",
    "get_web_page_ai_analysis",
    "get_web_page_seo_analysis",
    "get_playwright_mcp",
    "generate_wordpress_content",
    "generate_social_content",
)


def _script_body(js_script: Optional[str], payload: Optional[dict]) -> Optional[dict]:
    """An explicit payload wins over the js_script shorthand."""
    if payload:
        return payload
    if js_script:
        return {"js_script": js_script}
    return None


class FetchSerpClient:
    """
    Client for the FetchSERP HTTP API.

    Usage:
        client = FetchSerpClient(api_key="your_key")
        results = await client.get_serp("best seo tools", country="us")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize FetchSERP client.

        Args:
            api_key: FetchSERP secret key (falls back to FETCHSERP_API_KEY)
            base_url: Override the API base URL (falls back to FETCHSERP_BASE_URL)
            timeout: Request timeout in milliseconds (falls back to FETCHSERP_TIMEOUT, then 30000)
            transport: Optional httpx transport for every request
        """
        settings = load_config()
        if api_key is not None:
            settings.api_key = api_key
        if base_url:
            settings.base_url = base_url
        if timeout is not None:
            settings.timeout = timeout

        self.config = settings.to_client_config()
        self._executor = RequestExecutor(self.config, transport=transport)

        logger.debug(
            "FetchSERP client initialized (base_url=%s, timeout=%dms, key=%s)",
            self.config.base_url, self.config.timeout, self.config.masked_key,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FetchSerpClient":
        """Build a client from loaded Settings."""
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    @classmethod
    def from_config_file(cls, path: Optional[str] = None) -> "FetchSerpClient":
        """Build a client from a YAML config file plus environment."""
        return cls.from_settings(load_config(path))

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def timeout(self) -> int:
        return self.config.timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # One short-lived connection per call; nothing to release.
        return None

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        body: Any = None,
    ) -> Any:
        return await self._executor.execute(
            RequestDescriptor(method=method, path=path, params=params or {}, body=body)
        )

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    async def get_backlinks(
        self,
        domain: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/backlinks"""
        require("get_backlinks", domain=domain)
        return await self._request("GET", "/api/v1/backlinks", {
            "domain": domain,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_domain_emails(
        self,
        domain: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/domain_emails"""
        require("get_domain_emails", domain=domain)
        return await self._request("GET", "/api/v1/domain_emails", {
            "domain": domain,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_domain_infos(self, domain: Optional[str] = None) -> Any:
        """GET /api/v1/domain_infos"""
        require("get_domain_infos", domain=domain)
        return await self._request("GET", "/api/v1/domain_infos", {"domain": domain})

    async def get_moz_domain_analysis(self, domain: Optional[str] = None) -> Any:
        """GET /api/v1/moz"""
        require("get_moz_domain_analysis", domain=domain)
        return await self._request("GET", "/api/v1/moz", {"domain": domain})

    async def get_domain_ranking(
        self,
        keyword: Optional[str] = None,
        domain: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/ranking"""
        require("get_domain_ranking", keyword=keyword, domain=domain)
        return await self._request("GET", "/api/v1/ranking", {
            "keyword": keyword,
            "domain": domain,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_page_indexation(
        self,
        domain: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> Any:
        """GET /api/v1/page_indexation"""
        require("get_page_indexation", domain=domain, keyword=keyword)
        return await self._request("GET", "/api/v1/page_indexation", {
            "domain": domain,
            "keyword": keyword,
        })

    # ------------------------------------------------------------------
    # Keywords
    # ------------------------------------------------------------------

    async def get_keywords_search_volume(
        self,
        keywords: Optional[Sequence[str]] = None,
        country: Optional[str] = None,
    ) -> Any:
        """GET /api/v1/keywords_search_volume"""
        require("get_keywords_search_volume", keywords=keywords)
        return await self._request("GET", "/api/v1/keywords_search_volume", {
            "keywords": keywords,
            "country": country,
        })

    async def get_keywords_suggestions(
        self,
        url: Optional[str] = None,
        keywords: Optional[Sequence[str]] = None,
        country: Optional[str] = None,
    ) -> Any:
        """
        GET /api/v1/keywords_suggestions

        Needs either a url or a non-empty keywords list.
        """
        require_any("get_keywords_suggestions", url=url, keywords=keywords)
        return await self._request("GET", "/api/v1/keywords_suggestions", {
            "url": url,
            "keywords": keywords,
            "country": country,
        })

    async def get_long_tail_keywords(
        self,
        keyword: Optional[str] = None,
        search_intent: Optional[str] = None,
        count: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/long_tail_keywords_generator"""
        require("get_long_tail_keywords", keyword=keyword)
        return await self._request("GET", "/api/v1/long_tail_keywords_generator", {
            "keyword": keyword,
            "search_intent": search_intent,
            "count": count,
        })

    # ------------------------------------------------------------------
    # Scraping
    # ------------------------------------------------------------------

    async def scrape_page(self, url: Optional[str] = None) -> Any:
        """GET /api/v1/scrape"""
        require("scrape_page", url=url)
        return await self._request("GET", "/api/v1/scrape", {"url": url})

    async def scrape_domain(
        self,
        domain: Optional[str] = None,
        max_pages: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/scrape_domain"""
        require("scrape_domain", domain=domain)
        return await self._request("GET", "/api/v1/scrape_domain", {
            "domain": domain,
            "max_pages": max_pages,
        })

    async def scrape_page_js(
        self,
        url: Optional[str] = None,
        js_script: Optional[str] = None,
        payload: Optional[dict] = None,
    ) -> Any:
        """
        POST /api/v1/scrape_js

        js_script travels in the query string; the JSON body is payload if
        given, else {"js_script": js_script}.
        """
        require("scrape_page_js", url=url)
        return await self._request(
            "POST",
            "/api/v1/scrape_js",
            {"url": url, "js_script": js_script},
            _script_body(js_script, payload),
        )

    async def scrape_page_js_with_proxy(
        self,
        url: Optional[str] = None,
        country: Optional[str] = None,
        js_script: Optional[str] = None,
        payload: Optional[dict] = None,
    ) -> Any:
        """POST /api/v1/scrape_js_with_proxy"""
        require("scrape_page_js_with_proxy", url=url, country=country)
        return await self._request(
            "POST",
            "/api/v1/scrape_js_with_proxy",
            {"url": url, "country": country, "js_script": js_script},
            _script_body(js_script, payload),
        )

    # ------------------------------------------------------------------
    # Search results
    # ------------------------------------------------------------------

    async def get_serp(
        self,
        query: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/serp"""
        require("get_serp", query=query)
        return await self._request("GET", "/api/v1/serp", {
            "query": query,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_serp_html(
        self,
        query: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/serp_html"""
        require("get_serp_html", query=query)
        return await self._request("GET", "/api/v1/serp_html", {
            "query": query,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_serp_js(
        self,
        query: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """
        GET /api/v1/serp_js

        Submits a rendered search job. The response carries a uuid to pass
        to get_serp_js_result once the job has finished.
        """
        require("get_serp_js", query=query)
        return await self._request("GET", "/api/v1/serp_js", {
            "query": query,
            "country": country,
            "pages_number": pages_number,
        })

    async def get_serp_js_result(self, uuid: Optional[str] = None) -> Any:
        """GET /api/v1/serp_js/{uuid}"""
        require("get_serp_js_result", uuid=uuid)
        return await self._request("GET", f"/api/v1/serp_js/{uuid}")

    async def get_serp_ai_mode(self, query: Optional[str] = None) -> Any:
        """GET /api/v1/serp_ai_mode"""
        require("get_serp_ai_mode", query=query)
        return await self._request("GET", "/api/v1/serp_ai_mode", {"query": query})

    async def get_serp_text(
        self,
        query: Optional[str] = None,
        search_engine: Optional[str] = None,
        country: Optional[str] = None,
        pages_number: Optional[int] = None,
    ) -> Any:
        """GET /api/v1/serp_text"""
        require("get_serp_text", query=query)
        return await self._request("GET", "/api/v1/serp_text", {
            "query": query,
            "search_engine": search_engine,
            "country": country,
            "pages_number": pages_number,
        })

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def get_user(self) -> Any:
        """GET /api/v1/user"""
        return await self._request("GET", "/api/v1/user")

    # ------------------------------------------------------------------
    # AI analysis and content
    # ------------------------------------------------------------------

    async def get_web_page_ai_analysis(
        self,
        url: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> Any:
        """GET /api/v1/web_page_ai_analysis"""
        require("get_web_page_ai_analysis", url=url, prompt=prompt)
        return await self._request("GET", "/api/v1/web_page_ai_analysis", {
            "url": url,
            "prompt": prompt,
        })

    async def get_web_page_seo_analysis(self, url: Optional[str] = None) -> Any:
        """GET /api/v1/web_page_seo_analysis"""
        require("get_web_page_seo_analysis", url=url)
        return await self._request("GET", "/api/v1/web_page_seo_analysis", {"url": url})

    async def get_playwright_mcp(self, prompt: Optional[str] = None) -> Any:
        """GET /api/v1/playwright_mcp"""
        require("get_playwright_mcp", prompt=prompt)
        return await self._request("GET", "/api/v1/playwright_mcp", {"prompt": prompt})

    async def generate_wordpress_content(
        self,
        user_prompt: Optional[str] = None,
        system_prompt: Optional[str] = None,
        ai_model: Optional[str] = None,
    ) -> Any:
        """GET /api/v1/generate_wordpress_content"""
        require(
            "generate_wordpress_content",
            user_prompt=user_prompt,
            system_prompt=system_prompt,
        )
        return await self._request("GET", "/api/v1/generate_wordpress_content", {
            "user_prompt": user_prompt,
            "system_prompt": system_prompt,
            "ai_model": ai_model,
        })

    async def generate_social_content(
        self,
        user_prompt: Optional[str] = None,
        system_prompt: Optional[str] = None,
        ai_model: Optional[str] = None,
    ) -> Any:
        """GET /api/v1/generate_social_content"""
        require(
            "generate_social_content",
            user_prompt=user_prompt,
            system_prompt=system_prompt,
        )
        return await self._request("GET", "/api/v1/generate_social_content", {
            "user_prompt": user_prompt,
            "system_prompt": system_prompt,
            "ai_model": ai_model,
        })
