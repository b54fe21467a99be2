from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from config import Configuration


class FirecrawlError(RuntimeError):
    pass


@dataclass
class _RetryPolicy:
    retries: int = 1
    base_delay: float = 0.5


class FirecrawlClient:
    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.base = cfg.firecrawl_base_url.rstrip("/")
        self.session = session or requests.Session()
        self.policy = _RetryPolicy(retries=max(cfg.http_retries, 0))

    def _post(self, path: str, body: dict) -> dict:
        if not self.cfg.firecrawl_api_key:
            raise FirecrawlError("firecrawl api key not configured")
        url = f"{self.base}{path}"
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.cfg.firecrawl_api_key}",
        }
        policy = self.policy
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.post(url, headers=headers, json=body, timeout=self.cfg.firecrawl_timeout)
            except requests.RequestException as exc:  # network error
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise FirecrawlError(f"request error: {exc}")

            if resp.status_code in (429, 500, 502, 503, 504):
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                snippet = resp.text[:300]
                raise FirecrawlError(f"upstream {resp.status_code}: {snippet}")

            if not resp.ok:
                snippet = resp.text[:300]
                raise FirecrawlError(f"upstream {resp.status_code}: {snippet}")

            try:
                return resp.json()
            except ValueError:
                raise FirecrawlError("invalid json response")

    def scrape(self, target_url: str, formats: Optional[List[str]] = None) -> Dict[str, Any]:
        """Scrape one page and return Firecrawl's `data` object (markdown, html, metadata)."""
        payload = self._post(
            "/v1/scrape",
            {"url": target_url, "formats": formats or ["markdown"]},
        )
        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise FirecrawlError(f"scrape failed: {error or 'unknown error'}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise FirecrawlError("scrape returned no data")
        return data
