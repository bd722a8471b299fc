# estimator/fusion/client.py
"""
Enrichment providers.

A provider offers two capabilities, ``enrich_layout`` and ``enrich_insights``.
Each returns the raw JSON payload from the service, or an ``Unavailable``
value saying why there is nothing to use. Providers never raise for service
problems; validation of the payload happens in ``estimator.fusion.enrich``.
"""

from __future__ import annotations
import json, logging, os
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

import requests

from estimator.service.models import ProjectResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unavailable:
    reason: str


Payload = Union[dict, list]
Outcome = Union[Payload, Unavailable]


class EnrichmentProvider(Protocol):
    def enrich_layout(self, result: ProjectResult) -> Outcome: ...
    def enrich_insights(self, result: ProjectResult) -> Outcome: ...


class NullEnrichment:
    """No enrichment service configured; the engine output is used as-is."""

    def enrich_layout(self, result: ProjectResult) -> Outcome:
        return Unavailable("no enrichment provider configured")

    def enrich_insights(self, result: ProjectResult) -> Outcome:
        return Unavailable("no enrichment provider configured")


class HttpEnrichmentClient:
    """
    JSON-over-HTTP enrichment service.

    POST {base_url}/layout   body: {"config": ..., "estimate": ...}
    POST {base_url}/insights body: {"config": ..., "estimate": ...}
    """

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 20.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, result: ProjectResult) -> Outcome:
        body = result.to_dict()
        payload = {"config": body.pop("config"), "estimate": body}
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        url = f"{self.base_url}/{path}"
        try:
            r = self.session.post(url, data=json.dumps(payload), headers=headers, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.warning("Enrichment call %s failed: %s", url, e)
            return Unavailable(f"request failed: {e}")
        except ValueError as e:
            logger.warning("Enrichment call %s returned non-JSON body: %s", url, e)
            return Unavailable("response was not JSON")

    def enrich_layout(self, result: ProjectResult) -> Outcome:
        return self._post("layout", result)

    def enrich_insights(self, result: ProjectResult) -> Outcome:
        return self._post("insights", result)


def provider_from_env() -> Any:
    """HttpEnrichmentClient when ENRICH_URL is set, otherwise NullEnrichment."""
    url = os.getenv("ENRICH_URL", "")
    if not url:
        return NullEnrichment()
    return HttpEnrichmentClient(
        url,
        api_key=os.getenv("ENRICH_API_KEY", ""),
        timeout=float(os.getenv("ENRICH_TIMEOUT", "20")),
    )
