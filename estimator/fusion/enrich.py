# estimator/fusion/enrich.py
"""
Fuse optional enrichment output with the deterministic estimate.

Layout and insight enrichments are requested concurrently with one bounded
wait. A payload is substituted only after it validates against the same shape
the engine produces; on timeout, provider exception or invalid payload the
engine's own output is kept and a short, non-blocking notice is attached.
Enrichment problems never surface as errors to the caller.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from pydantic import ValidationError

from estimator.fusion.client import EnrichmentProvider, NullEnrichment, Unavailable
from estimator.fusion.schemas import InsightsOut, LayoutOut
from estimator.service.models import FloorLayout, Insight, ProjectResult, Room

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "AI enrichment partially failed. Using deterministic estimates."

ENGINE, ENRICHMENT = "engine", "enrichment"


class EnrichmentRejected(ValueError):
    """Payload parsed but does not describe a usable result."""


@dataclass(frozen=True)
class EnrichedResult:
    result: ProjectResult
    layout_source: str = ENGINE
    insights_source: str = ENGINE
    notice: Optional[str] = None


# ------------------ validation ------------------

def validate_insights(payload) -> Tuple[Insight, ...]:
    if isinstance(payload, list):
        payload = {"insights": payload}
    parsed = InsightsOut.model_validate(payload)
    return tuple(Insight(**i.model_dump()) for i in parsed.insights)


def _overlaps(a: Room, b: Room, eps: float = 1e-6) -> bool:
    # shared edges are not overlaps
    return a.x + eps < b.x + b.width and b.x + eps < a.x + a.width and \
           a.y + eps < b.y + b.height and b.y + eps < a.y + a.height


def validate_layout(payload, result: ProjectResult, slack: float = 0.05) -> Tuple[Tuple[FloorLayout, ...], str]:
    parsed = LayoutOut.model_validate(payload)
    by_floor = {f.floor: f for f in parsed.floors}
    if sorted(by_floor) != list(range(result.config.floors)) or len(parsed.floors) != result.config.floors:
        raise EnrichmentRejected(
            f"expected floors 0..{result.config.floors - 1}, got {[f.floor for f in parsed.floors]}"
        )

    layout = []
    for base in result.layout:
        bound = base.side * (1.0 + slack)
        rooms = tuple(Room(name=r.name, width=r.width, height=r.height, x=r.x, y=r.y)
                      for r in by_floor[base.floor].rooms)
        for r in rooms:
            if r.x + r.width > bound or r.y + r.height > bound:
                raise EnrichmentRejected(f"room '{r.name}' on floor {base.floor} exceeds the floor bounds")
        if sum(r.area for r in rooms) > base.side ** 2 * (1.0 + slack):
            raise EnrichmentRejected(f"rooms on floor {base.floor} exceed the allotted area")
        for i, a in enumerate(rooms):
            for b in rooms[i + 1:]:
                if _overlaps(a, b):
                    raise EnrichmentRejected(f"rooms '{a.name}' and '{b.name}' overlap on floor {base.floor}")
        layout.append(replace(base, rooms=rooms))
    return tuple(layout), parsed.explanation


# ------------------ main ------------------

def enrich_project(result: ProjectResult, provider: Optional[EnrichmentProvider] = None,
                   timeout: float = 30.0, slack: float = 0.05) -> EnrichedResult:
    provider = provider or NullEnrichment()
    if isinstance(provider, NullEnrichment):
        return EnrichedResult(result=result)

    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="enrich")
    futures = {
        "layout": pool.submit(provider.enrich_layout, result),
        "insights": pool.submit(provider.enrich_insights, result),
    }
    done, _ = wait(futures.values(), timeout=timeout)
    pool.shutdown(wait=False, cancel_futures=True)

    outcomes = {}
    for name, fut in futures.items():
        if fut not in done:
            outcomes[name] = Unavailable(f"timed out after {timeout}s")
            continue
        try:
            outcomes[name] = fut.result()
        except Exception as e:  # any provider failure falls back to the engine output
            outcomes[name] = Unavailable(f"provider raised {type(e).__name__}: {e}")

    enriched, failed = result, False
    layout_source = insights_source = ENGINE

    raw = outcomes["layout"]
    if isinstance(raw, Unavailable):
        failed = True
        logger.warning("Layout enrichment unavailable: %s", raw.reason)
    else:
        try:
            layout, explanation = validate_layout(raw, result, slack)
            enriched = replace(enriched, layout=layout,
                               layout_explanation=explanation or enriched.layout_explanation)
            layout_source = ENRICHMENT
        except (ValidationError, EnrichmentRejected, TypeError) as e:
            failed = True
            logger.warning("Layout enrichment rejected: %s", e)

    raw = outcomes["insights"]
    if isinstance(raw, Unavailable):
        failed = True
        logger.warning("Insight enrichment unavailable: %s", raw.reason)
    else:
        try:
            enriched = replace(enriched, insights=validate_insights(raw))
            insights_source = ENRICHMENT
        except (ValidationError, TypeError) as e:
            failed = True
            logger.warning("Insight enrichment rejected: %s", e)

    return EnrichedResult(
        result=enriched,
        layout_source=layout_source,
        insights_source=insights_source,
        notice=FALLBACK_NOTICE if failed else None,
    )
