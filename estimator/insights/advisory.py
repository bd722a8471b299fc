# estimator/insights/advisory.py
import math
from typing import Tuple

from estimator.service.config import ProjectConfig
from estimator.service.models import CostBreakdown, Insight, TimelinePlan, WorkforceBreakdown
from estimator.service.utils import format_inr

CATEGORIES = ("Budget", "Timeline", "Sustainability", "Optimization")
SEVERITIES = ("low", "medium", "high")


def generate_insights(config: ProjectConfig, cost: CostBreakdown,
                      timeline: TimelinePlan, workforce: WorkforceBreakdown) -> Tuple[Insight, ...]:
    """Deterministic advisory list; same count and order for every project."""
    days = timeline.total_days
    location = config.location.value
    ratio = f"{workforce.supervisors}:{workforce.trade_workers}"
    return (
        Insight("Weather Risk", "Timeline", "medium", 60,
                f"Weather delays may extend the {days}-day timeline by 10-15%. Plan monsoon contingency."),
        Insight("Price Volatility", "Budget", "high", 55,
                f"Material price fluctuations could impact the ₹{format_inr(cost.total_cost)} budget. "
                f"Lock vendor rates early."),
        Insight("Skilled Labour", "Timeline", "medium", 65,
                f"Skilled labour availability in {location} area needs monitoring. Pre-book specialist teams."),
        Insight("Bulk Procurement", "Budget", "low", 80,
                f"Bulk material procurement can save 8-12% on material costs "
                f"(₹{format_inr(cost.material_cost * 0.1)} potential savings)."),
        Insight("Local Sourcing", "Sustainability", "low", 75,
                "Local material sourcing reduces transportation costs by an estimated 5-8%."),
        Insight("Critical Path", "Timeline", "high", 50,
                "Foundation work is on the critical path and cannot be rushed without quality compromise."),
        Insight("Parallel MEP", "Optimization", "low", 85,
                f"Parallel execution of electrical and plumbing work saves {math.ceil(days * 0.05)} days."),
        Insight("Labour Scheduling", "Optimization", "medium", 70,
                f"{workforce.total_labor_days} total labour days require careful scheduling to avoid idle time."),
        Insight("Supervision", "Optimization", "low", 80,
                f"Supervisor-to-worker ratio of {ratio} is within optimal range."),
        Insight("Contingency Buffer", "Budget", "medium", 70,
                f"Maintain 5% contingency buffer (₹{format_inr(cost.contingency)}) for unexpected costs."),
        Insight("Quality Checks", "Optimization", "low", 80,
                "Regular quality checks at each construction phase prevent costly rework."),
        Insight("Code Compliance", "Sustainability", "medium", 75,
                f"Ensure compliance with local building codes for {config.floors_label} construction."),
    )
