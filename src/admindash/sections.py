"""The static section plan table: which resources each dashboard view needs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from admindash.errors import LoadError, LoadErrorCode
from admindash.models.resources import SectionPlan
from admindash.resources import RESOURCES

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

DEFAULT_BUDGET_MS = 8000

_PLANS: list[SectionPlan] = [
    SectionPlan(
        section_id="overview",
        resource_ids=frozenset({"users", "courses", "teachers", "batches"}),
        budget_ms=10000,
    ),
    SectionPlan(
        section_id="students",
        resource_ids=frozenset({"users", "courses", "batches"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="teachers",
        resource_ids=frozenset({"teachers", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="courses",
        resource_ids=frozenset({"courses", "teachers"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="batches",
        resource_ids=frozenset({"courses", "batches", "teachers"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="one-to-one",
        resource_ids=frozenset({"one-to-one-batches", "users", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="modules",
        resource_ids=frozenset({"modules", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="lessons",
        resource_ids=frozenset({"lessons", "modules", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="classroom",
        resource_ids=frozenset({"classroom-videos", "courses", "batches"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="live-classes",
        resource_ids=frozenset({"live-sessions", "batches"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="mentors",
        resource_ids=frozenset({"mentors"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="projects",
        resource_ids=frozenset({"projects", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="assessments",
        resource_ids=frozenset({"assessments", "courses"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="jobs",
        resource_ids=frozenset({"jobs"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="activity",
        resource_ids=frozenset({"activity-log", "users"}),
        budget_ms=DEFAULT_BUDGET_MS,
    ),
    SectionPlan(
        section_id="analytics",
        resource_ids=frozenset({"users", "courses", "jobs"}),
        budget_ms=10000,
    ),
]


def build_plan_table(
    plans: list[SectionPlan],
    known_resources: Collection[str] = RESOURCES.keys(),
) -> dict[str, SectionPlan]:
    """Index plans by section id. Every listed resource must exist."""
    table: dict[str, SectionPlan] = {}
    for plan in plans:
        if plan.section_id in table:
            raise ValueError(f"Duplicate section id '{plan.section_id}'")
        unknown = plan.resource_ids - set(known_resources)
        if unknown:
            raise ValueError(
                f"Section '{plan.section_id}' references unknown resources: {sorted(unknown)}"
            )
        if plan.budget_ms <= 0:
            raise ValueError(f"Section '{plan.section_id}' needs a positive budget")
        table[plan.section_id] = plan
    return table


SECTIONS: dict[str, SectionPlan] = build_plan_table(_PLANS)


def get_plan(section_id: str, plans: Mapping[str, SectionPlan] = SECTIONS) -> SectionPlan:
    try:
        return plans[section_id]
    except KeyError:
        raise LoadError(
            f"Unknown section '{section_id}'",
            code=LoadErrorCode.UNKNOWN_SECTION,
            recoverable=False,
        ) from None
