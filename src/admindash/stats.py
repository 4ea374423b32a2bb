"""Derived dashboard statistics.

Pure functions over whatever collections are currently in state. Nothing
here is cached, so the figures can never disagree with the loaded data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Mapping


class DashboardStats(BaseModel):
    total_students: int = 0
    active_students: int = 0
    total_teachers: int = 0
    total_courses: int = 0
    total_batches: int = 0
    active_jobs: int = 0
    total_revenue: float = 0.0
    completion_rate: float = 0.0  # Percentage of students that are active, one decimal


def _is_student(record: dict) -> bool:
    # The roster endpoint omits the role on legacy records; those are students
    return record.get("role", "student") == "student"


def _amount(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace("$", "").replace(",", ""))
        except ValueError:
            return 0.0
    return 0.0


def compute_stats(collections: Mapping[str, list[dict]]) -> DashboardStats:
    students = [r for r in collections.get("users", []) if _is_student(r)]
    active_students = sum(1 for s in students if s.get("status") == "active")
    total_students = len(students)
    jobs = collections.get("jobs", [])

    return DashboardStats(
        total_students=total_students,
        active_students=active_students,
        total_teachers=len(collections.get("teachers", [])),
        total_courses=len(collections.get("courses", [])),
        total_batches=len(collections.get("batches", [])),
        active_jobs=sum(1 for j in jobs if j.get("status") == "active"),
        total_revenue=sum(_amount(s.get("tuitionPaid")) for s in students),
        completion_rate=(
            round(active_students / total_students * 100, 1) if total_students else 0.0
        ),
    )
