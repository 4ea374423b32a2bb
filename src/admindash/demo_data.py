"""Built-in demo datasets for catalog resources.

Only non-sensitive catalog collections have an entry here. Rosters, mentor
profiles and activity logs deliberately have none: they are hard-fail
resources and must never be replaced by placeholder records.
"""

from __future__ import annotations

import copy

DEMO_DATASETS: dict[str, list[dict]] = {
    "teachers": [
        {
            "id": "teacher1",
            "name": "Dr. Sarah Mitchell",
            "email": "teacher@example.com",
            "role": "teacher",
            "status": "active",
            "domain": "Cyber Security & Ethical Hacking",
            "experience": "8 years in cybersecurity education",
            "createdAt": "2025-10-20T00:00:00Z",
            "updatedAt": "2025-11-01T00:00:00Z",
        },
    ],
    "courses": [
        {
            "id": "course1",
            "title": "Cyber Security & Ethical Hacking",
            "description": (
                "Master cybersecurity fundamentals, penetration testing, "
                "and ethical hacking techniques."
            ),
            "duration": "6 months",
            "modules": 6,
            "status": "active",
            "createdAt": "2025-10-15T00:00:00Z",
            "updatedAt": "2025-11-01T00:00:00Z",
        },
        {
            "id": "course2",
            "title": "Full Stack Web Development",
            "description": (
                "Learn to build complete web applications using modern frontend "
                "and backend technologies."
            ),
            "duration": "5 months",
            "modules": 5,
            "status": "active",
            "createdAt": "2025-10-20T00:00:00Z",
            "updatedAt": "2025-11-02T00:00:00Z",
        },
    ],
    "classroom-videos": [
        {
            "id": "video1",
            "title": "Introduction to Cyber Security",
            "instructor": "Dr. Sarah Mitchell",
            "duration": "1 hr 30 min",
            "date": "2025-01-15",
            "courseType": "Cyber Security & Ethical Hacking",
            "type": "Lecture",
            "videoSource": "youtube-url",
            "courseId": "course1",
            "createdAt": "2025-01-15T10:00:00Z",
        },
    ],
}


def has_demo_dataset(resource_id: str) -> bool:
    return resource_id in DEMO_DATASETS


def get_demo_dataset(resource_id: str) -> list[dict]:
    """Return a deep copy so callers can't mutate the built-in dataset."""
    return copy.deepcopy(DEMO_DATASETS[resource_id])
