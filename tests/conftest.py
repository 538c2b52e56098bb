"""Shared fixtures for the search tests."""

from __future__ import annotations

import pytest

from campus_engine.normalize.search_records import build_search_corpus

PROGRAMS = [
    {
        "id": 1,
        "slug": "musical-theatre",
        "title": "Musical Theatre",
        "category": "Performing Arts",
        "type": "Bachelor",
        "description": "Acting, singing and dance for the stage",
        "featured": True,
    },
    {
        "id": 2,
        "title": "Dance & Movement",
        "category": "Performing Arts",
        "type": "Diploma",
        "description": "Contemporary and folkloric technique",
    },
]

FACULTY = [
    {
        "id": "f1",
        "firstName": "Maria",
        "lastName": "Fernandez",
        "title": "Professor of Music",
        "department": "Music",
        "specialization": ["Rake and Scrape"],
        "bio": "Folk music scholar",
    },
]

NEWS = [
    {
        "id": "n1",
        "type": "news",
        "title": "Junkanoo Festival Recap",
        "excerpt": "Students shine on Bay Street",
        "category": "Culture",
        "author": "Campus Staff",
        "publishDate": "2024-07-10",
    },
]

EVENTS = [
    {
        "id": "e1",
        "type": "event",
        "title": "Spring Arts Showcase",
        "description": "Dance and music performances",
        "category": "Performance",
        "location": "Main Hall",
        "date": "2024-07-01",
    },
]

ALUMNI = [
    {
        "id": "a1",
        "firstName": "Tia",
        "lastName": "Rolle",
        "graduationYear": 2015,
        "currentPosition": "Principal Dancer",
        "currentOrganization": "Nassau Dance Company",
        "program": "Dance",
        "industry": "Performing Arts",
        "skills": ["Choreography"],
    },
]

PAGES = [
    {
        "id": "about",
        "title": "About CAPAS",
        "description": "Mission and history",
        "url": "/about",
        "keywords": ["mission"],
    },
]


@pytest.fixture
def corpus() -> list:
    return build_search_corpus(
        programs=PROGRAMS,
        faculty=FACULTY,
        news=NEWS,
        events=EVENTS,
        alumni=ALUMNI,
        pages=PAGES,
    )
