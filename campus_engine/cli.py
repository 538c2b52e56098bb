"""CLI entry point for campus_engine."""

import argparse
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from campus_engine.config import load_config, resolve_timezone, source_path
from campus_engine.data.loader import load_records, read_document
from campus_engine.data.models import CanonicalEvent, Course, Diagnostic
from campus_engine.data.types import CourseSortKey, DateRange, ResultSort, SearchType
from campus_engine.errors import ConfigurationError
from campus_engine.normalize.canonicalizer import CalendarSources, Canonicalizer, merge_sources
from campus_engine.normalize.courses import normalize_courses
from campus_engine.normalize.dates import localize
from campus_engine.normalize.search_records import corpus_from_mapping
from campus_engine.query.calendar import events_for_date, upcoming_events
from campus_engine.query.course_filters import (
    CREDIT_OPTIONS,
    TIME_SLOTS,
    CourseFilters,
    apply_filters,
    apply_sort,
)
from campus_engine.search.ranking import (
    filter_by_category,
    filter_by_date_range,
    filter_by_type,
    search,
    sort_results,
    type_counts,
)
from campus_engine.search.urls import resolve_url
from campus_engine.utils.logging_setup import setup_logging

console = Console()

DEFAULT_UPCOMING_DAYS = 7


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, help="Path to config YAML file")
    common.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    parser = argparse.ArgumentParser(
        prog="campus-engine",
        description="Query the merged academic calendar, course catalog and site search",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- day command ---
    day_parser = subparsers.add_parser("day", parents=[common], help="Events on one calendar day")
    day_parser.add_argument("--date", type=date.fromisoformat, help="Day as YYYY-MM-DD (default: today)")

    # --- upcoming command ---
    upcoming_parser = subparsers.add_parser("upcoming", parents=[common], help="Events starting soon")
    upcoming_parser.add_argument("--days", type=int, help="Window length in days")
    upcoming_parser.add_argument("--now", type=datetime.fromisoformat, help="Reference time (default: now)")

    # --- courses command ---
    courses_parser = subparsers.add_parser("courses", parents=[common], help="Filter and sort the course catalog")
    courses_parser.add_argument("--department", type=str)
    courses_parser.add_argument("--time-slot", type=str, choices=TIME_SLOTS)
    courses_parser.add_argument("--credits", type=str, choices=CREDIT_OPTIONS)
    courses_parser.add_argument("--level", type=str)
    courses_parser.add_argument("--search", type=str, default="", help="Free-text search term")
    courses_parser.add_argument("--sort", type=str, default="title", choices=[k.value for k in CourseSortKey])

    # --- search command ---
    search_parser = subparsers.add_parser("search", parents=[common], help="Search programs, people, news and pages")
    search_parser.add_argument("query", type=str)
    search_parser.add_argument("--type", type=str, default="all", choices=["all"] + [t.value for t in SearchType])
    search_parser.add_argument("--category", type=str, default="all")
    search_parser.add_argument("--date-range", type=str, default="all", choices=[r.value for r in DateRange])
    search_parser.add_argument("--sort", type=str, default="relevance", choices=[s.value for s in ResultSort])
    search_parser.add_argument("--now", type=datetime.fromisoformat, help="Reference time for --date-range")

    # --- check command ---
    subparsers.add_parser("check", parents=[common], help="Report records skipped during ingestion")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "day": cmd_day,
        "upcoming": cmd_upcoming,
        "courses": cmd_courses,
        "search": cmd_search,
        "check": cmd_check,
    }
    try:
        return handlers[args.command](args)
    except (FileNotFoundError, ConfigurationError) as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: could not read source data: {e}")
        return 1


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------


def _setup(args) -> dict[str, Any]:
    config = load_config(config_path=getattr(args, "config", None))
    logging_config = config.get("logging", {}) or {}
    setup_logging(
        level=logging_config.get("level", "WARNING"),
        log_file=logging_config.get("file"),
    )
    return config


def _records(config: dict[str, Any], name: str, key: str | None = None) -> list[Any]:
    path = source_path(config, name)
    if path is None:
        return []
    return load_records(path, key=key)


def _load_calendar(config: dict[str, Any]) -> tuple[list[CanonicalEvent], list[Diagnostic]]:
    canonicalizer = Canonicalizer(timezone=resolve_timezone(config))
    sources = CalendarSources(
        academic_calendar=_records(config, "academic_calendar"),
        personal_events=_records(config, "personal_events"),
        cultural_events=_records(config, "cultural_events"),
        calendar_events=_records(config, "calendar_events"),
    )
    return merge_sources(sources, canonicalizer), canonicalizer.diagnostics


def _load_courses(config: dict[str, Any], diagnostics: list[Diagnostic] | None = None) -> list[Course]:
    return normalize_courses(_records(config, "courses"), diagnostics)


def _load_corpus(config: dict[str, Any], diagnostics: list[Diagnostic] | None = None) -> list:
    path = source_path(config, "search_corpus")
    if path is None:
        return []
    data = read_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"Search corpus must be a mapping of collections: {path}")
    return corpus_from_mapping(data, diagnostics)


def _print_json(items: list[Any]) -> None:
    print(json.dumps(items, indent=2, ensure_ascii=False, default=str))


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


def _print_events(events: list[CanonicalEvent], title: str, as_json: bool) -> None:
    if as_json:
        _print_json([e.model_dump(mode="json", by_alias=True) for e in events])
        return

    table = Table(title=title)
    table.add_column("When", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Type")
    table.add_column("Priority")
    table.add_column("Location")
    for event in events:
        when = event.start.strftime("%Y-%m-%d") + " (all day)" if event.is_all_day else event.start.strftime("%Y-%m-%d %H:%M")
        flag = " [red]![/red]" if event.inconsistent else ""
        table.add_row(when, event.title + flag, event.type.value, event.priority.value, event.location)
    console.print(table)
    if not events:
        console.print("No events found.")


def cmd_day(args) -> int:
    """Show the events on one calendar day."""
    config = _setup(args)
    zone = resolve_timezone(config)
    day = args.date or datetime.now(zone).date()

    events, _ = _load_calendar(config)
    _print_events(events_for_date(events, day, tz=zone), f"Events on {day.isoformat()}", args.json)
    return 0


def cmd_upcoming(args) -> int:
    """Show events starting within the upcoming window."""
    config = _setup(args)
    zone = resolve_timezone(config)
    now = localize(args.now, zone) if args.now else datetime.now(zone)
    days = args.days if args.days is not None else (config.get("calendar", {}) or {}).get(
        "upcoming_days", DEFAULT_UPCOMING_DAYS
    )

    events, _ = _load_calendar(config)
    _print_events(upcoming_events(events, int(days), now), f"Next {days} days", args.json)
    return 0


def cmd_courses(args) -> int:
    """Filter and sort the course catalog."""
    config = _setup(args)
    filters = CourseFilters(
        department=args.department,
        time_slot=args.time_slot,
        credits=args.credits,
        level=args.level,
        search_term=args.search,
    )
    catalog = _load_courses(config)
    courses = apply_sort(apply_filters(catalog, filters), args.sort)

    if args.json:
        _print_json([c.model_dump(mode="json", by_alias=True) for c in courses])
        return 0

    table = Table(title=f"Showing {len(courses)} of {len(catalog)} courses")
    table.add_column("Code", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Department")
    table.add_column("Credits", justify="right")
    table.add_column("Schedule")
    table.add_column("Available", justify="right")
    for course in courses:
        seats = course.availability
        schedule = f"{', '.join(course.schedule.days)} {course.schedule.time}".strip()
        table.add_row(
            course.code,
            course.title,
            course.department,
            str(course.credits),
            schedule,
            f"{round(seats.percent)}% ({seats.bucket.value})",
        )
    console.print(table)
    return 0


def cmd_search(args) -> int:
    """Search the site corpus and print ranked results."""
    config = _setup(args)
    corpus = _load_corpus(config)

    results = search(corpus, args.query)
    filtered = filter_by_type(results, args.type)
    filtered = filter_by_category(filtered, args.category)
    filtered = filter_by_date_range(filtered, args.date_range, now=args.now)
    filtered = sort_results(filtered, args.sort)

    if args.json:
        _print_json(
            [{**r.model_dump(mode="json", by_alias=True), "url": resolve_url(r)} for r in filtered]
        )
        return 0

    counts = ", ".join(f"{k}: {v}" for k, v in type_counts(results).items() if v)
    table = Table(title=f'Found {len(filtered)} result(s) for "{args.query}"', caption=counts or None)
    table.add_column("Type", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("URL")
    for result in filtered:
        table.add_row(result.search_type, result.display_title, resolve_url(result))
    console.print(table)
    return 0


def cmd_check(args) -> int:
    """Load every configured source and report skipped records."""
    config = _setup(args)
    events, diagnostics = _load_calendar(config)
    courses = _load_courses(config, diagnostics)
    corpus = _load_corpus(config, diagnostics)

    if args.json:
        _print_json([d.model_dump(mode="json", by_alias=True) for d in diagnostics])
        return 0 if not diagnostics else 2

    print(f"Events loaded:         {len(events)}")
    print(f"Courses loaded:        {len(courses)}")
    print(f"Search records loaded: {len(corpus)}")
    inconsistent = sum(1 for e in events if e.inconsistent) + sum(1 for c in courses if c.inconsistent)
    print(f"Inconsistent records:  {inconsistent}")
    print(f"Skipped records:       {len(diagnostics)}")
    for diag in diagnostics:
        ident = f" ({diag.record_id})" if diag.record_id else ""
        print(f"  {diag.source} #{diag.index}{ident}: {diag.reason}")
    return 0 if not diagnostics else 2
