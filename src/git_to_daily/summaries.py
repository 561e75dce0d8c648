from __future__ import annotations

import datetime as dt

from .daily_reader import aggregate_focus_areas, top_commit_messages
from .models import DailySummary, MonthlyAggregate, WeekBreakdown, WeeklyAggregate
from .periods import (
    days_in_month,
    format_date,
    format_date_range,
    format_month_id,
    format_month_name,
    format_short_date,
    format_week_id,
    iso_week_number,
    parse_date,
    weekday_abbr,
)

MIN_ACTIVE_DAYS = 2
WEEKLY_HIGHLIGHTS = 10
MONTHLY_HIGHLIGHTS = 15


def build_weekly(summaries: list[DailySummary], week_start: dt.date, week_end: dt.date) -> WeeklyAggregate:
    return WeeklyAggregate(
        week_id=format_week_id(week_start),
        start_date=format_date(week_start),
        end_date=format_date(week_end),
        daily_summaries=tuple(summaries),
        total_commits=sum(s.commit_count for s in summaries),
        total_files_changed=sum(s.files_changed for s in summaries),
        active_days=len(summaries),
    )


def weekly_breakdown(summaries: list[DailySummary]) -> list[WeekBreakdown]:
    by_week: dict[int, int] = {}
    for s in summaries:
        week = iso_week_number(parse_date(s.date))
        by_week[week] = by_week.get(week, 0) + s.commit_count
    return [WeekBreakdown(week_number=w, commits=c) for w, c in sorted(by_week.items())]


def build_monthly(summaries: list[DailySummary], month_date: dt.date) -> MonthlyAggregate:
    return MonthlyAggregate(
        month_id=format_month_id(month_date),
        month_name=format_month_name(month_date),
        days_in_month=days_in_month(month_date),
        daily_summaries=tuple(summaries),
        total_commits=sum(s.commit_count for s in summaries),
        total_files_changed=sum(s.files_changed for s in summaries),
        active_days=len(summaries),
        weekly_breakdown=tuple(weekly_breakdown(summaries)),
    )


def _focus_areas_section(summaries: list[DailySummary]) -> str:
    counts = aggregate_focus_areas(summaries)
    # sorted() is stable: equal counts keep first-encountered order.
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return "\n".join(["## Focus Areas", *[f"- {area}: {n} commits" for area, n in ranked]])


def _daily_table(summaries: list[DailySummary]) -> str:
    lines = ["## Daily Breakdown", "| Date | Day | Commits | Focus |", "|------|-----|---------|-------|"]
    for s in summaries:
        d = parse_date(s.date)
        lines.append(f"| {format_short_date(d)} | {weekday_abbr(d)} | {s.commit_count} | {s.focus_area} |")
    return "\n".join(lines)


def _weekly_table(breakdown: tuple[WeekBreakdown, ...]) -> str:
    lines = ["## Weekly Breakdown", "| Week | Commits |", "|------|---------|"]
    for w in breakdown:
        lines.append(f"| W{w.week_number:02d} | {w.commits} |")
    return "\n".join(lines)


def _highlights(summaries: list[DailySummary], limit: int) -> str:
    return "\n".join(["## Highlights", *[f"- ✅ {m}" for m in top_commit_messages(summaries, limit)]])


def _footer() -> str:
    return "\n".join(
        [
            "---",
            "",
            "## Generated by git-to-daily",
            "This summary was automatically generated from daily logs.",
        ]
    )


def render_weekly_log(agg: WeeklyAggregate) -> str:
    summaries = list(agg.daily_summaries)
    date_range = format_date_range(parse_date(agg.start_date), parse_date(agg.end_date))
    sections = [
        f"# Weekly Log - {agg.week_id} ({date_range})",
        "\n".join(
            [
                "## Summary",
                f"- **Total Commits**: {agg.total_commits}",
                f"- **Total Files Changed**: {agg.total_files_changed}",
                f"- **Active Days**: {agg.active_days}/7",
            ]
        ),
        _focus_areas_section(summaries),
        _daily_table(summaries),
        _highlights(summaries, WEEKLY_HIGHLIGHTS),
        _footer(),
    ]
    return "\n\n".join(sections) + "\n"


def render_monthly_log(agg: MonthlyAggregate) -> str:
    summaries = list(agg.daily_summaries)
    sections = [
        f"# Monthly Log - {agg.month_name}",
        "\n".join(
            [
                "## Summary",
                f"- **Total Commits**: {agg.total_commits}",
                f"- **Total Files Changed**: {agg.total_files_changed}",
                f"- **Active Days**: {agg.active_days}/{agg.days_in_month}",
                f"- **Weeks Active**: {len(agg.weekly_breakdown)}",
            ]
        ),
        _focus_areas_section(summaries),
        _weekly_table(agg.weekly_breakdown),
        _daily_table(summaries),
        _highlights(summaries, MONTHLY_HIGHLIGHTS),
        _footer(),
    ]
    return "\n\n".join(sections) + "\n"
