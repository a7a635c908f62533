"""Streak and analytics JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required

from moodjournal.core.utils.decorators import validation_errors_as_json
from moodjournal.domains.journal.mappers import map_day_counts, map_mood_counts, map_summary
from moodjournal.domains.journal.schemas.journal_schemas import DateRangeQuery, TopTagsQuery
from moodjournal.domains.journal.services import analytics_service

analytics_api_bp = Blueprint("analytics_api", __name__)


def _range() -> DateRangeQuery:
    return DateRangeQuery.model_validate(request.args.to_dict())


@analytics_api_bp.get("/summary")
@login_required
@validation_errors_as_json
def summary():
    query = _range()
    data = analytics_service.get_dashboard_summary(query.start, query.end)
    return jsonify({"ok": True, "summary": map_summary(data)})


@analytics_api_bp.get("/streaks")
@login_required
def streaks():
    return jsonify(
        {
            "ok": True,
            "current_streak": analytics_service.get_current_streak(),
            "longest_streak": analytics_service.get_longest_streak(),
        }
    )


@analytics_api_bp.get("/missed-days")
@login_required
@validation_errors_as_json
def missed_days():
    query = _range()
    days = analytics_service.get_missed_days(query.start, query.end)
    return jsonify({"ok": True, "days": [d.isoformat() for d in days]})


@analytics_api_bp.get("/moods")
@login_required
@validation_errors_as_json
def moods():
    query = _range()
    return jsonify(
        {
            "ok": True,
            "distribution": analytics_service.get_mood_distribution(query.start, query.end),
            "most_frequent": analytics_service.get_most_frequent_mood(query.start, query.end).value,
            "percentages": map_mood_counts(analytics_service.get_mood_percentages(query.start, query.end)),
        }
    )


@analytics_api_bp.get("/tags")
@login_required
@validation_errors_as_json
def tags():
    query = TopTagsQuery.model_validate(request.args.to_dict())
    return jsonify(
        {
            "ok": True,
            "most_used": analytics_service.get_most_used_tags(query.start, query.end, query.top_n),
            "percentages": analytics_service.get_tag_percentages(query.start, query.end),
        }
    )


@analytics_api_bp.get("/words")
@login_required
@validation_errors_as_json
def words():
    query = _range()
    return jsonify(
        {
            "ok": True,
            "total_entries": analytics_service.get_total_entries(query.start, query.end),
            "average_word_count": analytics_service.get_average_word_count(query.start, query.end),
            "trends": map_day_counts(analytics_service.get_word_count_trends(query.start, query.end)),
            "entries_per_day": map_day_counts(analytics_service.get_entries_per_day(query.start, query.end)),
        }
    )
