import pytest

from autowin.calculation.match_scores import extract_auto_scores

from .payloads import match


def test_one_score_per_match_played_divided_by_three():
    matches = [
        match([254, 1, 2], [3, 4, 5], red_auto=30, blue_auto=12),
        match([6, 7, 8], [9, 10, 11], red_auto=45, blue_auto=3),
        match([3, 4, 5], [254, 1, 2], red_auto=9, blue_auto=21),
    ]

    assert extract_auto_scores(matches, 254) == pytest.approx([10.0, 7.0])


def test_team_never_present_gives_empty_list():
    matches = [match([1, 2, 3], [4, 5, 6], red_auto=30, blue_auto=30)]

    assert extract_auto_scores(matches, 254) == []


def test_matches_without_breakdown_are_skipped():
    matches = [
        match([254, 1, 2], [3, 4, 5], breakdown=False),
        match([254, 1, 2], [3, 4, 5], red_auto=18, blue_auto=0),
    ]

    assert extract_auto_scores(matches, 254) == [6.0]


def test_missing_auto_field_skips_the_match():
    matches = [match([254, 1, 2], [3, 4, 5], red_auto=None, blue_auto=20)]

    assert extract_auto_scores(matches, 254) == []


def test_older_field_names_are_recognised():
    matches = [
        match([254, 1, 2], [3, 4, 5], red_auto=24, field="totalAutoPoints"),
        match([254, 1, 2], [3, 4, 5], red_auto=12, field="auto_points"),
    ]

    assert extract_auto_scores(matches, 254) == [8.0, 4.0]


def test_field_priority_order():
    record = match([254, 1, 2], [3, 4, 5], red_auto=30)
    record["score_breakdown"]["red"]["totalAutoPoints"] = 99

    assert extract_auto_scores([record], 254) == [10.0]
    assert extract_auto_scores([record], 254, fields=("totalAutoPoints",)) == [33.0]


def test_malformed_records_are_ignored():
    matches = [
        "frc254",
        {"score_breakdown": {"red": {"autoPoints": 3}}},
        {"alliances": [], "score_breakdown": {"red": {}}},
        match([254, 1, 2], [3, 4, 5], red_auto=15),
    ]

    assert extract_auto_scores(matches, 254) == [5.0]
