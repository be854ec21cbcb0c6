#!/usr/bin/env python3
"""
Tests for the number and duration helpers shared by both extractors
"""

from processors.durations import (
    parse_iso_duration, format_minutes, parse_time_text, sum_minutes, time_category, TIME_LABELS
)
from processors.nutrition import parse_numeric_value, empty_nutrition, has_nutrition


def test_parse_iso_duration():
    assert parse_iso_duration('PT1H15M') == 75
    assert parse_iso_duration('PT45M') == 45
    assert parse_iso_duration('PT2H') == 120
    assert parse_iso_duration('pt20m') == 20
    assert parse_iso_duration('P0DT1H30M') == 90


def test_parse_iso_duration_ignores_seconds():
    assert parse_iso_duration('PT10M30S') == 10
    assert parse_iso_duration('PT1H0M45S') == 60


def test_parse_iso_duration_rejects_other_input():
    assert parse_iso_duration('bogus') is None
    assert parse_iso_duration('') is None
    assert parse_iso_duration(None) is None
    assert parse_iso_duration(30) is None


def test_parse_iso_duration_needs_the_whole_string():
    assert parse_iso_duration('adapted') is None
    assert parse_iso_duration('about PT20M') is None
    assert parse_iso_duration(' PT20M ') == 20
    assert parse_iso_duration('P1D') == 1440


def test_format_minutes():
    assert format_minutes(75) == '1 hr 15 min'
    assert format_minutes(45) == '45 min'
    assert format_minutes(60) == '1 hr'
    assert format_minutes(150) == '2 hr 30 min'
    assert format_minutes(0) == ''
    assert format_minutes(None) == ''


def test_parse_time_text():
    assert parse_time_text('30 mins') == 30
    assert parse_time_text('1 hr 15 mins') == 75
    assert parse_time_text('2 hours') == 120
    assert parse_time_text('45 minutes') == 45
    assert parse_time_text('0 min') is None
    assert parse_time_text('overnight') is None
    assert parse_time_text('') is None


def test_sum_minutes_needs_a_nonzero_part():
    assert sum_minutes(15, 30) == 45
    assert sum_minutes(None, 30) == 30
    assert sum_minutes(0, None) is None
    assert sum_minutes(None, None) is None


def test_time_category():
    assert time_category(None) is None
    assert time_category(20) == 'quick'
    assert time_category(30) == 'medium'
    assert time_category(60) == 'medium'
    assert time_category(61) == 'long'
    assert set(TIME_LABELS) == {'quick', 'medium', 'long'}


def test_parse_numeric_value():
    assert parse_numeric_value('350 kcal') == 350
    assert parse_numeric_value('25g') == 25
    assert parse_numeric_value('12.5 g') == 13
    assert parse_numeric_value(18.4) == 18
    assert parse_numeric_value(7) == 7


def test_parse_numeric_value_without_a_number():
    assert parse_numeric_value(None) is None
    assert parse_numeric_value('') is None
    assert parse_numeric_value('n/a') is None
    assert parse_numeric_value('...') is None
    assert parse_numeric_value(True) is None
    assert parse_numeric_value(float('nan')) is None
    assert parse_numeric_value(-4) is None


def test_empty_nutrition_is_fresh_each_call():
    first = empty_nutrition()
    first['calories'] = 100

    second = empty_nutrition()
    assert second == {'calories': None, 'protein': None, 'carbs': None, 'fat': None, 'per_serving': True}
    assert not has_nutrition(second)
    assert has_nutrition(first)
    assert not has_nutrition(None)
