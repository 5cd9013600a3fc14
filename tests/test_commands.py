"""Tests for SMS command parsing."""

from __future__ import annotations

import pytest

from farmsms.commands import parse_command
from farmsms.models import HelpRequest, InvalidField, LabourRequest, MachineryBooking


class TestParseCommandRouting:
    @pytest.mark.parametrize("text", ["", "   ", "hello world", "RENT tractor 2026-02-16 kalyani", "BOOK"])
    def test_unrecognised_or_short_input_returns_none(self, text):
        assert parse_command(text) is None

    def test_lone_labor_keyword_returns_none(self):
        assert parse_command("LABOR") is None

    def test_help_alone(self):
        assert parse_command("HELP") == HelpRequest()

    def test_help_with_trailing_text_and_lowercase(self):
        assert parse_command("help anything") == HelpRequest()


class TestParseBook:
    def test_multi_word_item(self):
        assert parse_command("BOOK mini tractor 2026-02-16 kalyani") == MachineryBooking(
            item="mini tractor", date="2026-02-16", location="kalyani"
        )

    def test_keyword_case_insensitive_and_item_case_folded(self):
        intent = parse_command("book TRACTOR 2026-02-16 kalyani")
        assert intent == MachineryBooking(item="tractor", date="2026-02-16", location="kalyani")

    def test_location_keeps_case_and_joins_words(self):
        intent = parse_command("BOOK tractor 2026-02-16 North   Kalyani")
        assert isinstance(intent, MachineryBooking)
        assert intent.location == "North Kalyani"

    def test_whitespace_runs_collapse_in_item(self):
        intent = parse_command("  BOOK  mini\t tractor 2026-02-16 kalyani  ")
        assert isinstance(intent, MachineryBooking)
        assert intent.item == "mini tractor"

    def test_first_date_token_is_the_anchor(self):
        intent = parse_command("BOOK tractor 2026-02-16 kalyani 2026-03-01")
        assert intent == MachineryBooking(
            item="tractor", date="2026-02-16", location="kalyani 2026-03-01"
        )

    def test_missing_date_returns_none(self):
        assert parse_command("BOOK tractor kalyani") is None

    def test_missing_item_returns_none(self):
        assert parse_command("BOOK 2026-02-16 kalyani") is None

    def test_missing_location_returns_none(self):
        assert parse_command("BOOK tractor 2026-02-16") is None

    def test_loose_date_format_is_not_an_anchor(self):
        assert parse_command("BOOK tractor 2026-2-16 kalyani") is None

    @pytest.mark.parametrize("token", ["9999-99-99", "2026-02-30", "2026-13-01"])
    def test_date_shaped_but_not_a_calendar_date(self, token):
        assert parse_command(f"BOOK tractor {token} kalyani") == InvalidField(field="date", value=token)


class TestParseLabor:
    def test_full_command(self):
        assert parse_command("LABOR mason 5 2026-02-16") == LabourRequest(
            skill="mason", quantity=5, date="2026-02-16"
        )

    def test_skill_case_folded_date_left_raw(self):
        assert parse_command("labor MASON 2 tomorrow") == LabourRequest(
            skill="mason", quantity=2, date="tomorrow"
        )

    def test_extra_tokens_ignored(self):
        intent = parse_command("LABOR mason 3 2026-02-16 please")
        assert intent == LabourRequest(skill="mason", quantity=3, date="2026-02-16")

    def test_too_few_tokens_returns_none(self):
        assert parse_command("LABOR mason 2026-02-16") is None

    @pytest.mark.parametrize("token", ["five", "5abc", "-2", "0", "2.5"])
    def test_invalid_quantity(self, token):
        assert parse_command(f"LABOR mason {token} 2026-02-16") == InvalidField(
            field="quantity", value=token
        )
