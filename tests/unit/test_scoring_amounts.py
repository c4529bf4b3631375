from datetime import date

import pytest

from invoice_fraud.scoring.amounts import parse_amount, parse_date, parse_year


class TestParseAmount:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("$45,000.00", 45000.0),
            (" 1 000 ", 1000.0),
            ("-5", -5.0),
            (".5", 0.5),
            ("4090.91", 4090.91),
        ],
    )
    def test_valid(self, raw: str, expected: float) -> None:
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "$", "abc", "45000abc", "1.2.3", "AUD 100"])
    def test_invalid_is_absent(self, raw: str) -> None:
        assert parse_amount(raw) is None


class TestParseDate:
    def test_iso(self) -> None:
        assert parse_date("2024-03-15") == date(2024, 3, 15)

    def test_australian(self) -> None:
        assert parse_date(" 15/03/2024 ") == date(2024, 3, 15)

    @pytest.mark.parametrize("raw", ["", "2024/03/15", "31/02/2024", "March 15 2024"])
    def test_invalid(self, raw: str) -> None:
        assert parse_date(raw) is None


class TestParseYear:
    def test_four_digits(self) -> None:
        assert parse_year(" 2022 ") == 2022

    @pytest.mark.parametrize("raw", ["", "22", "20222", "MY22"])
    def test_invalid(self, raw: str) -> None:
        assert parse_year(raw) is None
