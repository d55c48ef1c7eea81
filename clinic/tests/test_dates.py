from datetime import date

from clinic.services.dates import calculate_age


def test_years_and_months():
    assert calculate_age(date(2020, 5, 10), today=date(2022, 8, 10)) == '2 anos e 3 meses'


def test_month_counts_only_after_the_day_is_reached():
    assert calculate_age(date(2022, 1, 15), today=date(2022, 2, 14)) == '0 meses'
    assert calculate_age(date(2022, 1, 15), today=date(2022, 2, 15)) == '1 mês'


def test_singular_forms():
    assert calculate_age(date(2021, 3, 1), today=date(2022, 3, 1)) == '1 ano'
    assert calculate_age(date(2021, 3, 1), today=date(2022, 4, 1)) == '1 ano e 1 mês'
    assert calculate_age(date(2021, 3, 1), today=date(2022, 2, 28)) == '11 meses'


def test_future_birth_date_never_goes_negative():
    assert calculate_age(date(2030, 1, 1), today=date(2026, 1, 1)) == '0 meses'
