from __future__ import annotations

from datetime import date
from typing import Optional

from django.utils import timezone


def calculate_age(birth_date: date, today: Optional[date] = None) -> str:
    """Return the pet's age as a Portuguese label (``2 anos e 3 meses``).

    A month only counts once the day of the month has been reached.
    """
    today = today or timezone.localdate()
    total_months = (today.year - birth_date.year) * 12 + (today.month - birth_date.month)
    if today.day < birth_date.day:
        total_months -= 1
    years, months = divmod(max(total_months, 0), 12)

    if years == 0:
        return '1 mês' if months == 1 else f'{months} meses'

    label = '1 ano' if years == 1 else f'{years} anos'
    if months == 0:
        return label
    if months == 1:
        return f'{label} e 1 mês'
    return f'{label} e {months} meses'
