"""
CPF (Brazilian taxpayer registry number) helpers.

A CPF has nine base digits followed by two check digits.  Each check
digit is ``11 - (weighted sum mod 11)``, folded to ``0`` when the
result is above nine.  Numbers made of a single repeated digit pass the
arithmetic but are not issued, so they are rejected as well.
"""
from __future__ import annotations

import re

_NON_DIGITS = re.compile(r'\D')
_REPEATED = re.compile(r'^(\d)\1+$')

MSG_LENGTH = 'CPF deve ter 11 dígitos'
MSG_INVALID = 'CPF inválido'
MSG_VALID = 'CPF válido'


def clean_cpf(value: str | None) -> str:
    """Return only the digits of ``value``."""
    return _NON_DIGITS.sub('', value or '')


def _check_digit(digits: str, first_weight: int) -> int:
    total = sum(int(d) * (first_weight - i) for i, d in enumerate(digits))
    digit = 11 - (total % 11)
    return 0 if digit > 9 else digit


def validate_cpf(value: str | None) -> bool:
    return lookup_cpf(value)['valid']


def lookup_cpf(value: str | None) -> dict:
    """Validate ``value`` and explain the outcome.

    Returns ``{'valid': bool, 'message': str}`` with the same messages the
    registration forms show to the user.
    """
    digits = clean_cpf(value)
    if len(digits) != 11:
        return {'valid': False, 'message': MSG_LENGTH}
    if _REPEATED.match(digits):
        return {'valid': False, 'message': MSG_INVALID}
    if _check_digit(digits[:9], 10) != int(digits[9]):
        return {'valid': False, 'message': MSG_INVALID}
    if _check_digit(digits[:10], 11) != int(digits[10]):
        return {'valid': False, 'message': MSG_INVALID}
    return {'valid': True, 'message': MSG_VALID}


def format_cpf(value: str | None) -> str:
    """Apply the ``000.000.000-00`` mask to however many digits exist."""
    d = clean_cpf(value)[:11]
    if len(d) <= 3:
        return d
    if len(d) <= 6:
        return f"{d[:3]}.{d[3:]}"
    if len(d) <= 9:
        return f"{d[:3]}.{d[3:6]}.{d[6:]}"
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"
