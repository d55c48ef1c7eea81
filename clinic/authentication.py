"""
Token authentication backend.

Kept apart from the views so that DRF can import it from settings
without pulling in models through the URL configuration.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Legacy opaque token sent as ``Authorization: Token <key>``."""

    keyword = 'Token'
