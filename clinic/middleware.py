from django.conf import settings


class ActiveTenantMiddleware:
    """Capture the active tenant identifier sent by the front end.

    The identifier comes from the ``X-Tenant`` header or the ``store``
    query parameter.  It is only a hint: the ``HasActiveTenant``
    permission validates it once DRF has authenticated the user.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.header = getattr(settings, 'TENANT_HEADER', 'X-Tenant')
        self.query_param = getattr(settings, 'TENANT_QUERY_PARAM', 'store')

    def __call__(self, request):
        hint = request.headers.get(self.header) or request.GET.get(self.query_param) or ''
        request.tenant_hint = hint.strip() or None
        return self.get_response(request)
