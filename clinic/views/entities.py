"""
Generic CRUD endpoints for tenant-owned entities.

The front end talks to every entity through the same small set of
operations (``list``, ``filter``, ``get``, ``create``, ``update``,
``delete``).  :func:`entity_endpoints` builds the pair of function views
behind ``/api/<entity>`` and ``/api/<entity>/<id>`` for one model.

Everything is scoped to ``request.tenant``: lists never include other
tenants' rows and a detail request for another tenant's row answers 404.
Query parameters named after whitelisted fields filter the list, ``q``
searches the configured text fields and ``page``/``pageSize`` paginate.
"""
from __future__ import annotations

from functools import reduce
from operator import or_
from typing import Callable, Iterable, Optional, Sequence

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasActiveTenant, IsTenantAdmin, requires_module
from ..serializers.actions import ListQuerySerializer
from ..services import dashboard
from ..services.audit import safe_log_action


_BOOLEANS = {'true': True, 'false': False}


def _enforce(request, perm_classes: Iterable[type]) -> None:
    for perm_class in perm_classes:
        perm = perm_class()
        if not perm.has_permission(request, None):
            raise PermissionDenied(getattr(perm, 'message', None))


def filter_queryset(qs, params, filter_fields: Sequence[str], search_fields: Sequence[str] = ()):
    for name in filter_fields:
        value = params.get(name)
        if value is None or value == '':
            continue
        value = _BOOLEANS.get(value.lower(), value) if isinstance(value, str) else value
        try:
            qs = qs.filter(**{name: value})
        except (ValueError, DjangoValidationError):
            raise ValidationError({name: f"Valor inválido: {value}"})
    term = (params.get('q') or '').strip()
    if term and search_fields:
        qs = qs.filter(reduce(or_, (Q(**{f'{f}__icontains': term}) for f in search_fields)))
    return qs


def paginate(request, qs, serialize: Callable):
    """Plain list without ``page``; ``{ok, data, pagination}`` envelope with it."""
    q = ListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    page = q.validated_data.get('page')
    if not page:
        return Response(serialize(qs))
    page_size = q.validated_data.get('pageSize') or 20
    total = qs.count()
    start = (page - 1) * page_size
    return Response({
        'ok': True,
        'data': serialize(qs[start:start + page_size]),
        'pagination': {'total': total, 'page': page, 'pageSize': page_size},
    })


def entity_endpoints(
    name: str,
    model,
    serializer_class,
    *,
    module: Optional[str] = None,
    filter_fields: Sequence[str] = (),
    search_fields: Sequence[str] = (),
    ordering: Sequence[str] = ('-created_at', '-id'),
    scope: Optional[Callable] = None,
    write_permissions: Sequence[type] = (),
    delete_permissions: Sequence[type] = (IsTenantAdmin,),
    create: Optional[Callable] = None,
    update: Optional[Callable] = None,
    after_save: Optional[Callable] = None,
    after_delete: Optional[Callable] = None,
):
    """Return ``(collection_view, detail_view)`` for ``model``.

    ``scope(request, qs)`` narrows the visible rows further.  ``create`` and
    ``update`` replace ``serializer.save``; they receive the validated
    serializer and the tenant.  ``after_save(request, instance, created)``
    may return a dict merged into the response; ``after_delete(request,
    instance, pk)`` runs once the row is gone.
    """
    perms = [IsAuthenticated, HasActiveTenant]
    if module:
        perms.append(requires_module(module))

    def queryset(request):
        qs = model.objects.filter(tenant=request.tenant)
        if scope:
            qs = scope(request, qs)
        return qs

    def context(request) -> dict:
        return {'request': request, 'tenant': request.tenant}

    def respond(request, instance, created: bool):
        data = dict(serializer_class(instance, context=context(request)).data)
        if after_save:
            data.update(after_save(request, instance, created) or {})
        dashboard.invalidate(request.tenant.id)
        safe_log_action(user=request.user, tenant=request.tenant, action=f'{name}_{"create" if created else "update"}',
                        object_type=name, object_id=instance.pk)
        return Response(data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    def get_object(request, pk):
        instance = queryset(request).filter(pk=pk).first()
        if instance is None:
            raise NotFound('Registro não encontrado')
        return instance

    def collection(request):
        if request.method == 'POST':
            _enforce(request, write_permissions)
            s = serializer_class(data=request.data, context=context(request))
            s.is_valid(raise_exception=True)
            instance = create(s, tenant=request.tenant) if create else s.save(tenant=request.tenant)
            return respond(request, instance, True)
        qs = filter_queryset(queryset(request), request.query_params, filter_fields, search_fields)
        qs = qs.order_by(*ordering)
        return paginate(request, qs, lambda rows: serializer_class(rows, many=True, context=context(request)).data)

    def detail(request, pk: int):
        instance = get_object(request, pk)
        if request.method == 'GET':
            return Response(serializer_class(instance, context=context(request)).data)
        if request.method == 'DELETE':
            _enforce(request, delete_permissions)
            object_id = instance.pk
            instance.delete()
            if after_delete:
                after_delete(request, instance, object_id)
            dashboard.invalidate(request.tenant.id)
            safe_log_action(user=request.user, tenant=request.tenant, action=f'{name}_delete',
                            object_type=name, object_id=object_id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        _enforce(request, write_permissions)
        s = serializer_class(instance, data=request.data, partial=request.method == 'PATCH', context=context(request))
        s.is_valid(raise_exception=True)
        instance = update(s, tenant=request.tenant) if update else s.save()
        return respond(request, instance, False)

    base_name = name.replace('-', '_')
    collection.__name__ = f'{base_name}_collection'
    detail.__name__ = f'{base_name}_detail'
    collection_view = api_view(['GET', 'POST'])(permission_classes(perms)(collection))
    detail_view = api_view(['GET', 'PUT', 'PATCH', 'DELETE'])(permission_classes(perms)(detail))
    return collection_view, detail_view
