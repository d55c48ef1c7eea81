"""
Pet shop inventory and point of sale.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import MODULE_PETSHOP, Product, Sale
from ..permissions import HasActiveTenant, IsTenantAdminOrReadOnly, requires_module
from ..serializers.actions import CheckoutSerializer
from ..serializers.entities import ProductSerializer
from ..services import dashboard, sales
from ..services.audit import safe_log_action
from .entities import entity_endpoints, filter_queryset, paginate

PETSHOP = [IsAuthenticated, HasActiveTenant, requires_module(MODULE_PETSHOP)]

products, product_detail = entity_endpoints(
    'products', Product, ProductSerializer,
    module=MODULE_PETSHOP,
    filter_fields=('category', 'module', 'active', 'barcode', 'sku'),
    search_fields=('name', 'sku', 'barcode', 'description'),
    ordering=('name', 'id'),
    write_permissions=(IsTenantAdminOrReadOnly,),
)


def _context(request) -> dict:
    return {'request': request, 'tenant': request.tenant}


@api_view(['GET'])
@permission_classes(PETSHOP)
def product_by_barcode(request, barcode: str):
    product = sales.find_by_barcode(request.tenant, barcode)
    return Response(ProductSerializer(product, context=_context(request)).data)


@api_view(['GET'])
@permission_classes(PETSHOP)
def products_low_stock(request):
    rows = sales.low_stock(request.tenant)
    return Response(ProductSerializer(rows, many=True, context=_context(request)).data)


@api_view(['POST'])
@permission_classes(PETSHOP)
def checkout(request):
    s = CheckoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    sale = sales.checkout(
        request.tenant,
        customer_id=v.get('customer'),
        items=v.get('items') or [],
        payment_method=v['payment_method'],
        amount_received=v.get('amount_received'),
        sold_by=request.user,
    )
    dashboard.invalidate(request.tenant.id)
    safe_log_action(user=request.user, tenant=request.tenant, action='sale_checkout', object_type='sales',
                    object_id=sale.id, detail={'total': str(sale.total_amount), 'method': sale.payment_method})
    return Response({'ok': True, **sales.serialize_sale(sale)}, status=status.HTTP_201_CREATED)

# ScopedRateThrottle reads the scope from the generated view class
checkout.cls.throttle_scope = 'checkout'


def _sales_queryset(request):
    return (
        Sale.objects.filter(tenant=request.tenant)
        .select_related('customer', 'sold_by')
        .prefetch_related('items')
        .order_by('-purchase_date', '-id')
    )


@api_view(['GET'])
@permission_classes(PETSHOP)
def sales_history(request):
    qs = filter_queryset(_sales_queryset(request), request.query_params, ('customer', 'payment_method', 'payment_status'))
    return paginate(request, qs, lambda rows: [sales.serialize_sale(s) for s in rows])


@api_view(['GET'])
@permission_classes(PETSHOP)
def sale_detail(request, pk: int):
    sale = _sales_queryset(request).filter(pk=pk).first()
    if not sale:
        raise NotFound('Venda não encontrada')
    return Response(sales.serialize_sale(sale))
