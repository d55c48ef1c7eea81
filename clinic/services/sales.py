"""
Point of sale checkout.

A checkout either fully succeeds (sale, items, stock movement and the
receivable entry) or leaves nothing behind.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from clinic.models import Customer, FinancialEntry, Product, Sale, SaleItem, Tenant, User

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def find_by_barcode(tenant: Tenant, barcode: str) -> Product:
    barcode = (barcode or '').strip()
    product = Product.objects.filter(tenant=tenant, barcode=barcode).order_by('-active', 'id').first() if barcode else None
    if product is None:
        raise NotFound('Produto não encontrado')
    return product


def low_stock(tenant: Tenant):
    return Product.objects.filter(tenant=tenant, active=True, stock_quantity__lte=F('min_stock')).order_by('stock_quantity', 'name')


def _merge_lines(items: Iterable[dict]) -> "OrderedDict[int, int]":
    lines: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        product_id = int(item['product'])
        lines[product_id] = lines.get(product_id, 0) + int(item['quantity'])
    return lines


@transaction.atomic
def checkout(tenant: Tenant, *, customer_id: Optional[int], items: list, payment_method: str,
             amount_received: Optional[Decimal] = None, sold_by: Optional[User] = None) -> Sale:
    if not customer_id:
        raise ValidationError({'customer': 'Cliente obrigatório'})
    customer = Customer.objects.filter(tenant=tenant, id=customer_id).first()
    if customer is None:
        raise ValidationError({'customer': 'Cliente obrigatório'})
    lines = _merge_lines(items or [])
    if not lines:
        raise ValidationError({'items': 'Carrinho vazio'})

    # Lock in id order so concurrent checkouts cannot deadlock
    products = {
        p.id: p
        for p in Product.objects.select_for_update().filter(tenant=tenant, id__in=list(lines)).order_by('id')
    }
    total = Decimal('0')
    priced = []
    for product_id, quantity in lines.items():
        product = products.get(product_id)
        if product is None:
            raise ValidationError({'items': f'Produto {product_id} não encontrado'})
        if not product.active:
            raise ValidationError({'items': f'Produto inativo: {product.name}'})
        if quantity <= 0:
            raise ValidationError({'items': f'Quantidade inválida para {product.name}'})
        if product.stock_quantity < quantity:
            raise ValidationError({'items': f'Estoque insuficiente para {product.name} (disponível: {product.stock_quantity})'})
        line_total = (product.price * quantity).quantize(CENTS)
        total += line_total
        priced.append((product, quantity, line_total))

    if payment_method == 'cash':
        if amount_received is None or amount_received < total:
            raise ValidationError({'amount_received': 'Valor insuficiente'})
        change = (amount_received - total).quantize(CENTS)
    else:
        amount_received = total
        change = Decimal('0')

    sale = Sale.objects.create(
        tenant=tenant, customer=customer, total_amount=total, payment_method=payment_method,
        payment_status='paid', amount_received=amount_received, change_amount=change, sold_by=sold_by,
    )
    for product, quantity, line_total in priced:
        SaleItem.objects.create(
            sale=sale, product=product, product_name=product.name, quantity=quantity,
            unit_price=product.price, total_price=line_total,
        )
        product.stock_quantity -= quantity
        product.save(update_fields=['stock_quantity', 'updated_at'])

    today = timezone.localdate()
    FinancialEntry.objects.create(
        tenant=tenant, kind='receivable', description=f'Venda #{sale.id}', counterparty=customer.full_name,
        amount=total, due_date=today, category='vendas', status='paid', payment_date=today,
        payment_method=payment_method, sale=sale,
    )
    logger.info("Sale %s closed for tenant %s: %s (%d items)", sale.id, tenant.id, total, len(priced))
    return sale


def serialize_sale(sale: Sale) -> dict:
    return {
        'id': sale.id,
        'customer': sale.customer_id,
        'customer_name': sale.customer.full_name if sale.customer_id else '',
        'purchase_date': sale.purchase_date.isoformat(),
        'total_amount': str(sale.total_amount),
        'payment_method': sale.payment_method,
        'payment_status': sale.payment_status,
        'amount_received': str(sale.amount_received) if sale.amount_received is not None else None,
        'change_amount': str(sale.change_amount),
        'sold_by': sale.sold_by.username if sale.sold_by else '',
        'items': [
            {
                'product': i.product_id,
                'product_name': i.product_name,
                'quantity': i.quantity,
                'unit_price': str(i.unit_price),
                'total_price': str(i.total_price),
            }
            for i in sale.items.all()
        ],
    }
