"""
Support desk and help center.

Tenants open tickets and exchange messages with the platform team.
Platform (super) replies are flagged as staff replies.  The help center
serves global articles plus the ones a tenant wrote for itself.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import KnowledgeArticle, SupportTicket
from ..permissions import HasActiveTenant, IsSuper
from ..serializers.actions import KnowledgeSearchSerializer, TicketMessageSerializer, TicketStatusSerializer
from ..serializers.entities import KnowledgeArticleSerializer, SupportTicketSerializer
from ..services import support
from ..services.tenancy import is_super, resolve_active_tenant, tenant_role
from .entities import entity_endpoints, filter_queryset, paginate

support_tickets, support_ticket_detail = entity_endpoints(
    'support-tickets', SupportTicket, SupportTicketSerializer,
    filter_fields=('status', 'priority', 'category'),
    search_fields=('title', 'description'),
    create=lambda serializer, tenant: support.open_ticket(serializer, tenant=tenant, user=serializer.context['request'].user),
)


def _ticket(request, pk, *, admin_only: bool = False) -> SupportTicket:
    """Load a ticket; the platform team sees every tenant's tickets."""
    ticket = SupportTicket.objects.select_related('created_by').filter(pk=pk).first()
    if not ticket:
        raise NotFound('Chamado não encontrado')
    if is_super(request.user):
        return ticket
    tenant = resolve_active_tenant(request.user, getattr(request, 'tenant_hint', None))
    if ticket.tenant_id != tenant.id:
        raise NotFound('Chamado não encontrado')
    if admin_only and tenant_role(request.user, tenant) != 'admin':
        raise PermissionDenied('Apenas administradores podem alterar o status')
    return ticket


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSuper])
def support_tickets_all(request):
    """Platform inbox: tickets of every tenant."""
    qs = SupportTicket.objects.select_related('created_by').order_by('-created_at', '-id')
    qs = filter_queryset(qs, request.query_params, ('tenant', 'status', 'priority', 'category'), ('title', 'description'))
    return paginate(request, qs, lambda rows: [
        {**SupportTicketSerializer(t).data, 'tenant': t.tenant_id} for t in rows
    ])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def support_ticket_messages(request, pk: int):
    ticket = _ticket(request, pk)
    if request.method == 'GET':
        rows = ticket.messages.select_related('sender').order_by('created_at', 'id')
        return Response([support.serialize_message(m) for m in rows])
    s = TicketMessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    msg = support.post_message(ticket, request.user, s.validated_data['content'])
    return Response(support.serialize_message(msg), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def support_ticket_status(request, pk: int):
    ticket = _ticket(request, pk, admin_only=True)
    s = TicketStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ticket.status = s.validated_data['status']
    ticket.save(update_fields=['status', 'updated_at'])
    return Response({'ok': True, 'id': ticket.id, 'status': ticket.status})


def _can_edit_article(request, article: KnowledgeArticle) -> bool:
    if is_super(request.user):
        return True
    return article.tenant_id == request.tenant.id and tenant_role(request.user, request.tenant) == 'admin'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def knowledge_articles(request):
    """Search the help center, or publish an article.

    Articles written by a super user are global; a tenant administrator
    writes articles visible only inside their tenant.
    """
    if request.method == 'POST':
        role = tenant_role(request.user, request.tenant)
        if role not in ('super', 'admin'):
            raise PermissionDenied('Apenas administradores podem publicar artigos')
        s = KnowledgeArticleSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        article = s.save(tenant=None if role == 'super' else request.tenant)
        return Response(KnowledgeArticleSerializer(article).data, status=status.HTTP_201_CREATED)
    q = KnowledgeSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    rows = support.search_articles(request.tenant, q.validated_data.get('q', ''), category=q.validated_data.get('category', ''))
    return Response(KnowledgeArticleSerializer(rows, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, HasActiveTenant])
def knowledge_article_detail(request, pk: int):
    article = support.visible_articles(request.tenant, include_drafts=True).filter(pk=pk).first()
    if not article or (not article.published and not _can_edit_article(request, article)):
        raise NotFound('Artigo não encontrado')
    if request.method == 'GET':
        return Response(KnowledgeArticleSerializer(article).data)
    if not _can_edit_article(request, article):
        raise PermissionDenied('Sem permissão para editar este artigo')
    if request.method == 'DELETE':
        article.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    s = KnowledgeArticleSerializer(article, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    return Response(KnowledgeArticleSerializer(s.save()).data)
