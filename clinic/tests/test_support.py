from unittest import mock

import pytest
import requests
from rest_framework import status

from ..models import KnowledgeArticle, SupportTicket, User
from ..services import support
from .helpers import TenantAPITestCase, make_member, make_tenant


class FakeResponse:
    def __init__(self, status_code: int):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} Server Error', response=self)


@pytest.fixture
def ticket(db):
    tenant = make_tenant('gamma')
    user = make_member('gamma_admin', tenant)
    return SupportTicket.objects.create(tenant=tenant, title='Erro', description='Caixa travou', created_by=user)


def test_webhook_disabled_without_url(ticket, monkeypatch, settings):
    settings.SUPPORT_WEBHOOK_URL = ''
    monkeypatch.setattr(support.requests, 'post', mock.Mock())
    assert support.notify_support_desk(ticket) is False
    support.requests.post.assert_not_called()


def test_webhook_posts_ticket(ticket, monkeypatch, settings):
    settings.SUPPORT_WEBHOOK_URL = 'https://desk.example/hook'
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return FakeResponse(200)

    monkeypatch.setattr(support.requests, 'post', fake_post)
    assert support.notify_support_desk(ticket) is True
    assert calls == [('https://desk.example/hook', {
        'ticket_id': ticket.id, 'tenant_id': ticket.tenant_id, 'title': 'Erro',
        'priority': 'medium', 'category': 'technical', 'created_by': 'gamma_admin',
    })]


def test_webhook_failure_is_logged_not_raised(ticket, monkeypatch, caplog, settings):
    settings.SUPPORT_WEBHOOK_URL = 'https://desk.example/hook'
    monkeypatch.setattr(support.requests, 'post', lambda *a, **kw: FakeResponse(500))
    assert support.notify_support_desk(ticket) is False
    assert 'Support webhook failed' in caplog.text


class SupportTicketTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client_ = self.authenticate(self.admin, self.tenant)
        self.root = User.objects.create_user(username='root', password='P@ssw0rd1', role='super')

    def open_ticket(self):
        return self.client_.post('/api/support-tickets',
                                 {'title': '<b>Erro</b> no caixa', 'description': 'Não fecha'}, format='json')

    def test_open_ticket_sanitizes_and_notifies_after_commit(self):
        with mock.patch('clinic.services.support.notify_support_desk') as notify:
            with self.captureOnCommitCallbacks(execute=True):
                resp = self.open_ticket()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['title'], 'Erro no caixa')
        self.assertEqual(resp.data['created_by'], 'alpha_admin')
        notify.assert_called_once()
        self.assertEqual(notify.call_args[0][0].id, resp.data['id'])

    def test_platform_reply_moves_ticket_forward(self):
        tid = self.open_ticket().data['id']
        own = self.client_.post(f'/api/support-tickets/{tid}/messages', {'content': 'Alguma novidade?'}, format='json')
        self.assertFalse(own.data['is_staff_reply'])
        self.assertEqual(SupportTicket.objects.get(id=tid).status, 'open')

        root = self.authenticate(self.root)
        reply = root.post(f'/api/support-tickets/{tid}/messages', {'content': 'Verificando'}, format='json')
        self.assertEqual(reply.status_code, status.HTTP_201_CREATED)
        self.assertTrue(reply.data['is_staff_reply'])
        self.assertEqual(SupportTicket.objects.get(id=tid).status, 'in_progress')

        thread = self.client_.get(f'/api/support-tickets/{tid}/messages').data
        self.assertEqual([m['sender'] for m in thread], ['alpha_admin', 'root'])

    def test_blank_message_rejected(self):
        tid = self.open_ticket().data['id']
        resp = self.client_.post(f'/api/support-tickets/{tid}/messages', {'content': '<i></i>  '}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_tickets_stay_inside_tenant(self):
        tid = self.open_ticket().data['id']
        outsider = self.authenticate(self.other_admin, self.other)
        resp = outsider.get(f'/api/support-tickets/{tid}/messages')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(outsider.get('/api/support-tickets/all').status_code, status.HTTP_403_FORBIDDEN)
        inbox = self.authenticate(self.root).get('/api/support-tickets/all').data
        self.assertEqual([(t['id'], t['tenant']) for t in inbox], [(tid, self.tenant.id)])

    def test_only_admins_change_status(self):
        tid = self.open_ticket().data['id']
        staff = self.authenticate(self.staff, self.tenant)
        url = f'/api/support-tickets/{tid}/status'
        self.assertEqual(staff.post(url, {'status': 'closed'}, format='json').status_code, status.HTTP_403_FORBIDDEN)
        resp = self.client_.post(url, {'status': 'resolved'}, format='json')
        self.assertEqual(resp.data, {'ok': True, 'id': tid, 'status': 'resolved'})


class KnowledgeBaseTests(TenantAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        KnowledgeArticle.objects.create(title='Como emitir recibo', content='Use o menu vendas',
                                        category='vendas', tags=['recibo', 'caixa'])
        KnowledgeArticle.objects.create(title='Rascunho', content='recibo', published=False)
        KnowledgeArticle.objects.create(tenant=self.other, title='Recibo da Beta', content='interno')
        self.client_ = self.authenticate(self.staff, self.tenant)

    def search(self, client, **params):
        return [a['title'] for a in client.get('/api/knowledge-articles', params).data]

    def test_search_matches_title_content_and_tags(self):
        self.assertEqual(self.search(self.client_, q='RECIBO'), ['Como emitir recibo'])
        self.assertEqual(self.search(self.client_, q='caixa'), ['Como emitir recibo'])
        self.assertEqual(self.search(self.client_, category='outros'), [])

    def test_tenant_articles_are_private(self):
        admin = self.authenticate(self.admin, self.tenant)
        resp = admin.post('/api/knowledge-articles', {
            'title': 'Procedimento interno', 'content': '<p>Passo 1</p><script>alert(1)</script>',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('<script>', resp.data['content'])
        self.assertIn('<p>Passo 1</p>', resp.data['content'])
        self.assertIn('Procedimento interno', self.search(self.client_))
        beta = self.authenticate(self.other_admin, self.other)
        self.assertNotIn('Procedimento interno', self.search(beta))
        self.assertEqual(beta.get(f"/api/knowledge-articles/{resp.data['id']}").status_code,
                         status.HTTP_404_NOT_FOUND)

    def test_staff_cannot_publish_or_edit_global(self):
        resp = self.client_.post('/api/knowledge-articles', {'title': 'X', 'content': 'y'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        article = KnowledgeArticle.objects.get(title='Como emitir recibo')
        admin = self.authenticate(self.admin, self.tenant)
        resp = admin.patch(f'/api/knowledge-articles/{article.id}', {'title': 'Mudado'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_drafts_hidden_from_readers(self):
        draft = KnowledgeArticle.objects.get(title='Rascunho')
        self.assertEqual(self.client_.get(f'/api/knowledge-articles/{draft.id}').status_code,
                         status.HTTP_404_NOT_FOUND)
