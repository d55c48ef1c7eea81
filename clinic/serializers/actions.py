from rest_framework import serializers

from clinic.models import Appointment, QueueService, Sale, SupportTicket


class ListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


class CalendarQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    doctor = serializers.CharField(required=False, allow_blank=True, max_length=120)
    status = serializers.ChoiceField(choices=[c for c, _ in Appointment.STATUS_CHOICES], required=False)


class ConflictQuerySerializer(serializers.Serializer):
    start_at = serializers.DateTimeField()
    end_at = serializers.DateTimeField(required=False)
    pet = serializers.IntegerField(required=False, min_value=1)
    doctor = serializers.CharField(required=False, allow_blank=True, max_length=120)
    exclude = serializers.IntegerField(required=False, min_value=1)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c, _ in Appointment.STATUS_CHOICES])


class DueVaccinesQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, min_value=0, max_value=365, default=30)


class DischargeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['discharged', 'transferred', 'deceased'], required=False, default='discharged')
    discharge_date = serializers.DateTimeField(required=False)
    discharge_summary = serializers.CharField(required=False, allow_blank=True)
    discharge_instructions = serializers.CharField(required=False, allow_blank=True)


class CartItemSerializer(serializers.Serializer):
    product = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    customer = serializers.IntegerField(required=False, allow_null=True)
    items = CartItemSerializer(many=True, required=False)
    payment_method = serializers.ChoiceField(choices=[c for c, _ in Sale.PAYMENT_METHOD_CHOICES])
    amount_received = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)


class PaySerializer(serializers.Serializer):
    payment_date = serializers.DateField(required=False)
    payment_method = serializers.CharField(required=False, allow_blank=True, max_length=30)


class CashFlowQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)


class QueueCheckInSerializer(serializers.Serializer):
    pet = serializers.IntegerField(min_value=1)
    service = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True)


class QueueStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c, _ in QueueService.STATUS_CHOICES])
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class QueueNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True)


class TransportDayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    service = serializers.IntegerField(required=False, min_value=1)


class TicketMessageSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000)


class TicketStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c, _ in SupportTicket.STATUS_CHOICES])


class KnowledgeSearchSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=120)
    category = serializers.CharField(required=False, allow_blank=True, max_length=60)


class OnboardingStepSerializer(serializers.Serializer):
    step = serializers.IntegerField()
