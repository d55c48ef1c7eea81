from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()
    tenant = serializers.CharField(required=False, allow_blank=True)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Usuário obrigatório')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Senha obrigatória')
        return v


class SwitchTenantSerializer(serializers.Serializer):
    tenant = serializers.CharField()


class MemberSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=['admin', 'vet', 'staff'], required=False, default='staff')
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
