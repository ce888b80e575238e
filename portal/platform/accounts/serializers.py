from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    returnUrl = serializers.CharField(required=False, allow_blank=True, default="")


class LoginEntrySerializer(serializers.Serializer):
    returnUrl = serializers.CharField(allow_blank=True)
    authenticated = serializers.BooleanField()
    csrfToken = serializers.CharField()


class ForbiddenSerializer(serializers.Serializer):
    returnUrl = serializers.CharField(allow_blank=True)
    reason = serializers.CharField(allow_blank=True)
    required = serializers.ListField(child=serializers.CharField())
