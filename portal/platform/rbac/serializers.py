from rest_framework import serializers

from .constants import ActionType, ResourceType


class PermissionSnapshotSerializer(serializers.Serializer):
    role = serializers.CharField(allow_blank=True)
    roleId = serializers.IntegerField(allow_null=True)
    permissions = serializers.ListField(child=serializers.CharField())
    grants = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))


class PermissionCheckSerializer(serializers.Serializer):
    resource = serializers.ChoiceField(choices=[resource.value for resource in ResourceType])
    action = serializers.ChoiceField(choices=[action.value for action in ActionType])
    verify = serializers.BooleanField(required=False, default=False)
