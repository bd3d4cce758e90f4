from rest_framework import serializers


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField(required=False, allow_empty_file=False)


class UploadResultSerializer(serializers.Serializer):
    url = serializers.CharField()
    public_id = serializers.CharField()
