from rest_framework import serializers


class PasswordResetSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={
        'required': 'Email address is required',
        'null': 'Email address is required',
        'blank': 'Email address is required',
        'invalid': 'Invalid email address format',
    })


class LinkedInVerifySerializer(serializers.Serializer):
    code = serializers.CharField(error_messages={
        'required': 'Missing authorization code',
        'null': 'Missing authorization code',
        'blank': 'Missing authorization code',
    })
    redirectUri = serializers.CharField(required=False, allow_blank=True, allow_null=True)
