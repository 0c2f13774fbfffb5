from rest_framework import serializers

FREQUENCIES = ('daily', 'weekly', 'realtime')

REQUIRED = {'required': 'Email and frequency are required', 'null': 'Email and frequency are required',
            'blank': 'Email and frequency are required'}


class AlertPreferenceSerializer(serializers.Serializer):
    email = serializers.CharField(error_messages=REQUIRED)
    frequency = serializers.ChoiceField(choices=FREQUENCIES, error_messages={
        **REQUIRED,
        'invalid_choice': 'Invalid frequency. Must be daily, weekly, or realtime',
    })

    def validate_email(self, value):
        return value.strip().lower()


class AlertEmailSerializer(serializers.Serializer):
    email = serializers.CharField(error_messages={
        'required': 'Email is required',
        'null': 'Email is required',
        'blank': 'Email is required',
    })

    def validate_email(self, value):
        return value.strip().lower()
