from rest_framework import serializers

MISSING_FIELDS = {'required': 'Missing required fields', 'null': 'Missing required fields',
                  'blank': 'Missing required fields'}


class CheckoutSerializer(serializers.Serializer):
    jobId = serializers.CharField(error_messages=MISSING_FIELDS)
    jobTitle = serializers.CharField(error_messages=MISSING_FIELDS)
    employerId = serializers.CharField(error_messages=MISSING_FIELDS)


class PaymentIntentSerializer(serializers.Serializer):
    jobData = serializers.DictField(error_messages={**MISSING_FIELDS, 'empty': 'Missing required fields'},
                                    allow_empty=False)
    employerId = serializers.CharField(error_messages=MISSING_FIELDS)


class ConfirmPaymentSerializer(serializers.Serializer):
    paymentIntentId = serializers.CharField(error_messages={
        'required': 'Missing paymentIntentId',
        'null': 'Missing paymentIntentId',
        'blank': 'Missing paymentIntentId',
    })
