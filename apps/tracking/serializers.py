from rest_framework import serializers

from .services import ClickEvent, ViewEvent

JOB_ID_ERRORS = {
    'required': 'Missing jobId',
    'null': 'Missing jobId',
    'invalid': 'Invalid jobId',
    'min_value': 'Invalid jobId',
    'max_string_length': 'Invalid jobId',
}


class LocationField(serializers.Field):
    """Free-text viewer location; anything that is not text counts as absent."""

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            return None
        return str(data).strip()

    def to_representation(self, value):
        return value


class ClickEventSerializer(serializers.Serializer):
    jobId = serializers.IntegerField(min_value=1, error_messages=JOB_ID_ERRORS)

    def to_event(self) -> ClickEvent:
        return ClickEvent(job_id=self.validated_data['jobId'])


class ViewEventSerializer(serializers.Serializer):
    jobId = serializers.IntegerField(min_value=1, error_messages=JOB_ID_ERRORS)
    location = LocationField(required=False, allow_null=True)

    def to_event(self) -> ViewEvent:
        return ViewEvent(
            job_id=self.validated_data['jobId'],
            location=self.validated_data.get('location'),
        )
