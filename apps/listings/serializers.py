from rest_framework import serializers

PDF_MARKERS = ('pdf',)
WORD_MARKERS = ('msword', 'wordprocessingml')
ACCEPTED_EXTENSIONS = ('.pdf', '.doc', '.docx')


class JobUrlSerializer(serializers.Serializer):
    url = serializers.URLField(error_messages={
        'required': 'URL is required',
        'null': 'URL is required',
        'blank': 'URL is required',
        'invalid': 'Invalid URL format',
    })


class JobFileSerializer(serializers.Serializer):
    data = serializers.CharField(error_messages={
        'required': 'File data is required',
        'null': 'File data is required',
        'blank': 'File data is required',
    })
    fileName = serializers.CharField(required=False, allow_blank=True, default='')
    fileType = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        file_type = attrs['fileType'].lower()
        file_name = attrs['fileName'].lower()
        accepted = (any(marker in file_type for marker in PDF_MARKERS + WORD_MARKERS)
                    or file_name.endswith(ACCEPTED_EXTENSIONS))
        if not accepted:
            raise serializers.ValidationError('Invalid file type. Please upload a PDF, DOC, or DOCX file.')
        attrs['isPdf'] = 'pdf' in file_type or file_name.endswith('.pdf')
        return attrs


class CompanyFactsSerializer(serializers.Serializer):
    companyName = serializers.CharField(error_messages={
        'required': 'Company name is required',
        'null': 'Company name is required',
        'blank': 'Company name is required',
    })
    companyWebsite = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    jobData = serializers.DictField(required=False, allow_null=True)
