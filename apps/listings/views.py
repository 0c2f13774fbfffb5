# apps/listings/views.py
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import error_payload, first_error
from .company_facts import CompanyFactsService
from .documents import decode_upload, fetch_page_text, pdf_to_text
from .extraction import JobListingExtractor, truncate
from .serializers import CompanyFactsSerializer, JobFileSerializer, JobUrlSerializer

logger = logging.getLogger(__name__)

MIN_PAGE_CHARS = 100
MIN_FILE_CHARS = 50


def _invalid(serializer):
    return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)


def _ai_not_configured():
    return Response({'error': 'AI parsing not configured. Please add OPENAI_API_KEY to environment variables.'},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def parse_job_url(request):
    """Extract a job listing from a public job posting URL"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = JobUrlSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    url = serializer.validated_data['url']

    if not settings.OPENAI_API_KEY:
        return _ai_not_configured()

    try:
        text = fetch_page_text(url)
        if len(text) < MIN_PAGE_CHARS:
            return Response({'error': 'Could not extract meaningful content from URL. '
                                      'The page may be empty or require authentication.'},
                            status=status.HTTP_400_BAD_REQUEST)

        listing = JobListingExtractor().extract(truncate(text), link=url, source='job listing webpage')
        logger.info(f"Parsed job listing from {url}: {listing.get('title')}")
        return Response(listing)
    except Exception as e:
        logger.error(f"Error parsing job URL: {str(e)}")
        return Response(error_payload(e, error='Failed to parse job URL'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def parse_job_file(request):
    """Extract a job listing from an uploaded PDF"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = JobFileSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    data = serializer.validated_data

    if not settings.OPENAI_API_KEY:
        return _ai_not_configured()

    if not data['isPdf']:
        return Response({'error': 'DOC/DOCX parsing not yet implemented. Please convert to PDF and try again, '
                                  'or use URL upload instead.'},
                        status=status.HTTP_400_BAD_REQUEST)

    try:
        content = decode_upload(data['data'])
        logger.info(f"Processing file {data['fileName']} ({len(content)} bytes)")
        text = pdf_to_text(content).strip()
        if len(text) < MIN_FILE_CHARS:
            return Response({'error': 'Could not extract meaningful text from file. '
                                      'The file may be empty, corrupted, or image-based.'},
                            status=status.HTTP_400_BAD_REQUEST)

        listing = JobListingExtractor().extract(truncate(text), link='', source='job listing document')
        return Response(listing)
    except Exception as e:
        logger.error(f"Error parsing job file: {str(e)}")
        return Response(error_payload(e, error='Failed to parse job file'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def fetch_company_facts(request):
    """Company fast facts for a listing's sidebar"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = CompanyFactsSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    data = serializer.validated_data

    try:
        facts = CompanyFactsService().fetch(
            data['companyName'], data.get('companyWebsite'), data.get('jobData'),
        )
        return Response(facts)
    except Exception as e:
        logger.error(f"Error fetching company facts: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
