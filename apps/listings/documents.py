# apps/listings/documents.py
import base64
import io
import logging
import re

import requests
from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                      '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36')

SCRIPT_RE = re.compile(r'<script[^>]*>[\s\S]*?</script>', re.IGNORECASE)
STYLE_RE = re.compile(r'<style[^>]*>[\s\S]*?</style>', re.IGNORECASE)
TAG_RE = re.compile(r'<[^>]+>')
SPACE_RE = re.compile(r'\s+')


class DocumentError(Exception):
    pass


def html_to_text(html):
    text = SCRIPT_RE.sub('', html or '')
    text = STYLE_RE.sub('', text)
    text = TAG_RE.sub(' ', text)
    return SPACE_RE.sub(' ', text).strip()


def fetch_page_text(url, timeout=15):
    response = requests.get(url, headers={'User-Agent': BROWSER_USER_AGENT}, timeout=timeout)
    if not response.ok:
        raise DocumentError(f"Failed to fetch URL: {response.status_code} {response.reason}")
    return html_to_text(response.text)


def decode_upload(data):
    """Accept raw base64 or a ``data:...;base64,`` URL."""
    if data.startswith('data:') and ',' in data:
        data = data.split(',', 1)[1]
    try:
        return base64.b64decode(data)
    except ValueError as e:
        raise DocumentError('File data is not valid base64') from e


def pdf_to_text(content):
    try:
        reader = PdfReader(io.BytesIO(content))
        return '\n'.join(page.extract_text() or '' for page in reader.pages)
    except Exception as e:
        logger.error(f"Error parsing PDF: {str(e)}")
        raise DocumentError('Failed to extract text from PDF file') from e
