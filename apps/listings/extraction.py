"""
AI-assisted job listing extraction.

The model is asked for a single JSON object describing the listing. Its reply
goes through :func:`parse_listing_json`, which never raises: it returns a
:class:`ParsedListing` or a :class:`ParseFailure` carrying the raw reply so the
caller can log what the model actually said.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from django.conf import settings
from openai import OpenAI

from core.exceptions import require_setting

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 8000

LISTING_DEFAULTS = {
    'type': 'Full-Time',
    'level': 'Manager',
    'category': 'Channel & Reseller',
    'region': 'NAmer',
    'isRemote': False,
    'hasEquity': False,
    'hasVisa': False,
}

SYSTEM_PROMPT = 'You are a job listing parser. Extract structured data and return ONLY valid JSON, no explanations.'

LISTING_SCHEMA = """{
  "title": "Job title",
  "company": "Company name",
  "location": "Location (city, state or Remote)",
  "type": "Full-Time, Part-Time, Contract, or Remote",
  "level": "Individual Contributor, Manager, Director, VP, or C-Level",
  "category": "Channel & Reseller, Partner Marketing, Partner Sales, Partner Success, or Partner Operations",
  "region": "NAmer, EMEA, APAC, or LATAM",
  "description": "Full job description",
  "link": "Application URL (use the provided URL if not found)",
  "salaryRange": "Salary range if mentioned (e.g., $120K-$180K)",
  "companyLogo": "",
  "companyStage": "Startup, Series A, Series B, Series C+, Public, or Private",
  "companySize": "1-10, 11-50, 51-200, 201-500, 501-1000, or 1000+",
  "isRemote": true or false,
  "hasEquity": true or false,
  "hasVisa": true or false
}"""


class ExtractionError(Exception):
    """The model gave no usable answer."""

    def __init__(self, message, raw_text=''):
        super().__init__(message)
        self.raw_text = raw_text


@dataclass
class ParsedListing:
    fields: Dict[str, Any] = field(default_factory=dict)

    def with_defaults(self, link='') -> Dict[str, Any]:
        data = dict(self.fields)
        if not data.get('link'):
            data['link'] = link
        for key, default in LISTING_DEFAULTS.items():
            data[key] = data.get(key) or default
        return data


@dataclass
class ParseFailure:
    reason: str
    raw_text: str


ParseResult = Union[ParsedListing, ParseFailure]


def truncate(text, limit=MAX_CONTENT_CHARS):
    if len(text) > limit:
        return text[:limit] + '...'
    return text


def _loads_object(text) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def parse_listing_json(raw_text) -> ParseResult:
    """Direct parse first, then the outermost ``{...}`` span of the reply."""
    text = (raw_text or '').strip()
    if not text:
        return ParseFailure('No response from AI', raw_text or '')

    data = _loads_object(text)
    if data is not None:
        return ParsedListing(data)

    start, end = text.find('{'), text.rfind('}')
    if start != -1 and end > start:
        data = _loads_object(text[start:end + 1])
        if data is not None:
            return ParsedListing(data)

    return ParseFailure('AI response is not valid JSON', raw_text)


def build_prompt(content, source):
    return (
        f"You are a job listing parser. Extract structured data from the following {source}. "
        "Return ONLY a valid JSON object with these exact fields (use empty strings or null for missing data):\n\n"
        f"{LISTING_SCHEMA}\n\n"
        f"Job listing content:\n{content}\n\n"
        "Return ONLY the JSON object, no other text."
    )


class JobListingExtractor:
    def __init__(self, client=None, model=None):
        self.client = client or OpenAI(api_key=require_setting('OPENAI_API_KEY'))
        self.model = model or settings.OPENAI_MODEL

    def complete(self, content, source='job listing content'):
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {'role': 'system', 'content': SYSTEM_PROMPT},
                {'role': 'user', 'content': build_prompt(content, source)},
            ],
            temperature=0.3,
            response_format={'type': 'json_object'},
        )
        choices = completion.choices or []
        return choices[0].message.content if choices else None

    def extract(self, content, link='', source='job listing content') -> Dict[str, Any]:
        raw_text = self.complete(content, source)
        result = parse_listing_json(raw_text)
        if isinstance(result, ParseFailure):
            logger.error(f"Failed to parse AI response ({result.reason}): {result.raw_text[:500]}")
            raise ExtractionError(result.reason, result.raw_text)
        return result.with_defaults(link)
