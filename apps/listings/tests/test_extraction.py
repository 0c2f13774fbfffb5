from unittest import mock

from django.test import SimpleTestCase

from apps.listings.extraction import (
    ExtractionError, JobListingExtractor, ParseFailure, ParsedListing, parse_listing_json, truncate,
)


def completion(content):
    return mock.Mock(choices=[mock.Mock(message=mock.Mock(content=content))])


class ParseListingJsonTest(SimpleTestCase):
    def test_plain_json(self):
        result = parse_listing_json('{"title": "Partner Manager", "isRemote": true}')
        self.assertEqual(result, ParsedListing({'title': 'Partner Manager', 'isRemote': True}))

    def test_markdown_fenced_json(self):
        result = parse_listing_json('```json\n{"title": "VP of Alliances"}\n```')
        self.assertEqual(result.fields, {'title': 'VP of Alliances'})

    def test_json_wrapped_in_prose(self):
        result = parse_listing_json('Here is the listing: {"company": "Acme", "title": "Channel Lead"} Hope it helps!')
        self.assertEqual(result.fields, {'company': 'Acme', 'title': 'Channel Lead'})

    def test_garbage_keeps_raw_text(self):
        result = parse_listing_json('I could not find a job listing on this page.')
        self.assertIsInstance(result, ParseFailure)
        self.assertEqual(result.reason, 'AI response is not valid JSON')
        self.assertEqual(result.raw_text, 'I could not find a job listing on this page.')

    def test_broken_braces(self):
        self.assertIsInstance(parse_listing_json('{"title": "Partner Manager"'), ParseFailure)
        self.assertIsInstance(parse_listing_json('["not", "an", "object"]'), ParseFailure)

    def test_empty_reply(self):
        self.assertEqual(parse_listing_json(None), ParseFailure('No response from AI', ''))
        self.assertEqual(parse_listing_json('   ').reason, 'No response from AI')

    def test_defaults(self):
        data = ParsedListing({'title': 'Partner Manager', 'isRemote': True, 'level': ''}).with_defaults('https://a.io/job')

        self.assertEqual(data['link'], 'https://a.io/job')
        self.assertEqual(data['type'], 'Full-Time')
        self.assertEqual(data['level'], 'Manager')
        self.assertEqual(data['category'], 'Channel & Reseller')
        self.assertEqual(data['region'], 'NAmer')
        self.assertTrue(data['isRemote'])
        self.assertFalse(data['hasEquity'])
        self.assertFalse(data['hasVisa'])

    def test_model_link_wins(self):
        data = ParsedListing({'link': 'https://apply.acme.io'}).with_defaults('https://a.io/job')
        self.assertEqual(data['link'], 'https://apply.acme.io')


class TruncateTest(SimpleTestCase):
    def test_long_content(self):
        text = truncate('x' * 8001)
        self.assertEqual(len(text), 8003)
        self.assertTrue(text.endswith('...'))

    def test_short_content(self):
        self.assertEqual(truncate('short'), 'short')


class JobListingExtractorTest(SimpleTestCase):
    def setUp(self):
        self.client_ = mock.Mock()

    def test_extract(self):
        self.client_.chat.completions.create.return_value = completion('{"title": "Director, Partnerships"}')

        listing = JobListingExtractor(client=self.client_).extract('page text', link='https://a.io/job')

        self.assertEqual(listing['title'], 'Director, Partnerships')
        self.assertEqual(listing['link'], 'https://a.io/job')
        kwargs = self.client_.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['model'], 'gpt-4o-mini')
        self.assertEqual(kwargs['temperature'], 0.3)
        self.assertEqual(kwargs['response_format'], {'type': 'json_object'})
        self.assertIn('page text', kwargs['messages'][1]['content'])

    def test_unparseable_reply(self):
        self.client_.chat.completions.create.return_value = completion('Sorry, no listing here')

        with self.assertRaises(ExtractionError) as ctx:
            JobListingExtractor(client=self.client_).extract('page text')
        self.assertEqual(ctx.exception.raw_text, 'Sorry, no listing here')

    def test_no_choices(self):
        self.client_.chat.completions.create.return_value = mock.Mock(choices=[])

        with self.assertRaisesMessage(ExtractionError, 'No response from AI'):
            JobListingExtractor(client=self.client_).extract('page text')
