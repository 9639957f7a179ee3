import unittest
from unittest.mock import patch, MagicMock

from youtube_transcript_api._errors import TranscriptsDisabled

from gemini_client import GeminiClient
from summary_pipeline import SummarizationPipeline, SummaryOutcome, SummaryResult

TRANSCRIPT = (
    "Welcome back to the channel. Today we cover sourdough basics. "
    "First you need a healthy starter. Feed it twice a day. "
    "Then mix flour, water and salt. Let the dough rest overnight. "
    "Bake in a hot dutch oven. Enjoy your bread!"
)

FINAL = SummaryResult(
    title='Sourdough basics',
    summary='A walkthrough of making sourdough from starter to bake.',
    bullets=['Keep the starter fed', 'Rest the dough overnight', 'Bake in a dutch oven'],
)


def _captions(text=TRANSCRIPT, source='captions'):
    return MagicMock(return_value={'transcript': text, 'source': source, 'error': None})


def _generator(texts=None, final=FINAL):
    generator = MagicMock(spec=GeminiClient)
    if texts is None:
        generator.generate_text.side_effect = lambda prompt: '- a bullet'
    else:
        generator.generate_text.side_effect = texts
    generator.generate_structured.return_value = final
    return generator


class TestSummarizationPipeline(unittest.TestCase):
    def test_success_with_bare_id(self):
        fetcher = _captions()
        generator = _generator()
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=fetcher, chunk_max_chars=80)

        out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.SUCCESS)
        self.assertEqual(out.video_id, 'dQw4w9WgXcQ')
        self.assertTrue(out.result.title)
        self.assertTrue(out.result.summary)
        self.assertTrue(out.result.bullets)
        self.assertIsNone(out.result.warnings)
        fetcher.assert_called_once_with('dQw4w9WgXcQ')
        self.assertGreater(out.chunk_count, 1)
        self.assertEqual(generator.generate_text.call_count, out.chunk_count)
        generator.generate_structured.assert_called_once()

    def test_empty_model_warnings_are_dropped(self):
        final = FINAL.model_copy(update={'warnings': []})
        pipeline = SummarizationPipeline(generator=_generator(final=final), transcript_fetcher=_captions())

        out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.SUCCESS)
        self.assertIsNone(out.result.warnings)
        self.assertNotIn('warnings', out.result.model_dump(exclude_none=True))

    def test_chunk_prompts_carry_position(self):
        generator = _generator()
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=_captions(), chunk_max_chars=80)
        out = pipeline.summarize('https://youtu.be/dQw4w9WgXcQ')

        prompts = [c.args[0] for c in generator.generate_text.call_args_list]
        total = out.chunk_count
        for i, prompt in enumerate(prompts, start=1):
            self.assertIn(f'({i}/{total})', prompt)
            self.assertIn('5-8 bullet points', prompt)

    def test_reduction_gets_ordered_bullets_and_skips_failures(self):
        generator = _generator(texts=['- first', '', '- third', RuntimeError('boom')])
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=_captions(), chunk_max_chars=60)
        with patch('summary_pipeline.chunk_text', return_value=['c1', 'c2', 'c3', 'c4']):
            out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.SUCCESS)
        self.assertEqual(out.failed_chunks, 2)
        generator.generate_structured.assert_called_once()
        prompt, schema = generator.generate_structured.call_args.args
        self.assertIs(schema, SummaryResult)
        self.assertTrue(prompt.endswith('Source Bullet Points:\n- first\n- third'))
        self.assertEqual(out.result.warnings, ['2 of 4 transcript chunks could not be summarized.'])

    def test_all_chunks_failed_skips_reduction(self):
        generator = _generator(texts=['', '', ''])
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=_captions())
        with patch('summary_pipeline.chunk_text', return_value=['c1', 'c2', 'c3']):
            out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.ALL_CHUNKS_FAILED)
        self.assertEqual(out.result.title, 'Summary unavailable')
        self.assertEqual(out.result.bullets, [])
        self.assertEqual(out.result.warnings, ['Failed to generate summary from transcript chunks.'])
        generator.generate_structured.assert_not_called()

    def test_reduction_failure(self):
        generator = _generator(final=None)
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=_captions())
        out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.REDUCTION_FAILED)
        self.assertEqual(out.result.title, 'Summary unavailable')
        self.assertEqual(out.result.warnings, ['Failed to parse final summary output.'])

    def test_invalid_reference(self):
        fetcher = _captions()
        generator = _generator()
        pipeline = SummarizationPipeline(generator=generator, transcript_fetcher=fetcher)

        out = pipeline.summarize('not a url')

        self.assertEqual(out.outcome, SummaryOutcome.INVALID_REFERENCE)
        self.assertEqual(out.result.model_dump(exclude_none=True), {
            'title': 'Invalid YouTube URL or ID',
            'summary': 'The provided input is not a valid YouTube URL or video ID.',
            'bullets': [],
            'warnings': ['Invalid YouTube URL or ID provided.'],
        })
        fetcher.assert_not_called()
        generator.generate_text.assert_not_called()

    def test_transcript_unavailable(self):
        fetcher = MagicMock(return_value={'transcript': None, 'source': None, 'error': 'nothing'})
        pipeline = SummarizationPipeline(generator=_generator(), transcript_fetcher=fetcher)

        out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.TRANSCRIPT_UNAVAILABLE)
        self.assertEqual(out.result.title, 'Transcript not available')
        self.assertEqual(out.result.bullets, [])
        self.assertTrue(out.result.warnings)

    def test_whitespace_transcript_is_empty(self):
        pipeline = SummarizationPipeline(generator=_generator(), transcript_fetcher=_captions(text='  \n  '))
        out = pipeline.summarize('dQw4w9WgXcQ')
        self.assertEqual(out.outcome, SummaryOutcome.EMPTY_TRANSCRIPT)
        self.assertEqual(out.result.title, 'Transcript is empty')

    def test_metadata_source_adds_warning(self):
        pipeline = SummarizationPipeline(
            generator=_generator(), transcript_fetcher=_captions(text='Title\nDescription.', source='metadata')
        )
        out = pipeline.summarize('dQw4w9WgXcQ')
        self.assertEqual(out.outcome, SummaryOutcome.SUCCESS)
        self.assertEqual(len(out.result.warnings), 1)
        self.assertIn('title and description', out.result.warnings[0])

    def test_unexpected_exception_becomes_error_result(self):
        fetcher = MagicMock(side_effect=RuntimeError('kaboom'))
        pipeline = SummarizationPipeline(generator=_generator(), transcript_fetcher=fetcher)

        out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.ERROR)
        self.assertEqual(out.result.title, 'Summary generation error')
        self.assertEqual(out.result.bullets, [])

    def test_no_captions_and_no_metadata_key(self):
        with patch('transcript_service.YouTubeTranscriptApi') as MockApi, \
                patch('youtube_client.Config.YOUTUBE_API_KEY', None), \
                patch('youtube_client.requests.get') as mock_get:
            MockApi.return_value.fetch.side_effect = TranscriptsDisabled('dQw4w9WgXcQ')
            MockApi.return_value.list.side_effect = TranscriptsDisabled('dQw4w9WgXcQ')
            pipeline = SummarizationPipeline(generator=_generator())

            out = pipeline.summarize('dQw4w9WgXcQ')

        self.assertEqual(out.outcome, SummaryOutcome.TRANSCRIPT_UNAVAILABLE)
        self.assertEqual(out.result.title, 'Transcript not available')
        self.assertEqual(out.result.bullets, [])
        self.assertTrue(out.result.warnings)
        mock_get.assert_not_called()


if __name__ == '__main__':
    unittest.main()
