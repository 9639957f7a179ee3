import logging

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import CouldNotRetrieveTranscript

from config import Config
from youtube_client import get_video_metadata

logger = logging.getLogger(__name__)

SOURCE_CAPTIONS = 'captions'
SOURCE_CAPTIONS_ANY = 'captions_any'
SOURCE_METADATA = 'metadata'


def _join_snippets(fetched):
    """Concatenate caption cue texts in temporal order."""
    return ' '.join(snippet.text for snippet in fetched.snippets)


def _fetch_captions(video_id, language):
    """Tier 1: caption track in the requested language."""
    api = YouTubeTranscriptApi()
    fetched = api.fetch(video_id, languages=[language])
    return _join_snippets(fetched)


def _fetch_any_captions(video_id):
    """Tier 2: first caption track the video exposes, in any language."""
    api = YouTubeTranscriptApi()
    transcript_list = api.list(video_id)
    for transcript in transcript_list:
        logger.info(f"Using {transcript.language_code} captions for {video_id} (generated={transcript.is_generated})")
        return _join_snippets(transcript.fetch())
    return ''


def _fetch_metadata_text(video_id, youtube_api_key=None):
    """Tier 3: title + description as a stand-in transcript."""
    details = get_video_metadata(video_id, api_key=youtube_api_key)
    if not details:
        return ''
    logger.info(f"Fallback to video description for: {details['title']}")
    return f"{details['title']}\n{details['description']}"


def fetch_transcript(video_id, language=None, youtube_api_key=None):
    """
    Fetch the best available transcript text for a YouTube video.

    Tries, in order, captions in the default language, captions in any
    language, then the video's title and description. A tier is only
    attempted when the previous one failed or produced no text.

    Args:
        video_id: 11-character YouTube video ID
        language: Preferred caption language (defaults to Config.TRANSCRIPT_LANGUAGE)
        youtube_api_key: Data API key for the metadata tier (defaults to Config.YOUTUBE_API_KEY)

    Returns:
        dict: {
            'transcript': str or None,
            'source': 'captions' | 'captions_any' | 'metadata' | None,
            'error': str or None
        }
    """
    language = language or Config.TRANSCRIPT_LANGUAGE
    tiers = [
        (SOURCE_CAPTIONS, lambda: _fetch_captions(video_id, language)),
        (SOURCE_CAPTIONS_ANY, lambda: _fetch_any_captions(video_id)),
        (SOURCE_METADATA, lambda: _fetch_metadata_text(video_id, youtube_api_key)),
    ]

    for source, fetch in tiers:
        try:
            text = fetch()
        except CouldNotRetrieveTranscript as e:
            logger.warning(f"{source} transcript not available for {video_id}: {type(e).__name__}")
            continue
        except Exception as e:
            logger.error(f"Error fetching {source} transcript for {video_id}: {e}")
            continue

        if text:
            logger.info(f"Fetched transcript for {video_id} from {source} ({len(text)} chars)")
            return {
                'transcript': text,
                'source': source,
                'error': None
            }
        logger.warning(f"{source} transcript for {video_id} was empty")

    return {
        'transcript': None,
        'source': None,
        'error': 'No transcript or metadata available'
    }
