import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from chunking import chunk_text
from config import Config
from gemini_client import GeminiClient
from transcript_service import SOURCE_METADATA, fetch_transcript
from youtube_client import extract_video_id

logger = logging.getLogger(__name__)


class SummaryResult(BaseModel):
    model_config = ConfigDict(extra='forbid')

    title: str = Field(description="The title of the YouTube video or summary.")
    summary: str = Field(description="A concise paragraph summarizing the video content.")
    bullets: List[str] = Field(description="Key bullet points extracted from the video.")
    warnings: Optional[List[str]] = Field(
        default=None, description="Optional warnings related to the transcript."
    )


class SummaryOutcome(str, Enum):
    INVALID_REFERENCE = 'invalid_reference'
    TRANSCRIPT_UNAVAILABLE = 'transcript_unavailable'
    EMPTY_TRANSCRIPT = 'empty_transcript'
    ALL_CHUNKS_FAILED = 'all_chunks_failed'
    REDUCTION_FAILED = 'reduction_failed'
    ERROR = 'error'
    SUCCESS = 'success'


@dataclass
class PipelineResult:
    outcome: SummaryOutcome
    result: SummaryResult
    video_id: Optional[str] = None
    transcript_source: Optional[str] = None
    chunk_count: int = 0
    failed_chunks: int = 0


def _sentinel(title, summary, warning):
    return SummaryResult(title=title, summary=summary, bullets=[], warnings=[warning])


def invalid_reference_result():
    return _sentinel(
        "Invalid YouTube URL or ID",
        "The provided input is not a valid YouTube URL or video ID.",
        "Invalid YouTube URL or ID provided.",
    )


def transcript_unavailable_result():
    return _sentinel(
        "Transcript not available",
        "This video has no subtitles or transcript.",
        "YouTube did not expose captions for this video.",
    )


def empty_transcript_result():
    return _sentinel(
        "Transcript is empty",
        "The transcript for this video is empty or could not be processed.",
        "Transcript is empty or invalid.",
    )


def all_chunks_failed_result():
    return _sentinel(
        "Summary unavailable",
        "Unable to generate summary from the transcript.",
        "Failed to generate summary from transcript chunks.",
    )


def reduction_failed_result():
    return _sentinel(
        "Summary unavailable",
        "Unable to generate a valid summary from the transcript.",
        "Failed to parse final summary output.",
    )


def error_result():
    return _sentinel(
        "Summary generation error",
        "An error occurred while generating the summary.",
        "Exception during summary generation.",
    )


def build_chunk_prompt(section, index, total):
    return (
        f"Summarize the following transcript chunk ({index}/{total}) into 5-8 bullet points. "
        f"Be concise, specific, and factual.\n\n{section}"
    )


def build_reduce_prompt(combined_bullets):
    return (
        "Combine these bullets into a complete structured summary. "
        "Your output MUST strictly follow the provided JSON schema. "
        "The summary should be a paragraph combining all key points. "
        "The 'bullets' field should be a consolidated, deduplicated list of the most "
        "important takeaways from all chunks, most important first.\n\n"
        f"Source Bullet Points:\n{combined_bullets}"
    )


class SummarizationPipeline:
    """
    Video reference -> transcript -> chunks -> per-chunk bullets -> one
    schema-validated SummaryResult.

    summarize() never raises; every failure mode maps to a SummaryOutcome
    and a fully formed sentinel SummaryResult.
    """

    def __init__(self, generator=None, transcript_fetcher=fetch_transcript, chunk_max_chars=None):
        self.generator = generator or GeminiClient()
        self.transcript_fetcher = transcript_fetcher
        self.chunk_max_chars = chunk_max_chars or Config.CHUNK_MAX_CHARS

    def summarize(self, url_or_id) -> PipelineResult:
        try:
            return self._run(url_or_id)
        except Exception as e:
            logger.error(f"Error generating summary for {url_or_id!r}: {e}", exc_info=True)
            return PipelineResult(SummaryOutcome.ERROR, error_result())

    def _run(self, url_or_id) -> PipelineResult:
        video_id = extract_video_id(url_or_id)
        if not video_id:
            logger.info(f"Invalid video reference: {url_or_id!r}")
            return PipelineResult(SummaryOutcome.INVALID_REFERENCE, invalid_reference_result())

        transcript_data = self.transcript_fetcher(video_id)
        transcript = transcript_data.get('transcript')
        source = transcript_data.get('source')
        if not transcript:
            logger.warning(f"Transcript unavailable for {video_id}: {transcript_data.get('error')}")
            return PipelineResult(
                SummaryOutcome.TRANSCRIPT_UNAVAILABLE, transcript_unavailable_result(), video_id=video_id
            )

        chunks = chunk_text(transcript, self.chunk_max_chars)
        if not chunks:
            return PipelineResult(
                SummaryOutcome.EMPTY_TRANSCRIPT, empty_transcript_result(),
                video_id=video_id, transcript_source=source
            )
        logger.info(f"Summarizing {video_id}: {len(transcript)} chars in {len(chunks)} chunks")

        # Stage 1
        partials = self.extract_bullets(chunks)
        failed = sum(1 for p in partials if not p)
        combined = '\n'.join(p for p in partials if p)
        if not combined:
            logger.error(f"All {len(chunks)} chunks failed for {video_id}")
            return PipelineResult(
                SummaryOutcome.ALL_CHUNKS_FAILED, all_chunks_failed_result(),
                video_id=video_id, transcript_source=source,
                chunk_count=len(chunks), failed_chunks=failed
            )

        # Stage 2
        result = self.reduce_bullets(combined)
        if result is None:
            return PipelineResult(
                SummaryOutcome.REDUCTION_FAILED, reduction_failed_result(),
                video_id=video_id, transcript_source=source,
                chunk_count=len(chunks), failed_chunks=failed
            )

        warnings = list(result.warnings or [])
        if failed:
            warnings.append(f"{failed} of {len(chunks)} transcript chunks could not be summarized.")
        if source == SOURCE_METADATA:
            warnings.append("Summary is based on the video title and description; no captions were available.")
        result = result.model_copy(update={'warnings': warnings or None})

        logger.info(f"Summary ready for {video_id} ({len(result.bullets)} bullets)")
        return PipelineResult(
            SummaryOutcome.SUCCESS, result,
            video_id=video_id, transcript_source=source,
            chunk_count=len(chunks), failed_chunks=failed
        )

    def extract_bullets(self, chunks) -> List[str]:
        """Stage 1: one bullet-list completion per chunk, '' where a chunk failed."""
        partials = []
        total = len(chunks)
        for i, section in enumerate(chunks, start=1):
            try:
                text = self.generator.generate_text(build_chunk_prompt(section, i, total))
            except Exception as e:
                logger.warning(f"Error summarizing chunk {i}/{total}: {e}")
                text = ''
            if not text:
                logger.warning(f"Chunk {i}/{total} produced no bullets")
            partials.append(text or '')
        return partials

    def reduce_bullets(self, combined_bullets) -> Optional[SummaryResult]:
        """Stage 2: merge the per-chunk bullets into one SummaryResult."""
        return self.generator.generate_structured(build_reduce_prompt(combined_bullets), SummaryResult)


_pipeline_instance = None


def get_summary_pipeline():
    """Get or create the process-wide default pipeline."""
    global _pipeline_instance
    if _pipeline_instance is None:
        _pipeline_instance = SummarizationPipeline()
    return _pipeline_instance
