import argparse
import json
import logging

from config import Config
from summary_pipeline import SummarizationPipeline, SummaryOutcome


def main(argv=None):
    parser = argparse.ArgumentParser(description='Summarize a YouTube video from its transcript')
    parser.add_argument('url_or_id', help='YouTube URL or 11-character video ID')
    parser.add_argument('--max-chars', type=int, default=Config.CHUNK_MAX_CHARS,
                        help='Maximum characters per transcript chunk')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(message)s')

    pipeline = SummarizationPipeline(chunk_max_chars=args.max_chars)
    outcome = pipeline.summarize(args.url_or_id)
    print(json.dumps(outcome.result.model_dump(exclude_none=True), indent=2, ensure_ascii=False))
    return 0 if outcome.outcome == SummaryOutcome.SUCCESS else 1


if __name__ == '__main__':
    raise SystemExit(main())
