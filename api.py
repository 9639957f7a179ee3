import logging
from flask import Flask, request, jsonify
from flask_cors import CORS

from config import Config
from rate_limiter import SlidingWindowRateLimiter, client_identity
from summary_pipeline import get_summary_pipeline

# --- Logging setup ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s')
logger = logging.getLogger(__name__)

UNLIMITED_ENDPOINTS = {'health'}


def _read_reference(data):
    """Pull urlOrId out of either {"data": {...}} or a flat body."""
    if not isinstance(data, dict):
        return None
    payload = data.get('data', data)
    if not isinstance(payload, dict):
        return None
    url_or_id = payload.get('urlOrId')
    if not isinstance(url_or_id, str) or not url_or_id.strip():
        return None
    return url_or_id.strip()


def create_app(pipeline=None, limiter=None):
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = 1024 * 1024
    CORS(app, origins=Config.CORS_ORIGINS, methods=["POST"], allow_headers=["Content-Type"])

    if limiter is None:
        limiter = SlidingWindowRateLimiter(
            window_seconds=Config.RATE_LIMIT_WINDOW_SECONDS,
            max_requests=Config.RATE_LIMIT_MAX_REQUESTS
        )
    app.extensions['rate_limiter'] = limiter

    def _pipeline():
        return pipeline or get_summary_pipeline()

    @app.before_request
    def log_request_info():
        logger.info(f"{request.method} {request.path} - {request.remote_addr}")

    @app.before_request
    def enforce_rate_limit():
        if request.endpoint in UNLIMITED_ENDPOINTS or request.method == 'OPTIONS':
            return None
        identity = client_identity(request.headers.get('X-Forwarded-For'), request.remote_addr)
        if not limiter.allow(identity):
            logger.info(f"Rate limit exceeded for {identity}")
            return jsonify({'error': 'Too many requests'}), 429
        return None

    @app.route('/health', methods=['GET'])
    def health():
        return 'YouTube Summarizer API is running!', 200

    @app.route('/api/summarize', methods=['POST'])
    def summarize():
        data = request.get_json(silent=True)
        url_or_id = _read_reference(data)
        if url_or_id is None:
            logger.warning('Invalid body in /api/summarize')
            return jsonify({'error': 'Request body must include a non-empty "urlOrId" string'}), 400

        outcome = _pipeline().summarize(url_or_id)
        logger.info(f"/api/summarize {url_or_id!r} -> {outcome.outcome.value}")
        return jsonify({'result': outcome.result.model_dump(exclude_none=True)})

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=Config.PORT, debug=False)
