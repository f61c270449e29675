"""
Authentication and rate limiting for the HTTP surface
"""
import logging
import time
from collections import defaultdict
from functools import wraps
from typing import Optional

import jwt
from flask import jsonify, request

from config import Config

logger = logging.getLogger(__name__)

# Request timestamps per player (in production, use Redis)
rate_limit_storage = defaultdict(list)


def _bearer_token(header: Optional[str]) -> Optional[str]:
    """Pull the token out of an "Authorization: Bearer <token>" header"""
    scheme, _, token = (header or '').strip().partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return token.strip() or None


def player_id_from_token(token: str) -> Optional[str]:
    """
    Decode a Supabase access token and return the player id it carries.

    The player id is the token subject (the Google sub). Returns None for an
    expired, forged or subject-less token.
    """
    try:
        # Supabase audiences vary between projects, so only the signature and expiry are checked
        claims = jwt.decode(token, Config.SUPABASE_JWT_SECRET, algorithms=['HS256'],
                            options={'verify_aud': False})
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected token: %s", e)
        return None
    return claims.get('sub') or None


def require_auth(f):
    """Decorator: resolve the caller to `request.player_id` or answer 401"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token(request.headers.get('Authorization'))
        if token is None:
            return jsonify({'error': 'Missing or malformed bearer token'}), 401

        player_id = player_id_from_token(token)
        if player_id is None:
            return jsonify({'error': 'Invalid or expired token'}), 401

        request.player_id = player_id
        return f(*args, **kwargs)

    return decorated_function


def rate_limit(max_requests=None, window_seconds=None):
    """Rate limiting decorator; defaults come from Config at request time"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            player_id = getattr(request, 'player_id', None)
            if not player_id:
                return jsonify({'error': 'Unauthorized'}), 401

            limit = max_requests or Config.RATE_LIMIT_MAX_REQUESTS
            window = window_seconds or Config.RATE_LIMIT_WINDOW_SECONDS
            now = time.time()

            # Clean old requests from storage
            rate_limit_storage[player_id] = [
                req_time for req_time in rate_limit_storage[player_id]
                if now - req_time < window
            ]

            if len(rate_limit_storage[player_id]) >= limit:
                return jsonify({
                    'error': 'Rate limit exceeded',
                    'message': f'Maximum {limit} requests per {window} seconds'
                }), 429

            rate_limit_storage[player_id].append(now)

            return f(*args, **kwargs)

        return decorated_function
    return decorator
