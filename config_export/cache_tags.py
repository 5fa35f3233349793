"""
Cache Tag Utilities

Tag-based invalidation on top of the Django cache. Every tag has a version
token stored in the cache; cached responses are keyed on the current version
of each of their tags, so replacing a tag's token makes every response that
carried the tag unreachable at once.
"""
import hashlib
import logging
import uuid
from functools import wraps

from django.conf import settings
from django.core.cache import cache
from rest_framework.response import Response

logger = logging.getLogger(__name__)

CACHE_TAGS_HEADER = 'Cache-Tags'
CACHE_STATUS_HEADER = 'X-Cache'

TAG_VERSION_PREFIX = 'cache_tag'
RESPONSE_KEY_PREFIX = 'tagged_response'


def _version_key(tag):
    return f'{TAG_VERSION_PREFIX}:{tag}'


def tag_version(tag):
    """
    Get the current version token of a tag.

    A tag seen for the first time (or evicted from the cache) gets a fresh
    random token, so it can never match a key built from an older token.
    """
    key = _version_key(tag)
    version = cache.get(key)
    if version is None:
        # add() keeps the first token when concurrent requests race here
        cache.add(key, uuid.uuid4().hex, timeout=None)
        version = cache.get(key)
    return version


def invalidate_tags(tags):
    """Mark every cached response carrying any of ``tags`` as stale."""
    for tag in tags:
        cache.set(_version_key(tag), uuid.uuid4().hex, timeout=None)
        logger.debug(f"Invalidated cache tag {tag}")


def cache_key_for(path, tags):
    """
    Build the response cache key for ``path`` under the current tag versions.

    Args:
        path: Full request path including the query string
        tags: Iterable of cache tags attached to the response

    Returns:
        str: Cache key that changes whenever any tag is invalidated
    """
    versions = '|'.join(f'{tag}={tag_version(tag)}' for tag in sorted(set(tags)))
    digest = hashlib.md5(f'{path}#{versions}'.encode('utf-8')).hexdigest()
    return f'{RESPONSE_KEY_PREFIX}:{digest}'


def cache_tagged_response(timeout=None):
    """
    Cache successful responses of a DRF view handler under its cache tags.

    The view must implement ``get_cache_tags(**kwargs)`` returning the tags
    for the request's URL kwargs. Successful responses always carry the
    ``Cache-Tags`` header; only 200 payloads are stored, and only when
    ``CONFIG_EXPORT_RESPONSE_CACHE`` is on. Errors raised by the handler
    propagate untouched.
    """
    def decorator(view_method):
        @wraps(view_method)
        def _wrapped(view, request, *args, **kwargs):
            tags = view.get_cache_tags(**kwargs)

            if not settings.CONFIG_EXPORT_RESPONSE_CACHE:
                response = view_method(view, request, *args, **kwargs)
            else:
                key = cache_key_for(request.get_full_path(), tags)
                lifetime = timeout if timeout is not None else settings.CONFIG_EXPORT_CACHE_TIMEOUT

                cached = cache.get(key)
                if cached is not None:
                    response = Response(cached)
                    response[CACHE_STATUS_HEADER] = 'HIT'
                else:
                    response = view_method(view, request, *args, **kwargs)
                    if response.status_code == 200:
                        cache.set(key, response.data, lifetime)
                    response[CACHE_STATUS_HEADER] = 'MISS'

            if response.status_code == 200:
                response[CACHE_TAGS_HEADER] = ' '.join(tags)
            return response
        return _wrapped
    return decorator
