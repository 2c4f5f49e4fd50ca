import json
import redis
from flask import current_app
from edumanage.config.database import get_redis
from edumanage.app_logger import get_logger

logger = get_logger("public_cache")

PREFIX = "config:public"


class PublicCache:
    """
    Cache-aside for the public key->value projection.
    Redis first, MongoDB on miss; every write to the store calls invalidate().
    Without redis every call is a no-op miss.
    """

    @staticmethod
    def _key(category=None):
        return f"{PREFIX}:{category}" if category else PREFIX

    @staticmethod
    def get(category=None):
        r = get_redis()
        if r is None:
            return None
        try:
            cached = r.get(PublicCache._key(category))
        except redis.RedisError as e:
            logger.warning("Public cache read failed: %s", e)
            return None
        return json.loads(cached) if cached else None

    @staticmethod
    def set(projection, category=None):
        r = get_redis()
        if r is None:
            return
        ttl = current_app.config.get("PUBLIC_CACHE_TTL", 300)
        try:
            r.setex(PublicCache._key(category), ttl, json.dumps(projection, default=str))
        except redis.RedisError as e:
            logger.warning("Public cache write failed: %s", e)

    @staticmethod
    def invalidate():
        r = get_redis()
        if r is None:
            return
        try:
            keys = list(r.scan_iter(match=f"{PREFIX}*"))
            if keys:
                r.delete(*keys)
        except redis.RedisError as e:
            logger.warning("Public cache invalidation failed: %s", e)
