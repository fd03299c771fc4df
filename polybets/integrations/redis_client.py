import redis

from ..settings import settings

redis_conn = redis.from_url(settings.REDIS_URL, socket_connect_timeout=1, socket_timeout=1)
