from .redis_queue import RedisConfig, RedisJobQueue  # noqa: F401
