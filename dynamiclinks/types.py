from typing import Any
from collections.abc import Callable


# Guarded callable executed by a locker while holding a lock
type LockAction = Callable[[], Any]

# Keyword arguments forwarded to redis.Redis(...)
type RedisConfiguration = dict[str, Any]

# Deferred shortening job payload (JSON-serializable)
type JobPayload = dict[str, Any]
