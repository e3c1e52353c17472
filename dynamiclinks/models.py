from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Client:
    """Tenant on whose behalf URLs are shortened.

    Attributes:
        id (str):
            Unique client identifier, used to scope short codes and lock keys.
        scheme (str):
            Scheme of the client's short link domain, e.g. 'https'.
        hostname (str):
            Hostname of the client's short link domain, e.g. 'dl.example'.
        name (str | None):
            Optional human readable name.

    Example:
        >>> client = Client(id='42', scheme='https', hostname='dl.example')
        >>> client.hostname
        'dl.example'
    """

    id: str
    scheme: str
    hostname: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Client':
        return cls(id=str(data['id']), scheme=data['scheme'], hostname=data['hostname'], name=data.get('name'))


# fmt: off
@dataclass(frozen=True)
class ShortenedURLModel:
    client_id: str                      # Owning client
    url: str                            # Original long URL
    shortcode: str                      # Short identifier, unique per client
    expires_at: datetime | None = None  # After which the mapping is expired (None: never)
# fmt: on
