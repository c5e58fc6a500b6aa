from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class FileStream:
    """Status, headers and a lazy body ready to be sent to the client."""

    status_code: int
    body: Iterator[bytes]
    media_type: str
    headers: dict[str, str] = field(default_factory=dict)
