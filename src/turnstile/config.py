"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(max_content_length=1024 * 1024)
    """

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB; larger bodies get a 413

    # Streaming
    stream_chunk_size: int = 64 * 1024  # bytes per ASGI body message for stream bodies
