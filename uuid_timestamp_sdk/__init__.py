"""UUID Timestamp SDK: find version-1 UUIDs in text and decode when they were made."""

from uuid_timestamp_sdk.config import (
    DisplayConfig,
    RescanConfig,
    RuntimeConfig,
    TransientConfig,
)
from uuid_timestamp_sdk.core.batch import decode_all, decode_candidate
from uuid_timestamp_sdk.core.clock import Clock, SystemClock
from uuid_timestamp_sdk.core.decoder import (
    TICKS_PER_SECOND,
    UUID_EPOCH_OFFSET_TICKS,
    TimestampDecoder,
    decode,
    extract_fields,
    format_iso8601,
    gregorian_ticks,
    parse_instant,
    parse_iso8601,
    unix_seconds,
)
from uuid_timestamp_sdk.core.errors import (
    AnnotationNotFoundError,
    ConfigError,
    MalformedInstantError,
    MalformedUuidError,
    UuidTimestampError,
)
from uuid_timestamp_sdk.core.matcher import (
    UUID_V1_PATTERN,
    RegexUuidMatcher,
    UuidMatcher,
    find_all,
)
from uuid_timestamp_sdk.core.relative import (
    RelativeTimeFormatter,
    format_relative,
    relative_duration,
    render_relative,
)
from uuid_timestamp_sdk.core.types import (
    Annotation,
    AnnotationDiff,
    CandidateUuid,
    DecodeResult,
    RelativeDuration,
    TimeUnit,
    UuidTimeFields,
)
from uuid_timestamp_sdk.engine import (
    DefaultUuidTimeAnnotator,
    UuidTimeAnnotator,
    create_annotator,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "RuntimeConfig",
    "DisplayConfig",
    "TransientConfig",
    "RescanConfig",
    # Matcher
    "UUID_V1_PATTERN",
    "UuidMatcher",
    "RegexUuidMatcher",
    "find_all",
    # Decoder
    "UUID_EPOCH_OFFSET_TICKS",
    "TICKS_PER_SECOND",
    "TimestampDecoder",
    "decode",
    "extract_fields",
    "gregorian_ticks",
    "unix_seconds",
    "format_iso8601",
    "parse_instant",
    "parse_iso8601",
    # Relative time
    "RelativeTimeFormatter",
    "format_relative",
    "relative_duration",
    "render_relative",
    # Batch
    "decode_all",
    "decode_candidate",
    # Types
    "CandidateUuid",
    "UuidTimeFields",
    "RelativeDuration",
    "TimeUnit",
    "DecodeResult",
    "Annotation",
    "AnnotationDiff",
    # Errors
    "UuidTimestampError",
    "MalformedUuidError",
    "MalformedInstantError",
    "AnnotationNotFoundError",
    "ConfigError",
    # Clock
    "Clock",
    "SystemClock",
    # Host integration
    "UuidTimeAnnotator",
    "DefaultUuidTimeAnnotator",
    "create_annotator",
]
