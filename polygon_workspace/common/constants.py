"""Application constants."""

COMMANDS = (
    "parse",
    "mean",
    "generate",
    "list",
    "show",
    "delete",
    "clear",
    "stats",
    "export-attachment",
)
EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 10
EXIT_HARD_FAIL = 20

COORDINATE_DECIMALS = 6
CODE_PREFIX = "GA"
JOB_CODE_PREFIX = "JOB"
JOB_SUFFIX_RANGE = 1000
EMPTY_POLYGON_TEXT = "No coordinates"
EMPTY_MEAN_FORMATTED = "0.000000, 0.000000"
EMPTY_MEAN_CODE = "GA0-000000"

GENERATIONS_TABLE = "generations"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
JSON_LOG_FIELDS = (
    "timestamp",
    "session_id",
    "operation",
    "record_id",
    "external_ref",
    "event",
    "status",
    "duration_ms",
    "points_in",
    "points_out",
    "error_code",
    "message",
)
