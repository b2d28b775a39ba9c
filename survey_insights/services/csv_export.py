"""CSV export of survey responses.

Columns are discovered per export rather than fixed: every export carries the
standard response columns plus one column per key found in any row's nested
answers, traits or demographics, prefixed ``response_``, ``trait_`` and
``demographic_``.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from survey_insights.services.normalizer import decode_json
from survey_insights.logging_config import get_logger

logger = get_logger(__name__)

STANDARD_COLUMNS = (
    "id",
    "surveyId",
    "companyId",
    "respondentId",
    "respondentEmail",
    "ipAddress",
    "source",
    "startTime",
    "completeTime",
    "createdAt",
)

# Column prefix for each nested field
NESTED_FIELDS = {
    "responses": "response_",
    "traits": "trait_",
    "demographics": "demographic_",
}

EMPTY_EXPORT = "No data"


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def escape_value(value: Any) -> str:
    """Render one value as a CSV cell.

    Strings have quotes doubled and are quoted when they contain a comma,
    quote or line break. Objects and lists are JSON-encoded and always
    quoted. None and empty strings render as an empty cell.

    Example:
        >>> escape_value('say "hi", then leave')
        '"say ""hi"", then leave"'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        encoded = json.dumps(value, separators=(",", ":"), default=str)
        return '"' + encoded.replace('"', '""') + '"'
    if isinstance(value, str):
        escaped = value.replace('"', '""')
        if any(ch in escaped for ch in (",", "\n", "\r", '"')):
            return f'"{escaped}"'
        return escaped
    return str(value)


def flatten_nested(value: Any) -> dict[str, Any]:
    """Flatten a nested field into column-key -> cell value.

    Objects contribute their own keys. Lists of ``{questionId, answer}``
    answers key on the question id, lists of ``{name, score}`` traits key
    on the trait name, and any other list keys on the item index. JSON
    strings are decoded first; anything else contributes nothing.
    """
    value = decode_json(value)
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    if not isinstance(value, list):
        return {}

    flattened: dict[str, Any] = {}
    for index, item in enumerate(value):
        if isinstance(item, Mapping) and item.get("questionId") is not None and "answer" in item:
            flattened[str(item["questionId"])] = item["answer"]
        elif isinstance(item, Mapping) and isinstance(item.get("name"), str) and "score" in item:
            flattened[item["name"]] = item["score"]
        else:
            flattened[str(index)] = item
    return flattened


def generate_csv(
    responses: list[Mapping[str, Any]],
    survey_info: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> str:
    """Generate a CSV document from response rows.

    Args:
        responses: Response rows (camelCase keys)
        survey_info: Optional survey with ``title`` and ``description``; when
            given, a ``#``-prefixed metadata header precedes the data
        now: Export timestamp for the metadata header (defaults to now)

    Returns:
        CSV text, or "No data" when there are no responses
    """
    if not responses:
        return EMPTY_EXPORT

    lines: list[str] = []

    if survey_info is not None:
        export_time = now or datetime.now(timezone.utc)
        lines.append(f"# Survey: {survey_info.get('title') or 'Untitled'}")
        if survey_info.get("description"):
            lines.append(f"# Description: {survey_info['description']}")
        lines.append(f"# Export Date: {format_timestamp(export_time)}")
        lines.append(f"# Total Responses: {len(responses)}")
        lines.append("#")

    flattened_rows = []
    columns = set(STANDARD_COLUMNS)
    for response in responses:
        cells = {column: response.get(column) for column in STANDARD_COLUMNS}
        for field, prefix in NESTED_FIELDS.items():
            for key, value in flatten_nested(response.get(field)).items():
                cells[f"{prefix}{key}"] = value
        columns.update(cells)
        flattened_rows.append(cells)

    ordered_columns = sorted(columns)
    lines.append(",".join(escape_value(column) for column in ordered_columns))
    for cells in flattened_rows:
        lines.append(",".join(escape_value(cells.get(column)) for column in ordered_columns))

    logger.info(f"Exported {len(responses)} responses across {len(ordered_columns)} columns")
    return "\n".join(lines) + "\n"
