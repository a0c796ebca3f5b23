import csv
import io
import json
from collections.abc import Mapping, Sequence
from typing import Any

import orjson

from src.casegen.domain.enums import Priority, PriorityFilter
from src.casegen.domain.models import ResultEnvelope

CSV_HEADERS = [
    "ID", "Title", "Description", "Category", "Priority", "Preconditions",
    "Test Steps", "Input Data", "Expected Result", "Tags",
]
LIST_SEPARATOR = "; "


def _field(case: Any, key: str) -> Any:
    return case.get(key) if isinstance(case, Mapping) else None


def _priority_of(case: Any) -> str | None:
    priority = _field(case, "priority")
    return priority.lower() if isinstance(priority, str) else None


def filter_by_priority(test_cases: Sequence[Any], priority: str) -> list[Any]:
    """
    Keeps the test cases whose priority matches exactly, ignoring case.
    "all" returns every case.
    """
    wanted = priority.lower()
    if wanted == PriorityFilter.ALL:
        return list(test_cases)
    return [case for case in test_cases if _priority_of(case) == wanted]


def count_by_priority(test_cases: Sequence[Any]) -> dict[str, int]:
    counts = {PriorityFilter.ALL.value: len(test_cases)}
    for level in Priority:
        counts[level.value] = sum(1 for case in test_cases if _priority_of(case) == level)
    return counts


def export_json(result: ResultEnvelope | Mapping[str, Any]) -> str:
    payload = result.to_payload()["testSuite"] if hasattr(result, "to_payload") else result
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8")


def _text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "true"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def _joined(value: Any) -> str:
    if isinstance(value, list):
        return LIST_SEPARATOR.join(_text(item) for item in value)
    return _text(value)


def csv_row(case: Any) -> list[str]:
    return [
        _text(_field(case, "id")),
        _text(_field(case, "title")),
        _text(_field(case, "description")),
        _text(_field(case, "category")),
        _text(_field(case, "priority")),
        _text(_field(case, "preconditions")),
        _joined(_field(case, "testSteps")),
        _text(_field(case, "inputData")),
        _text(_field(case, "expectedResult")),
        _joined(_field(case, "tags")),
    ]


def export_csv(test_cases: Sequence[Any]) -> str:
    """
    Header line unquoted, then one fully quoted row per test case.
    Embedded quotes are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for case in test_cases:
        writer.writerow(csv_row(case))

    rows = buffer.getvalue()
    lines = [",".join(CSV_HEADERS)]
    if rows:
        lines.append(rows[:-1])
    return "\n".join(lines)


def csv_filename(priority: str = PriorityFilter.ALL) -> str:
    priority = priority.lower()
    if priority == PriorityFilter.ALL:
        return "test-cases.csv"
    return f"test-cases-{priority}.csv"
