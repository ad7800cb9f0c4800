"""Parse the model's free-text reply into SQL / explanation / chart hint.

The reply must contain the labels ``SQL:``, ``Explanation:`` and ``Chart:``
in that order (case-insensitive). Each field is the trimmed text between its
label and the next one; the chart hint runs to the end of the reply. A fenced
code block right after ``SQL:`` is preferred over the raw section text.

Parsing is all-or-nothing: a reply missing any label yields a ParseFailure,
never a partially filled ParsedAnswer.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

_SQL_LABEL = re.compile(r"\bSQL\s*:", re.IGNORECASE)
_EXPLANATION_LABEL = re.compile(r"\bExplanation\s*:", re.IGNORECASE)
_CHART_LABEL = re.compile(r"\bChart\s*:", re.IGNORECASE)

# ```sql\n...```, ```\n...``` or ```...``` on one line
_FENCED_BLOCK = re.compile(r"```(?:[A-Za-z]*[ \t]*\n)?(.*?)```", re.DOTALL)


@dataclass(frozen=True, slots=True)
class ParsedAnswer:
    sql: str
    explanation: str
    chart: str


@dataclass(frozen=True, slots=True)
class ParseFailure:
    reason: str

    def __str__(self) -> str:
        return self.reason


def _extract_sql(section: str) -> str:
    stripped = section.strip()
    fenced = _FENCED_BLOCK.match(stripped)
    if fenced and fenced.group(1).strip():
        return fenced.group(1).strip()
    return stripped


def parse_model_reply(reply: str) -> ParsedAnswer | ParseFailure:
    text = reply or ""

    sql_label = _SQL_LABEL.search(text)
    if sql_label is None:
        return ParseFailure("Invalid response format from model: missing 'SQL:' section")

    explanation_label = _EXPLANATION_LABEL.search(text, sql_label.end())
    if explanation_label is None:
        return ParseFailure("Invalid response format from model: missing 'Explanation:' section")

    chart_label = _CHART_LABEL.search(text, explanation_label.end())
    if chart_label is None:
        return ParseFailure("Invalid response format from model: missing 'Chart:' section")

    sql = _extract_sql(text[sql_label.end():explanation_label.start()])
    if not sql:
        return ParseFailure("Invalid response format from model: empty 'SQL:' section")

    return ParsedAnswer(
        sql=sql,
        explanation=text[explanation_label.end():chart_label.start()].strip(),
        chart=text[chart_label.end():].strip(),
    )
