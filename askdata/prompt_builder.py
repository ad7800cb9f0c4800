from __future__ import annotations

from askdata.schema_introspector import ColumnInfo

PROMPT_TEMPLATE = """
You are a {dialect} SQL expert. Here is the ACTUAL database schema:

{schema_text}

Instructions:
- ONLY use table and column names from the schema above.
- ALWAYS use double quotes around table and column names in SQL.
- If the user asks for something that doesn't exist, use the closest possible match from the schema.
- NEVER invent table or column names.
- If the user uses a different name, map it to the closest real name and explain your mapping in the explanation.
- Generate a single valid {dialect} SQL statement ONLY. Do NOT generate application or client-library code.

User question: {question}

Please provide:
1. A valid {dialect} SQL query (inside triple backticks if needed) using ONLY the schema above and double quotes for all identifiers.
2. A natural language explanation of the results, including how you mapped user terms to schema names.
3. A recommended chart type (bar, line, pie, etc.) for visualizing the data.

Format your response as:
SQL: [your SQL query]
Explanation: [your explanation]
Chart: [chart type]
"""


def group_columns_by_table(schema: list[ColumnInfo]) -> dict[str, list[str]]:
    # dict keeps first-seen table order, i.e. catalog order
    tables: dict[str, list[str]] = {}
    for column in schema:
        tables.setdefault(column.table_name, []).append(f"{column.column_name} ({column.data_type})")
    return tables


def render_schema(schema: list[ColumnInfo]) -> str:
    return "\n".join(
        f'Table: "{table}"\n  Columns: ' + ", ".join(f'"{col}"' for col in columns)
        for table, columns in group_columns_by_table(schema).items()
    )


def build_prompt(schema: list[ColumnInfo], question: str, dialect: str = "PostgreSQL") -> str:
    """Render schema + question into the fixed SQL / Explanation / Chart contract."""
    return PROMPT_TEMPLATE.format(
        dialect=dialect,
        schema_text=render_schema(schema),
        question=question,
    )
