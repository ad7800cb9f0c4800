from askdata.prompt_builder import build_prompt, group_columns_by_table, render_schema
from askdata.schema_introspector import ColumnInfo

SCHEMA = [
    ColumnInfo("orders", "id", "integer", False),
    ColumnInfo("orders", "amount", "numeric", True),
    ColumnInfo("customers", "id", "integer", False),
    ColumnInfo("customers", "customer_name", "text", False),
]


def test_group_columns_keeps_catalog_order():
    grouped = group_columns_by_table(SCHEMA)

    assert list(grouped) == ["orders", "customers"]
    assert grouped["orders"] == ["id (integer)", "amount (numeric)"]
    assert grouped["customers"] == ["id (integer)", "customer_name (text)"]


def test_render_schema_quotes_tables_and_columns():
    text = render_schema(SCHEMA)

    assert text == (
        'Table: "orders"\n'
        '  Columns: "id (integer)", "amount (numeric)"\n'
        'Table: "customers"\n'
        '  Columns: "id (integer)", "customer_name (text)"'
    )


def test_build_prompt_contains_schema_question_and_output_contract():
    question = "Show me top 5 customers by revenue"

    prompt = build_prompt(SCHEMA, question)

    assert 'Table: "customers"' in prompt
    assert prompt.count(question) == 1
    assert "You are a PostgreSQL SQL expert" in prompt
    assert "double quotes" in prompt
    assert "NEVER invent table or column names" in prompt
    sql_at = prompt.index("SQL: [your SQL query]")
    explanation_at = prompt.index("Explanation: [your explanation]")
    chart_at = prompt.index("Chart: [chart type]")
    assert sql_at < explanation_at < chart_at


def test_build_prompt_with_empty_schema_still_carries_question():
    prompt = build_prompt([], "How many orders?")

    assert "How many orders?" in prompt
    assert "Table:" not in prompt
    assert "Here is the ACTUAL database schema:\n\n\n" in prompt


def test_question_is_interpolated_unescaped():
    question = 'What is {revenue} for "Acme" in 2024?'

    prompt = build_prompt(SCHEMA, question)

    assert f"User question: {question}" in prompt


def test_dialect_is_configurable():
    prompt = build_prompt(SCHEMA, "q", dialect="CockroachDB")

    assert "You are a CockroachDB SQL expert" in prompt
    assert "PostgreSQL" not in prompt
