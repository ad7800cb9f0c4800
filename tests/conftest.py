import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from askdata.schema_introspector import ColumnInfo

SALES_SCHEMA = [
    ColumnInfo("customers", "id", "integer", False),
    ColumnInfo("customers", "customer_name", "text", False),
    ColumnInfo("customers", "revenue", "numeric", True),
]

GOOD_REPLY = (
    "SQL:\n"
    "```sql\n"
    'SELECT "customer_name", "revenue" FROM "customers" ORDER BY "revenue" DESC LIMIT 5;\n'
    "```\n"
    "Explanation: These are the five customers with the highest revenue.\n"
    "Chart: bar"
)

BAD_COLUMN_REPLY = (
    "SQL: SELECT customer_name, total_spend FROM customers\n"
    "Explanation: Customers by total spend.\n"
    "Chart: bar"
)


class FakeIntrospector:
    def __init__(self, schema=None, error=None):
        self.schema = list(schema or [])
        self.error = error
        self.describe_calls = 0

    def check_connection(self):
        if self.error is not None:
            raise self.error

    def describe_schema(self):
        self.describe_calls += 1
        return list(self.schema)


class ScriptedModel:
    """Returns (or raises) the scripted replies in order, repeating the last one."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.replies)) - 1
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def sales_engine():
    # one shared in-memory connection, usable from the TestClient worker thread
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE customers (id INTEGER PRIMARY KEY, customer_name TEXT NOT NULL, revenue REAL)"
        )
        conn.exec_driver_sql(
            "INSERT INTO customers (customer_name, revenue) VALUES "
            "('Acme', 100.0), ('Globex', 250.5), ('Initech', 75.0), "
            "('Umbrella', 310.0), ('Hooli', 42.0), ('Stark', 500.0)"
        )
    yield engine
    engine.dispose()
