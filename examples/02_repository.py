"""
Example 02: Repository Pattern

This example demonstrates a repository resolving its entity's relational path
from a path holder class and mapping query results with its projection.
"""

from row_projection import RelationalPath, Repository, constructor, persistence_creator
import sqlite3


class Money:
    """Money value with a creator used when loading from storage"""

    def __init__(self, amount_minor: int, currency: str):
        self.amount_minor = amount_minor
        self.currency = currency

    @persistence_creator
    @constructor
    @classmethod
    def from_row(cls, amount_minor: int, currency: str) -> "Money":
        return cls(amount_minor, currency.upper())


class QMoney:
    """Path holder found by naming convention: Q + entity name"""
    money = RelationalPath.of("money", "amount_minor", "currency")


class SqliteEngine:
    """Minimal engine running inline SQL"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def fetch_all(self, sql: str, mapper):
        return mapper.map_many(self.conn.execute(sql).fetchall())


class MoneyRepository(Repository[Money]):
    """Repository for Money values"""

    def list_all(self) -> list[Money]:
        columns = ", ".join(self.column_names)
        return self.engine.fetch_all(
            f"SELECT {columns} FROM {self.path.table}",
            mapper=self.mapper
        )


def main():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("CREATE TABLE money (amount_minor INTEGER, currency TEXT)")
    conn.execute("INSERT INTO money VALUES (1250, 'eur')")
    conn.execute("INSERT INTO money VALUES (99, 'nok')")

    print("=== Repository Pattern ===\n")

    # Entity, path and projection are resolved here
    repo = MoneyRepository(SqliteEngine(conn))
    print("1. Resolved:")
    print(f"   Entity: {repo.entity_type.__name__}")
    print(f"   Table: {repo.path.table}")
    print(f"   Columns: {repo.column_names}\n")

    print("2. All money values:")
    for money in repo.list_all():
        print(f"   - {money.amount_minor} {money.currency}")
    print()

    conn.close()


if __name__ == "__main__":
    main()
