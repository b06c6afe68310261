"""
Example 01: Constructor Projection

This example demonstrates building a projection for a domain type with an
embedded value object and mapping SQLite rows through it.
"""

from row_projection import (
    Embedded,
    MappedCollection,
    RelationalPath,
    build_constructor_projection,
)
from dataclasses import dataclass
from typing import Annotated
import sqlite3


@dataclass(frozen=True)
class Address:
    """Value object stored inline in the orders table"""
    street: str
    city: str


@dataclass(frozen=True)
class Item:
    """Order item, loaded by a separate query"""
    sku: str
    quantity: int


@dataclass(frozen=True)
class Order:
    """Order entity"""
    id: int
    ship_to: Annotated[Address, Embedded()]
    items: Annotated[list[Item], MappedCollection()]


ORDERS = RelationalPath.of("orders", "id", "street", "city")


def main():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, street TEXT, city TEXT)")
    conn.execute("INSERT INTO orders VALUES (1, 'Main St', 'Oslo')")
    conn.execute("INSERT INTO orders VALUES (2, 'Dock 4', 'Bergen')")

    print("=== Constructor Projection ===\n")

    # Build once, reuse for every row
    projection = build_constructor_projection(Order, ORDERS)
    print("1. Projection:")
    print(f"   Constructor: {projection.constructor.constructor.name}")
    print(f"   Columns: {[c.name for c in projection.columns()]}\n")

    # Select exactly the columns the projection reads
    columns = ", ".join(c.name for c in projection.columns())
    rows = conn.execute(f"SELECT {columns} FROM {ORDERS.table} ORDER BY id").fetchall()

    print("2. Mapped orders:")
    for order in projection.map_many(rows):
        # items stays None until populated by another query
        print(f"   #{order.id} -> {order.ship_to.street}, {order.ship_to.city} (items={order.items})")
    print()

    conn.close()


if __name__ == "__main__":
    main()
