"""Unit tests for ProjectionBuilder."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

import pytest
from pydantic import BaseModel

from row_projection.core.annotations import (
    AnnotationPredicates,
    Embedded,
    MappedCollection,
    constructor,
)
from row_projection.core.exceptions import (
    ColumnCollisionError,
    EmbeddingCycleError,
    NoUsableConstructorError,
    UnresolvableParameterError,
)
from row_projection.core.path import RelationalPath
from row_projection.core.settings import ProjectionSettings
from row_projection.introspection.memory import (
    DeclaredConstructor,
    DeclaredType,
    InMemoryIntrospector,
)
from row_projection.mapping.factory import ProjectionBuilder, build_constructor_projection
from row_projection.mapping.projection import (
    ColumnReference,
    NullPlaceholder,
    ProjectionExpression,
)

if TYPE_CHECKING:
    from decimal import Decimal


class Money:
    def __init__(self, amount_minor: int, currency: str) -> None:
        self.amount_minor = amount_minor
        self.currency = currency

    @constructor
    @classmethod
    def zero(cls) -> Money:
        return cls(0, "EUR")


@dataclass(frozen=True)
class Address:
    street: str
    city: str


@dataclass(frozen=True)
class Item:
    sku: str


@dataclass(frozen=True)
class Order:
    id: int
    ship_to: Annotated[Address, Embedded()]
    items: Annotated[list[Item], MappedCollection()]


@dataclass(frozen=True)
class Shipment:
    id: int
    origin: Annotated[Address, Embedded()]
    destination: Annotated[Address, Embedded()]


@dataclass(frozen=True)
class Invoice:
    id: int
    billing: Annotated[Address | None, Embedded()]


@dataclass(frozen=True)
class Broken:
    id: int
    extra: str


@dataclass
class Node:
    id: int
    parent: Annotated[Node | None, Embedded()]


@dataclass(frozen=True)
class Plain:
    id: int
    ship_to: Address


class Customer(BaseModel):
    id: int
    name: str
    address: Annotated[Address, Embedded()]
    orders: Annotated[list[Item] | None, MappedCollection()] = None


class Marker:
    pass


class AbstractThing(ABC):
    @abstractmethod
    def run(self) -> None: ...


@dataclass(frozen=True)
class Holder:
    id: int
    thing: Annotated[AbstractThing, Embedded()]


@dataclass(frozen=True)
class PricedOrder:
    id: int
    total: Decimal
    ship_to: Annotated[Address, Embedded()]
    items: Annotated[list[Item], MappedCollection()]


@pytest.fixture
def builder() -> ProjectionBuilder:
    return ProjectionBuilder()


class TestColumnBinding:
    def test_money_binds_columns_in_parameter_order(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("money", "amount_minor", "currency")
        projection = builder.build(Money, path)
        assert projection.constructor.constructor.name == "__init__"
        assert projection.sources == (
            ColumnReference(path["amount_minor"]),
            ColumnReference(path["currency"]),
        )

    def test_binding_independent_of_column_order(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("money", "currency", "amount_minor")
        projection = builder.build(Money, path)
        assert [s.column.name for s in projection.sources] == ["amount_minor", "currency"]

    def test_parameter_types_follow_constructor(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("money", "amount_minor", "currency")
        projection = builder.build(Money, path)
        assert projection.parameter_types == (int, str)

    def test_extra_columns_ignored(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("money", "amount_minor", "currency", "created_at")
        projection = builder.build(Money, path)
        assert len(projection.arguments) == 2

    def test_no_arg_type(self, builder: ProjectionBuilder) -> None:
        projection = builder.build(Marker, RelationalPath.of("markers", "id"))
        assert projection.arguments == ()
        assert isinstance(projection.map_one({"id": 1}), Marker)


class TestEmbedded:
    def test_order_projection(self, builder: ProjectionBuilder, order_path: RelationalPath) -> None:
        projection = builder.build(Order, order_path)
        id_source, ship_to, items = projection.sources

        assert id_source == ColumnReference(order_path["id"])
        assert isinstance(ship_to, ProjectionExpression)
        assert ship_to.target_type is Address
        assert ship_to.sources == (
            ColumnReference(order_path["street"]),
            ColumnReference(order_path["city"]),
        )
        assert items == NullPlaceholder(list[Item])

    def test_order_row_mapping(self, builder: ProjectionBuilder, order_path: RelationalPath) -> None:
        projection = builder.build(Order, order_path)
        order = projection.map_one({"id": 7, "street": "Main St", "city": "Oslo"})
        assert order == Order(id=7, ship_to=Address("Main St", "Oslo"), items=None)  # type: ignore[arg-type]

    def test_same_embedded_type_resolved_per_parameter(
        self, builder: ProjectionBuilder, order_path: RelationalPath
    ) -> None:
        projection = builder.build(Shipment, order_path)
        _, origin, destination = projection.sources
        assert origin == destination
        assert origin is not destination

    def test_optional_embedded_unwrapped(
        self, builder: ProjectionBuilder, order_path: RelationalPath
    ) -> None:
        projection = builder.build(Invoice, order_path)
        billing = projection.sources[1]
        assert isinstance(billing, ProjectionExpression)
        assert billing.target_type is Address

    def test_unmarked_field_is_not_embedded(
        self, builder: ProjectionBuilder, order_path: RelationalPath
    ) -> None:
        with pytest.raises(UnresolvableParameterError, match="ship_to"):
            builder.build(Plain, order_path)

    def test_embedded_without_constructor(
        self, builder: ProjectionBuilder, order_path: RelationalPath
    ) -> None:
        with pytest.raises(NoUsableConstructorError, match="AbstractThing"):
            builder.build(Holder, order_path)

    def test_embedding_cycle_detected(self, builder: ProjectionBuilder) -> None:
        with pytest.raises(EmbeddingCycleError) as exc_info:
            builder.build(Node, RelationalPath.of("nodes", "id"))
        assert exc_info.value.chain == (Node, Node)

    def test_pydantic_model_with_embedded(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("customers", "id", "name", "street", "city")
        projection = builder.build(Customer, path)
        customer = projection.map_one({"id": 1, "name": "Ann", "street": "Elm", "city": "Bergen"})
        assert customer.address == Address("Elm", "Bergen")
        assert customer.orders is None
        assert projection.sources[3] == NullPlaceholder(list[Item] | None)


    def test_unresolvable_hint_keeps_other_markers(self, builder: ProjectionBuilder) -> None:
        path = RelationalPath.of("orders", "id", "total", "street", "city")
        projection = builder.build(PricedOrder, path)
        _, total, ship_to, items = projection.sources

        assert total == ColumnReference(path["total"])
        assert isinstance(ship_to, ProjectionExpression)
        assert ship_to.target_type is Address
        assert items == NullPlaceholder(list[Item])
        assert projection.parameter_types[2:] == (Address, list[Item])

        order = projection.map_one({"id": 1, "total": "9.50", "street": "Elm", "city": "Oslo"})
        assert order.ship_to == Address("Elm", "Oslo")

    def test_classes_declared_in_function(self, builder: ProjectionBuilder) -> None:
        @dataclass(frozen=True)
        class Street:
            name: str

        @dataclass(frozen=True)
        class Home:
            id: int
            where: Annotated[Street, Embedded()]
            residents: Annotated[list[Street], MappedCollection()]

        projection = builder.build(Home, RelationalPath.of("homes", "id", "name"))
        assert projection.sources[1].target_type is Street  # type: ignore[union-attr]
        assert projection.sources[2] == NullPlaceholder(list[Street])
        assert projection.map_one({"id": 1, "name": "Elm"}) == Home(1, Street("Elm"), None)  # type: ignore[arg-type]


class TestFailures:
    def test_unresolvable_parameter(self, builder: ProjectionBuilder) -> None:
        with pytest.raises(UnresolvableParameterError, match="extra") as exc_info:
            builder.build(Broken, RelationalPath.of("broken", "id"))
        assert exc_info.value.target_type is Broken
        assert exc_info.value.parameter_name == "extra"
        assert exc_info.value.position == 1
        assert "Broken" in str(exc_info.value)

    def test_no_usable_constructor(self, builder: ProjectionBuilder) -> None:
        with pytest.raises(NoUsableConstructorError):
            builder.build(AbstractThing, RelationalPath.of("things", "id"))

    def test_absent_parameter_name_fails(self) -> None:
        introspector = InMemoryIntrospector(
            [
                DeclaredType(
                    Money,
                    constructors=(DeclaredConstructor(factory=Money, parameter_types=(int, str)),),
                )
            ]
        )
        builder = ProjectionBuilder(introspector=introspector)
        path = RelationalPath.of("money", "amount_minor", "currency")
        with pytest.raises(UnresolvableParameterError, match="name unavailable") as exc_info:
            builder.build(Money, path)
        assert exc_info.value.parameter_name is None
        assert exc_info.value.position == 0


class TestPolicies:
    def test_build_is_idempotent(self, builder: ProjectionBuilder, order_path: RelationalPath) -> None:
        assert builder.build(Order, order_path) == builder.build(Order, order_path)

    def test_shared_columns_allowed_by_default(
        self, builder: ProjectionBuilder, order_path: RelationalPath
    ) -> None:
        projection = builder.build(Shipment, order_path)
        shipment = projection.map_one({"id": 1, "street": "Dock 4", "city": "Tromso"})
        assert shipment.origin == shipment.destination

    def test_strict_mode_rejects_shared_columns(self, order_path: RelationalPath) -> None:
        builder = ProjectionBuilder(settings=ProjectionSettings(strict=True))
        with pytest.raises(ColumnCollisionError, match="street") as exc_info:
            builder.build(Shipment, order_path)
        assert exc_info.value.parameters == ["Address.street", "Address.street"]

    def test_strict_mode_accepts_distinct_columns(self, order_path: RelationalPath) -> None:
        builder = ProjectionBuilder(settings=ProjectionSettings(strict=True))
        assert builder.build(Order, order_path).target_type is Order

    def test_injected_predicates(self, order_path: RelationalPath) -> None:
        predicates = AnnotationPredicates(is_embedded=lambda field: field.name == "ship_to")
        projection = ProjectionBuilder(predicates=predicates).build(Plain, order_path)
        assert isinstance(projection.sources[1], ProjectionExpression)

    def test_module_function(self, order_path: RelationalPath) -> None:
        projection = build_constructor_projection(Order, order_path)
        assert projection.target_type is Order
