"""
Entity Store: per-collection CRUD used by the reservation / ledger engine.

The services never call ``Model.objects`` for plain reads and writes, they
go through an ``EntityStore`` handed to them inside a ``FleetStores``
bundle. The default bundle is backed by the Django ORM; tests or another
backend can pass their own.
"""
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, TypeVar, Union

from django.db import models

from .models import (Customer, Invoice, MaintenanceRecord, Reservation,
                     Transaction, Vehicle)

T = TypeVar("T", bound=models.Model)

Predicate = Union[models.Q, Callable[[models.Model], bool]]


class EntityStore(Generic[T]):
    """CRUD access to one entity collection."""

    def __init__(self, model: type[T]):
        self.model = model

    def __repr__(self):
        return f"EntityStore({self.model.__name__})"

    @property
    def objects(self):
        # default manager keeps custom query helpers (for_vehicle, in_month...)
        return self.model._default_manager

    def get_all(self) -> List[T]:
        return list(self.objects.all())

    def get_by_id(self, pk) -> Optional[T]:
        # Dangling references resolve to None instead of raising
        if pk is None:
            return None
        return self.objects.filter(pk=pk).first()

    def create(self, **fields) -> T:
        """Create and persist a record, the id is assigned when absent."""
        instance = self.model(**fields)
        instance.save()
        return instance

    def update(self, pk, **fields) -> Optional[T]:
        """Merge ``fields`` into the stored record.

        Provided fields overwrite, the others keep their previous value.
        Returns None when no record has this id.
        """
        instance = self.get_by_id(pk)
        if instance is None:
            return None
        for name, value in fields.items():
            setattr(instance, name, value)
        instance.save()
        return instance

    def delete(self, pk) -> bool:
        deleted, _ = self.objects.filter(pk=pk).delete()
        return deleted > 0

    def query(self, predicate: Optional[Predicate] = None, **lookups) -> List[T]:
        """Filter the collection.

        ``predicate`` is either a ``Q`` object (evaluated by the database)
        or a plain callable applied to each record.
        """
        qs = self.objects.filter(**lookups)
        if predicate is None:
            return list(qs)
        if isinstance(predicate, models.Q):
            return list(qs.filter(predicate))
        return [item for item in qs if predicate(item)]


@dataclass
class FleetStores:
    """The six collections of the back office."""

    vehicles: EntityStore = field(default_factory=lambda: EntityStore(Vehicle))
    customers: EntityStore = field(default_factory=lambda: EntityStore(Customer))
    reservations: EntityStore = field(
        default_factory=lambda: EntityStore(Reservation))
    invoices: EntityStore = field(default_factory=lambda: EntityStore(Invoice))
    transactions: EntityStore = field(
        default_factory=lambda: EntityStore(Transaction))
    maintenance: EntityStore = field(
        default_factory=lambda: EntityStore(MaintenanceRecord))

    def collections(self):
        """(name, store) pairs, in backup document order."""
        return [
            ("vehicles", self.vehicles),
            ("customers", self.customers),
            ("reservations", self.reservations),
            ("invoices", self.invoices),
            ("transactions", self.transactions),
            ("maintenance", self.maintenance),
        ]


_default_stores: Optional[FleetStores] = None


def default_stores() -> FleetStores:
    global _default_stores
    if _default_stores is None:
        _default_stores = FleetStores()
    return _default_stores
