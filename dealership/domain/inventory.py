"""Inventory arithmetic. Derived figures only; stored numbers are never touched."""
from dataclasses import dataclass
from typing import Iterable, Union

from dealership.models.vehicle import Inventory, Vehicle


def _inventory_of(item: Union[Vehicle, Inventory]) -> Inventory:
    return item.inventory if isinstance(item, Vehicle) else item


def compute_available_stock(item: Union[Vehicle, Inventory]) -> int:
    """
    Units that can still be sold: stock - reserved, floored at zero.

    The floor applies to this derived figure only. A stored record with
    reserved > stock is left as is.
    """
    inventory = _inventory_of(item)
    return max(inventory.stock - inventory.reserved, 0)


def is_overcommitted(item: Union[Vehicle, Inventory]) -> bool:
    """reserved > stock. Tolerated, but worth flagging."""
    inventory = _inventory_of(item)
    return inventory.reserved > inventory.stock


@dataclass
class InventoryTotals:
    stock: int = 0
    reserved: int = 0
    available: int = 0
    overcommitted: int = 0


def summarize_inventory(vehicles: Iterable[Vehicle]) -> InventoryTotals:
    totals = InventoryTotals()
    for vehicle in vehicles:
        totals.stock += vehicle.inventory.stock
        totals.reserved += vehicle.inventory.reserved
        totals.available += compute_available_stock(vehicle)
        if is_overcommitted(vehicle):
            totals.overcommitted += 1
    return totals
