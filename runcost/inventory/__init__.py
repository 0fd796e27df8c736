"""
Resource Inventory
==================

Region-scoped listers for the resources runcost prices.

Classes
-------
InstanceInventory
    Lists every EC2 instance of one region.
InstanceResource
    Immutable snapshot of one instance.
InstanceState
    EC2 lifecycle states.
"""

from runcost.inventory.instance_inventory import (
    InstanceInventory,
    InstanceResource,
    InstanceState,
)

__all__ = [
    "InstanceInventory",
    "InstanceResource",
    "InstanceState",
]
