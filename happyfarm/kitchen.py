"""Cooking crops into products."""
from __future__ import annotations
from typing import List, Tuple

from .catalog import CropKind, ProductKind, PRODUCTS, XP_COOK
from .progression import award
from .state import FarmState, Inventory

def missing_ingredients(inv: Inventory, kind: ProductKind) -> List[Tuple[CropKind,int]]:
    out = []
    for crop, need in PRODUCTS[ProductKind(kind)].recipe:
        have = inv.crops[crop]
        if have < need: out.append((crop, need-have))
    return out

def can_cook(inv: Inventory, kind: ProductKind) -> bool:
    return not missing_ingredients(inv, kind)

def cook(state: FarmState, kind: ProductKind) -> bool:
    """All ingredients are checked first; nothing is consumed unless every one is there."""
    kind = ProductKind(kind)
    inv = state.inventory
    if not can_cook(inv, kind):
        return False
    for crop, need in PRODUCTS[kind].recipe:
        inv.crops[crop] -= need
    inv.products[kind] += 1
    award(state.progression, XP_COOK)
    return True
