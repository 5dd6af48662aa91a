"""Shop transactions. Balance and stock are checked before anything changes."""
from __future__ import annotations

from .catalog import CropKind, ProductKind, CROPS, PRODUCTS
from .state import FarmState

def can_afford(state: FarmState, kind: CropKind) -> bool:
    return state.money >= CROPS[CropKind(kind)].seed_price

def can_sell_crop(state: FarmState, kind: CropKind) -> bool:
    return state.inventory.crops[CropKind(kind)] >= 1

def can_sell_product(state: FarmState, kind: ProductKind) -> bool:
    return state.inventory.products[ProductKind(kind)] >= 1

def buy_seed(state: FarmState, kind: CropKind) -> bool:
    kind = CropKind(kind)
    if not can_afford(state, kind):
        return False
    state.money -= CROPS[kind].seed_price
    state.inventory.seeds[kind] += 1
    return True

def sell_crop(state: FarmState, kind: CropKind) -> bool:
    kind = CropKind(kind)
    if not can_sell_crop(state, kind):
        return False
    state.inventory.crops[kind] -= 1
    state.money += CROPS[kind].sell_price
    return True

def sell_product(state: FarmState, kind: ProductKind) -> bool:
    kind = ProductKind(kind)
    if not can_sell_product(state, kind):
        return False
    state.inventory.products[kind] -= 1
    state.money += PRODUCTS[kind].sell_price
    return True
