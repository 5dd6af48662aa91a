"""Static crop and product tables."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

GRID_SIZE = 16
INITIAL_MONEY = 100
INITIAL_GEMS = 5

class CropKind(str, Enum):
    CARROT = "CARROT"
    TOMATO = "TOMATO"
    PUMPKIN = "PUMPKIN"

class ProductKind(str, Enum):
    PUMPKIN_PIE = "PUMPKIN_PIE"
    TOMATO_SOUP = "TOMATO_SOUP"

@dataclass(frozen=True)
class CropInfo:
    name: str
    seed_price: int
    sell_price: int
    growth_ms: int
    color: Tuple[int,int,int]
    icon: str

@dataclass(frozen=True)
class ProductInfo:
    name: str
    sell_price: int
    recipe: Tuple[Tuple[CropKind,int], ...]
    icon: str

CROPS: Dict[CropKind, CropInfo] = {
    CropKind.CARROT:  CropInfo("Carrot",  10, 18,  5000, (249,115,22), "C"),
    CropKind.TOMATO:  CropInfo("Tomato",  20, 45, 10000, (220,38,38),  "T"),
    CropKind.PUMPKIN: CropInfo("Pumpkin", 50, 120, 30000, (194,65,12), "P"),
}

PRODUCTS: Dict[ProductKind, ProductInfo] = {
    ProductKind.PUMPKIN_PIE: ProductInfo("Pumpkin Pie", 300,
                                         ((CropKind.PUMPKIN, 2), (CropKind.CARROT, 1)), "Pie"),
    ProductKind.TOMATO_SOUP: ProductInfo("Tomato Soup", 150,
                                         ((CropKind.TOMATO, 3),), "Soup"),
}

# xp rewards
XP_PLANT = 5
XP_HARVEST = 100
XP_COOK = 200
