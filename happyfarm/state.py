"""Root aggregate: plots, inventory, money, progression and view mode."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .catalog import CropKind, ProductKind, GRID_SIZE, INITIAL_MONEY, INITIAL_GEMS

class ViewMode(str, Enum):
    FARM = "FARM"
    SHOP = "SHOP"
    KITCHEN = "KITCHEN"

@dataclass
class Plot:
    id: int
    tilled: bool = False
    crop: Optional[CropKind] = None
    planted_at: Optional[int] = None  # epoch ms, set iff crop is set

    def empty(self) -> bool:
        return self.crop is None

def _crop_counts(**given: int) -> Dict[CropKind,int]:
    return {k: given.get(k.name, 0) for k in CropKind}

def _product_counts(**given: int) -> Dict[ProductKind,int]:
    return {k: given.get(k.name, 0) for k in ProductKind}

@dataclass
class Inventory:
    seeds: Dict[CropKind,int] = field(default_factory=lambda: _crop_counts(CARROT=2))
    crops: Dict[CropKind,int] = field(default_factory=_crop_counts)
    products: Dict[ProductKind,int] = field(default_factory=_product_counts)

@dataclass
class Progression:
    level: int = 1
    xp: int = 0
    gems: int = INITIAL_GEMS
    chests: List[Any] = field(default_factory=list)

@dataclass
class FarmState:
    money: int = INITIAL_MONEY
    plots: List[Plot] = field(default_factory=lambda: new_plots())
    inventory: Inventory = field(default_factory=Inventory)
    view: ViewMode = ViewMode.FARM
    progression: Progression = field(default_factory=Progression)

    def plot(self, plot_id: int) -> Optional[Plot]:
        if isinstance(plot_id, int) and 0 <= plot_id < len(self.plots):
            return self.plots[plot_id]
        return None

def new_plots(n: int = GRID_SIZE) -> List[Plot]:
    return [Plot(i) for i in range(n)]

# ------------------------------- Read-only view -----------------------------
@dataclass(frozen=True)
class PlotView:
    id: int
    tilled: bool
    crop: Optional[CropKind]
    planted_at: Optional[int]

    def empty(self) -> bool:
        return self.crop is None

@dataclass(frozen=True)
class InventoryView:
    seeds: Mapping[CropKind,int]
    crops: Mapping[CropKind,int]
    products: Mapping[ProductKind,int]

@dataclass(frozen=True)
class ProgressionView:
    level: int
    xp: int
    gems: int
    chests: Tuple[Any, ...]

@dataclass(frozen=True)
class FarmView:
    """Snapshot of a FarmState that the client can read but not change."""
    money: int
    plots: Tuple[PlotView, ...]
    inventory: InventoryView
    view: ViewMode
    progression: ProgressionView

    def plot(self, plot_id: int) -> Optional[PlotView]:
        if isinstance(plot_id, int) and 0 <= plot_id < len(self.plots):
            return self.plots[plot_id]
        return None

def view_of(state: FarmState) -> FarmView:
    inv = state.inventory; prog = state.progression
    return FarmView(
        money=state.money,
        plots=tuple(PlotView(p.id, p.tilled, p.crop, p.planted_at) for p in state.plots),
        inventory=InventoryView(seeds=MappingProxyType(dict(inv.seeds)),
                                crops=MappingProxyType(dict(inv.crops)),
                                products=MappingProxyType(dict(inv.products))),
        view=state.view,
        progression=ProgressionView(prog.level, prog.xp, prog.gems, tuple(prog.chests)),
    )
