"""Which world object the player is standing at, and what pressing a key there does.

The same ``resolve`` call feeds the per-frame label and the key handler, so the
label shown is always the action that runs.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .catalog import CropKind, CROPS
from .plots import Stage, plot_stage, time_left_ms, till, plant, harvest
from .settings import SHOP_RECT, SHOP_RADIUS, PLOTS_ORIGIN, TILE, PLOT_COLS, PLOT_ROWS
from .state import FarmState, ViewMode

class Key(str, Enum):
    ACTION = "E"
    TILL = "SPACE"

@dataclass(frozen=True)
class Layout:
    shop_rect: Tuple[int,int,int,int] = SHOP_RECT
    shop_radius: float = SHOP_RADIUS
    plots_origin: Tuple[int,int] = PLOTS_ORIGIN
    tile: int = TILE
    cols: int = PLOT_COLS
    rows: int = PLOT_ROWS

    def shop_center(self) -> Tuple[float,float]:
        x,y,w,h = self.shop_rect
        return x + w/2, y + h/2

    def cell_at(self, px: float, py: float) -> Optional[int]:
        ox,oy = self.plots_origin
        col = math.floor((px-ox)/self.tile); row = math.floor((py-oy)/self.tile)
        if 0 <= col < self.cols and 0 <= row < self.rows:
            return row*self.cols + col
        return None

    def cell_rect(self, plot_id: int) -> Tuple[int,int,int,int]:
        ox,oy = self.plots_origin
        row, col = divmod(plot_id, self.cols)
        return ox+col*self.tile, oy+row*self.tile, self.tile, self.tile

DEFAULT_LAYOUT = Layout()

@dataclass(frozen=True)
class Target:
    kind: str  # "shop" or "plot"
    label: str
    plot_id: Optional[int] = None
    stage: Optional[Stage] = None
    actions: Dict[Key,str] = field(default_factory=dict)

def _plot_target(state: FarmState, plot_id: int, seed: Optional[CropKind], now: int) -> Target:
    p = state.plots[plot_id]
    st = plot_stage(p, now)
    if st is Stage.READY:
        return Target("plot", "E: Harvest", plot_id, st, {Key.ACTION: "harvest"})
    if st is Stage.GROWING:
        secs = math.ceil(time_left_ms(p, now)/1000)
        return Target("plot", f"Growing... {secs}s", plot_id, st)
    if st is Stage.EMPTY_UNTILLED:
        return Target("plot", "Space: Till soil", plot_id, st, {Key.TILL: "till"})
    if seed is None:
        return Target("plot", "Space: Flatten soil", plot_id, st, {Key.TILL: "till"})
    name = CROPS[seed].name
    if state.inventory.seeds[seed] < 1:
        return Target("plot", f"Space: Flatten soil | No {name} seeds", plot_id, st, {Key.TILL: "till"})
    return Target("plot", f"Space: Flatten soil | E: Plant {name}", plot_id, st,
                  {Key.TILL: "till", Key.ACTION: "plant"})

def resolve(state: FarmState, pos: Tuple[float,float], seed: Optional[CropKind], now: int,
            layout: Layout = DEFAULT_LAYOUT) -> Optional[Target]:
    px, py = pos
    cx, cy = layout.shop_center()
    # shop wins over any plot cell it overlaps
    if math.hypot(px-cx, py-cy) < layout.shop_radius:
        return Target("shop", "E: Enter shop", actions={Key.ACTION: "enter_shop"})
    idx = layout.cell_at(px, py)
    if idx is None or idx >= len(state.plots):
        return None
    return _plot_target(state, idx, seed, now)

def execute(state: FarmState, target: Optional[Target], key: Key, seed: Optional[CropKind], now: int) -> bool:
    if target is None: return False
    action = target.actions.get(Key(key))
    if action == "enter_shop":
        if state.view is ViewMode.SHOP: return False
        state.view = ViewMode.SHOP; return True
    if action == "till":    return till(state, target.plot_id)
    if action == "plant":   return plant(state, target.plot_id, seed, now)
    if action == "harvest": return harvest(state, target.plot_id, now)
    return False
