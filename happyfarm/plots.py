"""Plot lifecycle: till, plant, grow (derived from the planting time), harvest.

Growth is never stored. Progress is recomputed from ``planted_at`` and the
caller's clock, so a restored save keeps maturing while the game is closed.
Every operation returns True when applied and leaves the state untouched
otherwise.
"""
from __future__ import annotations
import logging
from enum import Enum

from .catalog import CropKind, CROPS, XP_PLANT, XP_HARVEST
from .progression import award
from .state import FarmState, Plot

log = logging.getLogger("happyfarm.plots")

class Stage(str, Enum):
    EMPTY_UNTILLED = "empty_untilled"
    EMPTY_TILLED = "empty_tilled"
    GROWING = "growing"
    READY = "ready"

def growth_progress(plot: Plot, now: int) -> float:
    if plot.crop is None or plot.planted_at is None:
        return 0.0
    need = CROPS[plot.crop].growth_ms
    return max(0.0, min(1.0, (now - plot.planted_at) / need))

def is_ready(plot: Plot, now: int) -> bool:
    return plot.crop is not None and growth_progress(plot, now) >= 1.0

def time_left_ms(plot: Plot, now: int) -> int:
    if plot.crop is None or plot.planted_at is None:
        return 0
    return max(0, plot.planted_at + CROPS[plot.crop].growth_ms - now)

def plot_stage(plot: Plot, now: int) -> Stage:
    if plot.crop is None:
        return Stage.EMPTY_TILLED if plot.tilled else Stage.EMPTY_UNTILLED
    return Stage.READY if is_ready(plot, now) else Stage.GROWING

def till(state: FarmState, plot_id: int) -> bool:
    """Flip the tilled flag of an empty plot (till or flatten)."""
    p = state.plot(plot_id)
    if p is None or not p.empty():
        return False
    p.tilled = not p.tilled
    return True

def plant(state: FarmState, plot_id: int, kind: CropKind, now: int) -> bool:
    p = state.plot(plot_id)
    if p is None or kind is None: return False
    kind = CropKind(kind)
    seeds = state.inventory.seeds
    if not p.tilled or not p.empty() or seeds[kind] < 1:
        return False
    seeds[kind] -= 1
    p.crop = kind; p.planted_at = int(now)
    award(state.progression, XP_PLANT)
    log.debug("planted %s on plot %d", kind.name, plot_id)
    return True

def harvest(state: FarmState, plot_id: int, now: int) -> bool:
    p = state.plot(plot_id)
    if p is None or not is_ready(p, now):
        return False
    kind = p.crop
    state.inventory.crops[kind] += 1
    p.crop = None; p.planted_at = None; p.tilled = False
    award(state.progression, XP_HARVEST)
    log.debug("harvested %s from plot %d", kind.name, plot_id)
    return True
