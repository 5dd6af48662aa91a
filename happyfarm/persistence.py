"""JSON save/load of the farm aggregate, plus the autosave debouncer.

Loading never fails: every top-level field falls back to its starting value
on its own when it is missing or malformed, and an unreadable file gives a
fresh farm. Keys written by the original web build (``isPlowed``,
``plantedAt``, ``playerRPG``) are still understood.
"""
from __future__ import annotations
import json, logging, os
from typing import Any, Callable, Dict, List, Optional, Union

from .catalog import CropKind, ProductKind, GRID_SIZE, INITIAL_MONEY, INITIAL_GEMS
from .settings import SAVE_VERSION, AUTOSAVE_DELAY
from .state import FarmState, FarmView, Plot, Inventory, Progression, new_plots

log = logging.getLogger("happyfarm.persistence")

# ------------------------------- Encode -------------------------------------
def to_snapshot(state: Union[FarmState, FarmView]) -> Dict[str, Any]:
    inv = state.inventory; prog = state.progression
    return {
        "save_version": SAVE_VERSION,
        "money": state.money,
        "plots": [{"id": p.id, "tilled": p.tilled,
                   "crop": p.crop.value if p.crop else None,
                   "planted_at": p.planted_at} for p in state.plots],
        "inventory": {
            "seeds": {k.value: v for k,v in inv.seeds.items()},
            "crops": {k.value: v for k,v in inv.crops.items()},
            "products": {k.value: v for k,v in inv.products.items()},
        },
        "progression": {"level": prog.level, "xp": prog.xp, "gems": prog.gems,
                        "chests": list(prog.chests)},
    }

# ------------------------------- Decode -------------------------------------
def _int(v: Any, default: int, lo: int = 0) -> int:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return default
    if isinstance(v, float) and not v.is_integer():
        return default
    return int(v) if v >= lo else default

def _crop(v: Any) -> Optional[CropKind]:
    try: return CropKind(v)
    except ValueError: return None

def _plot(i: int, d: Any) -> Plot:
    if not isinstance(d, dict):
        return Plot(i)
    tilled = d.get("tilled", d.get("isPlowed", False))
    tilled = tilled if isinstance(tilled, bool) else False
    crop = _crop(d.get("crop"))
    at = d.get("planted_at", d.get("plantedAt"))
    at = _int(at, None) if at is not None else None
    if crop is None or at is None:
        crop, at = None, None
    return Plot(i, tilled=tilled, crop=crop, planted_at=at)

def _plots(raw: Any) -> List[Plot]:
    if not isinstance(raw, list):
        return new_plots()
    return [_plot(i, raw[i] if i < len(raw) else None) for i in range(GRID_SIZE)]

def _counts(raw: Any, enum, start: Dict) -> Dict:
    if not isinstance(raw, dict):
        return dict(start)
    return {k: _int(raw.get(k.value), 0) for k in enum}

def _inventory(raw: Any) -> Inventory:
    fresh = Inventory()
    if not isinstance(raw, dict):
        return fresh
    return Inventory(seeds=_counts(raw.get("seeds"), CropKind, fresh.seeds),
                     crops=_counts(raw.get("crops"), CropKind, fresh.crops),
                     products=_counts(raw.get("products"), ProductKind, fresh.products))

def _progression(raw: Any) -> Progression:
    if not isinstance(raw, dict):
        return Progression()
    chests = raw.get("chests", [])
    return Progression(level=_int(raw.get("level", raw.get("levelMain")), 1, lo=1),
                       xp=_int(raw.get("xp", raw.get("expMain")), 0),
                       gems=_int(raw.get("gems", raw.get("luong")), INITIAL_GEMS),
                       chests=list(chests) if isinstance(chests, list) else [])

def from_snapshot(data: Any) -> FarmState:
    if not isinstance(data, dict):
        log.warning("save data is not an object; starting a new farm")
        return FarmState()
    prog = data.get("progression", data.get("playerRPG"))
    return FarmState(money=_int(data.get("money"), INITIAL_MONEY),
                     plots=_plots(data.get("plots")),
                     inventory=_inventory(data.get("inventory")),
                     progression=_progression(prog))

# ------------------------------- Files --------------------------------------
def save_game(state: Union[FarmState, FarmView], path: str) -> bool:
    tmp = path + ".tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f: json.dump(to_snapshot(state), f)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError):
        log.error("could not write save file %s", path, exc_info=True)
        if os.path.exists(tmp):
            try: os.remove(tmp)
            except OSError: log.warning("could not remove %s", tmp)
        return False
    log.info("saved farm to %s", path)
    return True

def load_game(path: str) -> FarmState:
    if not os.path.exists(path):
        log.info("no save at %s; starting a new farm", path)
        return FarmState()
    try:
        with open(path, encoding="utf-8") as f: data = json.load(f)
    except (OSError, ValueError, RecursionError):
        log.error("could not read save file %s; starting a new farm", path, exc_info=True)
        return FarmState()
    state = from_snapshot(data)
    log.info("loaded farm from %s", path)
    return state

# ------------------------------- Autosave -----------------------------------
class SaveDebouncer:
    """Writes once the session revision has stopped changing for ``delay`` seconds.

    A newer change restarts the countdown, so at most one save is ever pending.
    Driven from the game loop; no threads.
    """
    def __init__(self, save: Callable[[], Any], delay: float = AUTOSAVE_DELAY, revision: int = 0):
        self.save = save; self.delay = delay
        self.seen = revision
        self.timer: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self.timer is not None

    def poke(self, revision: int):
        if revision != self.seen:
            self.seen = revision
            self.timer = self.delay

    def update(self, dt: float) -> bool:
        if self.timer is None: return False
        self.timer -= dt
        if self.timer > 0: return False
        self.timer = None
        self.save()
        return True

    def flush(self) -> bool:
        if self.timer is None: return False
        self.timer = None
        self.save()
        return True
