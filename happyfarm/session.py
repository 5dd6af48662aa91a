"""The one object the client talks to.

``FarmSession`` owns the aggregate and exposes only the game operations. Each
returns True if it changed something; a refused action is a plain False and
the farm stays as it was. ``revision`` goes up on every applied change, which
is what the autosave watches. ``state`` hands out a frozen copy; the only way
to change the farm is through the methods below.
"""
from __future__ import annotations
import logging, time
from typing import Callable, Optional, Tuple

from . import kitchen, ledger, plots
from .catalog import CropKind, ProductKind
from .interaction import DEFAULT_LAYOUT, Key, Layout, Target, execute, resolve
from .state import FarmState, FarmView, ViewMode, view_of

log = logging.getLogger("happyfarm.session")

def wall_clock_ms() -> int:
    return int(time.time()*1000)

class FarmSession:
    def __init__(self, state: Optional[FarmState] = None, clock: Callable[[], int] = wall_clock_ms,
                 layout: Layout = DEFAULT_LAYOUT):
        self._state = state if state is not None else FarmState()
        self.clock = clock
        self.layout = layout
        self.selected_seed: Optional[CropKind] = CropKind.CARROT
        self.revision = 0

    @property
    def state(self) -> FarmView:
        return view_of(self._state)

    def now(self) -> int:
        return int(self.clock())

    def _applied(self, ok: bool, what: str) -> bool:
        if ok:
            self.revision += 1
        else:
            log.debug("%s refused", what)
        return ok

    # --------------- Plots ---------------
    def till(self, plot_id: int) -> bool:
        return self._applied(plots.till(self._state, plot_id), f"till {plot_id}")

    def plant(self, plot_id: int, kind: Optional[CropKind] = None) -> bool:
        kind = kind if kind is not None else self.selected_seed
        return self._applied(plots.plant(self._state, plot_id, kind, self.now()), f"plant {plot_id}")

    def harvest(self, plot_id: int) -> bool:
        return self._applied(plots.harvest(self._state, plot_id, self.now()), f"harvest {plot_id}")

    def progress(self, plot_id: int) -> float:
        p = self._state.plot(plot_id)
        return plots.growth_progress(p, self.now()) if p is not None else 0.0

    # --------------- Shop / kitchen ---------------
    def buy_seed(self, kind: CropKind) -> bool:
        return self._applied(ledger.buy_seed(self._state, kind), f"buy {kind}")

    def sell_crop(self, kind: CropKind) -> bool:
        return self._applied(ledger.sell_crop(self._state, kind), f"sell {kind}")

    def sell_product(self, kind: ProductKind) -> bool:
        return self._applied(ledger.sell_product(self._state, kind), f"sell {kind}")

    def cook(self, kind: ProductKind) -> bool:
        return self._applied(kitchen.cook(self._state, kind), f"cook {kind}")

    # --------------- View / selection ---------------
    def set_view(self, mode: ViewMode) -> bool:
        mode = ViewMode(mode)
        if self._state.view is mode:
            return False
        self._state.view = mode
        return self._applied(True, "set view")

    def set_selected_seed(self, kind: Optional[CropKind]):
        self.selected_seed = CropKind(kind) if kind is not None else None

    # --------------- Interaction ---------------
    def target_at(self, pos: Tuple[float,float]) -> Optional[Target]:
        return resolve(self._state, pos, self.selected_seed, self.now(), self.layout)

    def label_at(self, pos: Tuple[float,float]) -> Optional[str]:
        t = self.target_at(pos)
        return t.label if t else None

    def interact(self, pos: Tuple[float,float], key: Key) -> bool:
        if self._state.view is not ViewMode.FARM:
            return False
        now = self.now()
        t = resolve(self._state, pos, self.selected_seed, now, self.layout)
        return self._applied(execute(self._state, t, key, self.selected_seed, now), f"interact {key}")
