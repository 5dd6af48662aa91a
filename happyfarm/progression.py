"""Experience and level-ups. Thresholds grow with triangular numbers."""
from __future__ import annotations
from typing import Tuple

from .state import Progression

def xp_to_next(level: int) -> int:
    return level*(level+1)//2 * 1000

def apply_xp(level: int, xp: int, amount: int) -> Tuple[int,int]:
    xp += amount
    need = xp_to_next(level)
    while xp >= need:
        xp -= need; level += 1
        need = xp_to_next(level)
    return level, xp

def award(prog: Progression, amount: int) -> int:
    """Adds xp to the stats in place; returns how many levels were gained."""
    before = prog.level
    prog.level, prog.xp = apply_xp(prog.level, prog.xp, amount)
    return prog.level - before

def level_fraction(prog: Progression) -> float:
    return max(0.0, min(1.0, prog.xp / xp_to_next(prog.level)))
