from happyfarm.progression import apply_xp, award, level_fraction, xp_to_next
from happyfarm.state import Progression


def test_thresholds_are_triangular():
    assert [xp_to_next(l) for l in (1, 2, 3, 4)] == [1000, 3000, 6000, 10000]


def test_rollover_across_one_level():
    assert apply_xp(1, 900, 250) == (2, 150)


def test_below_threshold_only_adds():
    assert apply_xp(3, 10, 200) == (3, 210)


def test_large_award_levels_up_several_times():
    # 1000 + 3000 + 6000 = 10000 to reach level 4
    assert apply_xp(1, 0, 10_500) == (4, 500)


def test_exact_threshold_levels_up():
    assert apply_xp(1, 0, 1000) == (2, 0)


def test_award_updates_stats_in_place():
    prog = Progression(level=1, xp=950)
    assert award(prog, 100) == 1
    assert (prog.level, prog.xp) == (2, 50)
    assert award(prog, 5) == 0
    assert prog.xp == 55


def test_level_fraction():
    assert level_fraction(Progression(level=1, xp=250)) == 0.25
    assert level_fraction(Progression(level=2, xp=0)) == 0.0
