import json

import pytest

from happyfarm.catalog import CropKind, ProductKind
from happyfarm.persistence import (SaveDebouncer, from_snapshot, load_game, save_game,
                                   to_snapshot)
from happyfarm.state import FarmState, Progression, ViewMode


def played_state():
    state = FarmState(money=345)
    state.plots[0].tilled = True
    state.plots[1].tilled = True
    state.plots[1].crop = CropKind.PUMPKIN
    state.plots[1].planted_at = 1_700_000_000_123
    state.inventory.seeds[CropKind.TOMATO] = 4
    state.inventory.crops[CropKind.CARROT] = 7
    state.inventory.products[ProductKind.TOMATO_SOUP] = 2
    state.progression = Progression(level=3, xp=120, gems=9, chests=[{"tier": "gold"}])
    return state


def test_round_trip_through_a_file(tmp_path):
    path = str(tmp_path / "save.json")
    state = played_state()
    assert save_game(state, path)
    assert load_game(path) == state


def test_snapshot_is_plain_json():
    data = to_snapshot(played_state())
    assert json.loads(json.dumps(data)) == data
    assert data["plots"][1] == {"id": 1, "tilled": True, "crop": "PUMPKIN",
                                "planted_at": 1_700_000_000_123}
    assert data["inventory"]["seeds"] == {"CARROT": 2, "TOMATO": 4, "PUMPKIN": 0}


def test_view_is_not_restored():
    state = played_state()
    state.view = ViewMode.SHOP
    assert from_snapshot(to_snapshot(state)).view is ViewMode.FARM


def test_missing_file_gives_new_farm(tmp_path):
    assert load_game(str(tmp_path / "nope.json")) == FarmState()


def test_corrupt_file_gives_new_farm(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_game(str(path)) == FarmState()


def test_deeply_nested_file_gives_new_farm(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("[" * 200_000, encoding="utf-8")
    assert load_game(str(path)) == FarmState()


@pytest.mark.parametrize("data", [None, [], "text", 12])
def test_non_object_snapshot_gives_new_farm(data):
    assert from_snapshot(data) == FarmState()


def test_each_field_defaults_on_its_own():
    data = to_snapshot(played_state())
    data["money"] = "lots"
    del data["inventory"]
    state = from_snapshot(data)
    assert state.money == 100
    assert state.inventory == FarmState().inventory
    assert state.plots[1].crop is CropKind.PUMPKIN
    assert state.progression.level == 3


def test_bad_values_inside_fields_are_defaulted():
    data = to_snapshot(played_state())
    data["plots"][0] = "garbage"
    data["plots"][1]["crop"] = "BANANA"
    data["plots"] = data["plots"][:10]
    data["inventory"]["crops"]["CARROT"] = -3
    data["inventory"]["seeds"]["TOMATO"] = True
    data["progression"]["level"] = 0
    data["progression"]["chests"] = "none"
    state = from_snapshot(data)
    assert len(state.plots) == 16
    assert [p.id for p in state.plots] == list(range(16))
    assert not state.plots[0].tilled
    assert state.plots[1].crop is None and state.plots[1].planted_at is None
    assert state.inventory.crops[CropKind.CARROT] == 0
    assert state.inventory.seeds[CropKind.TOMATO] == 0
    assert state.progression.level == 1
    assert state.progression.chests == []


def test_crop_without_timestamp_is_dropped():
    data = to_snapshot(played_state())
    data["plots"][1]["planted_at"] = None
    plot = from_snapshot(data).plots[1]
    assert plot.crop is None and plot.planted_at is None


def test_reads_web_build_save_keys():
    data = {
        "money": 55,
        "plots": [{"id": 0, "isLocked": False, "crop": "CARROT", "plantedAt": 1234,
                   "isWithered": False, "isPlowed": True}],
        "inventory": {"seeds": {"CARROT": 1, "TOMATO": 0, "PUMPKIN": 0},
                      "crops": {"CARROT": 0, "TOMATO": 2, "PUMPKIN": 0},
                      "products": {"PUMPKIN_PIE": 0, "TOMATO_SOUP": 1}},
        "view": "STORE",
        "playerRPG": {"luong": 7, "levelMain": 2, "expMain": 40, "chests": []},
    }
    state = from_snapshot(data)
    assert state.money == 55
    p = state.plots[0]
    assert (p.tilled, p.crop, p.planted_at) == (True, CropKind.CARROT, 1234)
    assert state.inventory.crops[CropKind.TOMATO] == 2
    assert state.progression == Progression(level=2, xp=40, gems=7, chests=[])


def test_save_failure_is_reported_not_raised(tmp_path):
    path = str(tmp_path / "missing_dir" / "save.json")
    assert not save_game(FarmState(), path)


def test_failed_write_keeps_old_save_and_no_temp_file(tmp_path):
    path = str(tmp_path / "save.json")
    assert save_game(played_state(), path)
    bad = FarmState()
    bad.progression.chests.append(object())
    assert not save_game(bad, path)
    assert not (tmp_path / "save.json.tmp").exists()
    assert load_game(path) == played_state()


@pytest.mark.parametrize("tilled", ["false", "true", 1, None])
def test_tilled_must_be_a_real_bool(tilled):
    state = from_snapshot({"plots": [{"id": 0, "tilled": tilled}]})
    assert state.plots[0].tilled is False


class TestSaveDebouncer:
    def setup_method(self):
        self.saves = 0
        self.deb = SaveDebouncer(self.save, delay=0.5)

    def save(self):
        self.saves += 1

    def test_no_change_no_save(self):
        self.deb.poke(0)
        assert not self.deb.update(10)
        assert self.saves == 0

    def test_saves_once_after_quiet_period(self):
        self.deb.poke(1)
        assert not self.deb.update(0.3)
        assert self.deb.update(0.3)
        assert not self.deb.update(5)
        assert self.saves == 1

    def test_newer_change_supersedes_pending_save(self):
        self.deb.poke(1)
        self.deb.update(0.4)
        self.deb.poke(2)
        assert not self.deb.update(0.4)
        assert self.saves == 0
        assert self.deb.update(0.2)
        assert self.saves == 1

    def test_steady_revision_does_not_restart_timer(self):
        self.deb.poke(1)
        self.deb.update(0.4)
        self.deb.poke(1)
        assert self.deb.update(0.1)

    def test_flush_writes_pending_save_now(self):
        assert not self.deb.flush()
        self.deb.poke(3)
        assert self.deb.pending
        assert self.deb.flush()
        assert not self.deb.pending
        assert self.saves == 1
