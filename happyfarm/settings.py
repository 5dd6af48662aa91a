"""Game-wide constants: window, layout, save location."""
from __future__ import annotations
import os, sys

def app_dir() -> str:
    # next to the executable when frozen, else wherever the game was started
    if getattr(sys, "frozen", False):
        return os.path.dirname(sys.executable)
    return os.getcwd()

SAVE_NAME = "happyfarm_save.json"
SAVE_FILE = os.path.join(app_dir(), SAVE_NAME)
SAVE_VERSION = 1
AUTOSAVE_DELAY = 0.5  # seconds of no changes before writing

WIDTH, HEIGHT = 1024, 640
FPS = 60
TILE = 64
PLAYER_SPEED = 240  # px per second
PLAYER_START = (400, 300)

# world layout (pixels)
SHOP_RECT = (450, 50, 200, 150)
SHOP_RADIUS = 150
PLOTS_ORIGIN = (3*TILE, 4*TILE)
PLOT_COLS, PLOT_ROWS = 4, 4

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
