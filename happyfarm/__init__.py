"""Happy Farm: a small real-time farming game and its simulation engine."""
from .catalog import CropKind, ProductKind, CROPS, PRODUCTS
from .interaction import Key, Layout, Target
from .persistence import SaveDebouncer, from_snapshot, load_game, save_game, to_snapshot
from .session import FarmSession
from .state import FarmState, FarmView, Inventory, Plot, Progression, ViewMode

__version__ = "0.1.0"
