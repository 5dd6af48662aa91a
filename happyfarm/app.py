"""
Happy Farm: pygame client

Controls
  Move ............... WASD / Arrows
  Till / flatten ..... Space
  Plant / harvest .... E (also enters the shop when standing next to it)
  Seed ............... 1 Carrot, 2 Tomato, 3 Pumpkin, 0 none
  Kitchen ............ C
  Shop / kitchen ..... Up/Down select, Enter apply, Tab buy/sell, E or Esc back
  Save ............... F5 (autosaves after every change)
  Quit ............... Esc on the farm
"""
from __future__ import annotations
import logging, math, os, traceback
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame as pg

from .catalog import CropKind, ProductKind, CROPS, PRODUCTS
from .interaction import Key
from .kitchen import can_cook, missing_ingredients
from .ledger import can_afford, can_sell_crop, can_sell_product
from .persistence import SaveDebouncer, load_game, save_game
from .plots import Stage, growth_progress, plot_stage
from .progression import level_fraction
from .session import FarmSession
from .settings import (WIDTH, HEIGHT, FPS, TILE, PLAYER_SPEED, PLAYER_START, SHOP_RECT,
                       SAVE_FILE, AUTOSAVE_DELAY)
from .state import ViewMode

log = logging.getLogger("happyfarm.app")

# Colors
WHITE=(240,240,240); BLACK=(16,16,20); UI_BG=(26,26,30); UI_ACC=(196,196,210)
GRASS=(93,142,104); DIRT=(107,68,35); SHOP=(161,136,127)
YELLOW=(251,191,36); GREEN=(74,222,128); BLUE=(59,130,246); GRAY=(85,85,85)
DIM=(120,120,130)

SEED_KEYS = {pg.K_1: CropKind.CARROT, pg.K_2: CropKind.TOMATO, pg.K_3: CropKind.PUMPKIN, pg.K_0: None}

def draw_text(surf, text, pos, color=WHITE, font=None):
    if not text:
        return
    img = (font or FONT).render(str(text), True, color)
    surf.blit(img, pos)

@dataclass
class Player:
    x: float
    y: float
    facing: int = 1
    frame: int = 0
    moving: bool = False
    def rect(self) -> pg.Rect:
        return pg.Rect(int(self.x)-TILE//2+8, int(self.y)-TILE//2+8, TILE-16, TILE-16)

# ------------------------------- Shop rows ----------------------------------
# (text, enabled, apply) per row, rebuilt every frame
def shop_rows(s: FarmSession, selling: bool) -> List[Tuple[str, bool, Callable[[], bool]]]:
    st = s.state; inv = st.inventory; rows = []
    if not selling:
        for k in CropKind:
            c = CROPS[k]
            rows.append((f"{c.name} Seeds  (grows in {c.growth_ms//1000}s)  have {inv.seeds[k]}  -  ${c.seed_price}",
                         can_afford(st, k), lambda k=k: s.buy_seed(k)))
        return rows
    for k in CropKind:
        c = CROPS[k]
        rows.append((f"{c.name}  x{inv.crops[k]}  -  sell ${c.sell_price}",
                     can_sell_crop(st, k), lambda k=k: s.sell_crop(k)))
    for k in ProductKind:
        p = PRODUCTS[k]
        rows.append((f"{p.name}  x{inv.products[k]}  -  sell ${p.sell_price}",
                     can_sell_product(st, k), lambda k=k: s.sell_product(k)))
    return rows

def kitchen_rows(s: FarmSession) -> List[Tuple[str, bool, Callable[[], bool]]]:
    inv = s.state.inventory; rows = []
    for k in ProductKind:
        p = PRODUCTS[k]
        need = ", ".join(f"{n} {CROPS[c].name}" for c,n in p.recipe)
        miss = missing_ingredients(inv, k)
        extra = "  (missing " + ", ".join(f"{n} {CROPS[c].name}" for c,n in miss) + ")" if miss else ""
        rows.append((f"{p.name} <- {need}{extra}", can_cook(inv, k), lambda k=k: s.cook(k)))
    return rows

# ------------------------------- Game ---------------------------------------
class Game:
    def __init__(self, screen: pg.Surface, session: FarmSession, save_file: str = SAVE_FILE):
        self.screen = screen
        self.session = session
        self.save_file = save_file
        self.player = Player(*PLAYER_START)
        self.autosave = SaveDebouncer(self.save, AUTOSAVE_DELAY, session.revision)
        self.label: Optional[str] = None
        self.toast_msg=""; self.toast_timer=0.0
        self.menu_idx=0; self.selling=False
        self.running=True

    # ---------------- Utility ----------------
    def toast(self, msg: str, sec=2.0):
        self.toast_msg=msg; self.toast_timer=sec

    def save(self):
        if not save_game(self.session.state, self.save_file):
            self.toast("Save failed")

    @property
    def view(self) -> ViewMode:
        return self.session.state.view

    def pos(self) -> Tuple[float,float]:
        return self.player.x, self.player.y

    # --------------- Actions ---------------
    def act(self, key: Key):
        if not self.session.interact(self.pos(), key):
            t = self.session.target_at(self.pos())
            if t and key in t.actions: self.toast("Can't do that right now")

    def menu_rows(self):
        if self.view is ViewMode.SHOP: return shop_rows(self.session, self.selling)
        if self.view is ViewMode.KITCHEN: return kitchen_rows(self.session)
        return []

    def apply_row(self):
        rows = self.menu_rows()
        if not rows: return
        text, ok, fn = rows[self.menu_idx % len(rows)]
        if not fn():
            if self.view is ViewMode.KITCHEN: self.toast("Missing items")
            else: self.toast("Nothing to sell" if self.selling else "Not enough money")

    def open_view(self, mode: ViewMode):
        self.session.set_view(mode); self.menu_idx=0; self.selling=False

    # --------------- Update ---------------
    def move_player(self, dt: float):
        if self.view is not ViewMode.FARM:
            self.player.moving=False; return
        keys=pg.key.get_pressed()
        dx=(keys[pg.K_d] or keys[pg.K_RIGHT])-(keys[pg.K_a] or keys[pg.K_LEFT])
        dy=(keys[pg.K_s] or keys[pg.K_DOWN])-(keys[pg.K_w] or keys[pg.K_UP])
        mag=math.hypot(dx,dy) or 1
        self.player.x = max(0, min(WIDTH, self.player.x + (dx/mag)*PLAYER_SPEED*dt))
        self.player.y = max(0, min(HEIGHT, self.player.y + (dy/mag)*PLAYER_SPEED*dt))
        self.player.moving = bool(dx or dy)
        if dx: self.player.facing = 1 if dx>0 else -1
        self.player.frame = self.player.frame+1 if self.player.moving else 0

    def update(self, dt: float):
        self.label = self.session.label_at(self.pos()) if self.view is ViewMode.FARM else None
        self.autosave.poke(self.session.revision)
        self.autosave.update(dt)
        if self.toast_timer>0: self.toast_timer-=dt

    # --------------- Draw ---------------
    def draw_world(self):
        scr=self.screen; s=self.session; now=s.now()
        scr.fill(GRASS)
        for p in s.state.plots:
            x,y,w,h = s.layout.cell_rect(p.id)
            if p.tilled or p.crop:
                pg.draw.rect(scr, DIRT, (x+2,y+2,w-4,h-4), border_radius=4)
            else:
                pg.draw.rect(scr, WHITE, (x,y,w,h), 1)
            if p.crop:
                info=CROPS[p.crop]; prog=growth_progress(p, now)
                r=int((w/2)*(0.3+0.6*prog))
                pg.draw.circle(scr, info.color, (x+w//2, y+h//2), r)
                if plot_stage(p, now) is Stage.READY:
                    pg.draw.rect(scr, YELLOW, (x+2,y+2,w-4,h-4), 2, border_radius=4)
                    draw_text(scr, info.icon, (x+w//2-6, y+h//2-10), BLACK, BIG)
        sx,sy,sw,sh = SHOP_RECT
        pg.draw.rect(scr, SHOP, (sx,sy,sw,sh))
        draw_text(scr, "Shop", (sx+sw//2-22, sy+sh//2-10), WHITE, BIG)
        # player
        pr=self.player.rect()
        pg.draw.ellipse(scr, (40,60,45), (pr.x, pr.bottom-6, pr.w, 10))
        bob = 2 if self.player.moving and (self.player.frame//10)%2 else 0
        pg.draw.rect(scr, BLUE, pr.move(0,-bob), border_radius=6)
        eye_x = pr.centerx + 8*self.player.facing
        pg.draw.circle(scr, WHITE, (eye_x, pr.y+12-bob), 4)
        draw_text(scr, "Farmer", (pr.x, pr.y-22))

    def draw_hud(self):
        scr=self.screen; st=self.session.state; prog=st.progression
        hud=pg.Rect(10,10,200,90)
        pg.draw.rect(scr, UI_BG, hud); pg.draw.rect(scr, WHITE, hud, 2)
        draw_text(scr, f"Farmer (Lv.{prog.level})", (hud.x+10, hud.y+8))
        pg.draw.rect(scr, GRAY, (hud.x+10, hud.y+32, hud.w-20, 6))
        pg.draw.rect(scr, BLUE, (hud.x+10, hud.y+32, int((hud.w-20)*level_fraction(prog)), 6))
        draw_text(scr, f"Money: ${st.money}", (hud.x+10, hud.y+44), YELLOW)
        draw_text(scr, f"Gems: {prog.gems}", (hud.x+10, hud.y+66), GREEN)
        # seed selector
        bar=pg.Rect(10, 110, 3*70+10, 56)
        pg.draw.rect(scr, UI_BG, bar, border_radius=8)
        for i,k in enumerate(CropKind):
            r=pg.Rect(bar.x+5+i*70, bar.y+5, 64, 46)
            sel = self.session.selected_seed is k
            pg.draw.rect(scr, GREEN if sel else UI_ACC, r, 0 if sel else 2, border_radius=8)
            draw_text(scr, f"{i+1} {CROPS[k].name[:6]}", (r.x+4, r.y+4), BLACK if sel else WHITE)
            draw_text(scr, f"x{st.inventory.seeds[k]}", (r.x+4, r.y+24), BLACK if sel else WHITE)
        inv=st.inventory
        line=" ".join(f"{CROPS[k].name}:{inv.crops[k]}" for k in CropKind) + "  " + \
             " ".join(f"{PRODUCTS[k].name}:{inv.products[k]}" for k in ProductKind)
        pg.draw.rect(scr, UI_BG, (0, HEIGHT-36, WIDTH, 36))
        draw_text(scr, line, (12, HEIGHT-28))
        if self.label:
            img=FONT.render(self.label, True, WHITE)
            box=img.get_rect(center=(WIDTH//2, 90)).inflate(24,12)
            pg.draw.rect(scr, BLACK, box, border_radius=12); scr.blit(img, img.get_rect(center=box.center))
        if self.toast_timer>0 and self.toast_msg:
            draw_text(scr, self.toast_msg, (WIDTH//2-160, HEIGHT-70), YELLOW)

    def draw_menu(self, title: str, hint: str):
        scr=self.screen
        panel=pg.Rect(WIDTH//2-340, HEIGHT//2-170, 680, 320)
        pg.draw.rect(scr, UI_BG, panel, border_radius=12); pg.draw.rect(scr, UI_ACC, panel, 2, border_radius=12)
        draw_text(scr, title, (panel.x+16, panel.y+12), YELLOW, BIG)
        draw_text(scr, hint, (panel.x+16, panel.y+46), UI_ACC)
        draw_text(scr, f"Money: ${self.session.state.money}", (panel.right-160, panel.y+14), YELLOW)
        rows=self.menu_rows(); y=panel.y+84
        for i,(text,ok,_) in enumerate(rows):
            sel = i == self.menu_idx % max(1,len(rows))
            if sel: pg.draw.rect(scr, (50,50,60), (panel.x+10, y-4, panel.w-20, 28), border_radius=6)
            draw_text(scr, ("> " if sel else "  ")+text, (panel.x+16, y), WHITE if ok else DIM); y+=32

    def draw(self):
        self.draw_world()
        self.draw_hud()
        if self.view is ViewMode.SHOP:
            self.draw_menu("Seed Shop - " + ("Sell" if self.selling else "Buy"),
                           "Up/Down select, Enter apply, Tab buy/sell, E back to farm")
        elif self.view is ViewMode.KITCHEN:
            self.draw_menu("Kitchen", "Up/Down select, Enter cook, C back to farm")
        pg.display.flip()

    # --------------- Input ----------------
    def handle_event(self, ev):
        if ev.type==pg.QUIT:
            self.running=False; return
        if ev.type!=pg.KEYDOWN: return
        if ev.key==pg.K_F5: self.autosave.flush() or self.save(); self.toast("Saved."); return
        if self.view is ViewMode.FARM:
            if ev.key==pg.K_ESCAPE: self.running=False
            if ev.key==pg.K_e: self.act(Key.ACTION)
            if ev.key==pg.K_SPACE: self.act(Key.TILL)
            if ev.key==pg.K_c: self.open_view(ViewMode.KITCHEN)
            if ev.key in SEED_KEYS: self.session.set_selected_seed(SEED_KEYS[ev.key])
            return
        if ev.key in (pg.K_ESCAPE, pg.K_e) or (ev.key==pg.K_c and self.view is ViewMode.KITCHEN):
            self.open_view(ViewMode.FARM); return
        if ev.key in (pg.K_UP, pg.K_w): self.menu_idx-=1
        if ev.key in (pg.K_DOWN, pg.K_s): self.menu_idx+=1
        if ev.key==pg.K_TAB and self.view is ViewMode.SHOP:
            self.selling=not self.selling; self.menu_idx=0
        if ev.key in (pg.K_RETURN, pg.K_SPACE): self.apply_row()

# ------------------------------- Main ---------------------------------------
FONT: pg.font.Font = None
BIG: pg.font.Font = None

def main(save_file: str = SAVE_FILE, new_game: bool = False):
    global FONT, BIG
    pg.init()
    screen = pg.display.set_mode((WIDTH, HEIGHT))
    pg.display.set_caption("Happy Farm")
    clock = pg.time.Clock()
    FONT = pg.font.SysFont("consolas", 18)
    BIG = pg.font.SysFont("consolas", 24, bold=True)
    state = None if new_game else load_game(save_file)
    game = Game(screen, FarmSession(state), save_file)
    while game.running:
        dt = clock.tick(FPS)/1000.0
        for ev in pg.event.get(): game.handle_event(ev)
        game.move_player(dt)
        game.update(dt)
        game.draw()
    game.save()
    pg.quit()

def run(save_file: str = SAVE_FILE, new_game: bool = False):
    try:
        main(save_file, new_game)
    except Exception:
        # crash.log goes next to the save file
        log_path = os.path.join(os.path.dirname(os.path.abspath(save_file)), "crash.log")
        with open(log_path, "w", encoding="utf-8") as f:
            f.write(traceback.format_exc())
        log.critical("game crashed; traceback written to %s", log_path, exc_info=True)
        raise
