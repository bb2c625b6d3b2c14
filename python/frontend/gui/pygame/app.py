"""Pygame GUI frontend, fully self-contained.

Includes main menu, difficulty selection, image puzzles, a win overlay
and the game history.  Image files dropped onto the window become new
puzzles.  No terminal interaction required.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

import pygame
from PIL import Image

from backend.config import Settings
from backend.engine.gameplay import Event, GamePlay, MoveTile, Shuffle
from backend.engine.gamestate import GameSession, is_ticking
from backend.errors import PersistenceError, UploadRejected
from backend.models.board import Difficulty, Direction
from backend.models.history import JsonHistoryStore
from backend.models.images import DEFAULT_IMAGE, JsonImageStore
from backend.services.imaging import process_file
from backend.services.recorder import GameRecorder
from frontend.artwork import available_images, display_name, load_square, slice_tiles
from frontend.formatting import format_time, time_ago
from frontend.gui.pygame.sounds import SoundBoard

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 520, 720
TILE_GAP = 4
MARGIN = 20
BOARD_TOP = 76
BOARD_MAX = WIN_W - 2 * MARGIN  # max board width/height in px
REF_SIZE = 56  # reference thumbnail side length in px

TICK_EVENT = pygame.USEREVENT + 1


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    HISTORY = "history"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def _to_surface(img: Image.Image) -> pygame.Surface:
    rgb = img.convert("RGB")
    return pygame.image.frombytes(rgb.tobytes(), rgb.size, "RGB")


def _tile_px(size: int) -> int:
    return (BOARD_MAX - (size + 1) * TILE_GAP) // size


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, settings: Settings, difficulty: Difficulty) -> None:
        self._settings = settings
        self._history = JsonHistoryStore(settings.history_path)
        self._images = JsonImageStore(settings.images_path)
        self._recorder = GameRecorder(self._history, settings.assets_dir)
        self._sel_difficulty = difficulty

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Slide Quest")
        self._clock = pygame.time.Clock()
        self._sounds = SoundBoard()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.MENU
        self._game: GamePlay | None = None
        self._unsubscribe = None
        self._hints = False
        self._status_msg = ""
        self._dirty = True

        self._tile_images: dict[int, pygame.Surface] = {}
        self._ref_image: pygame.Surface | None = None
        self._art_key: tuple[str, int] | None = None

        self._build_menu_btns()
        self._build_game_btns()
        self._build_overlay_btns()
        self._history_back = _Btn(
            (_cx(180), WIN_H - 64, 180, 46), "B A C K", self._f_btn_sm
        )

    # ── buttons ─────────────────────────────────────────────────────────────

    def _difficulty_row(self, y: int, bh: int) -> dict[Difficulty, _Btn]:
        bw, gap = 100, 8
        total_w = len(Difficulty) * bw + (len(Difficulty) - 1) * gap
        sx = _cx(total_w)
        return {
            d: _Btn((sx + i * (bw + gap), y, bw, bh), d.label, self._f_btn_sm)
            for i, d in enumerate(Difficulty)
        }

    def _build_menu_btns(self) -> None:
        self._menu_size_btns = self._difficulty_row(250, 46)

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 330, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._hist_btn = _Btn(
            (_cx(bw_lg), 394, bw_lg, 42), "H I S T O R Y", self._f_btn_sm
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 450, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )
        self._menu_all: list[_Btn] = [
            *self._menu_size_btns.values(),
            self._play_btn,
            self._hist_btn,
            self._quit_btn,
        ]

    def _build_game_btns(self) -> None:
        """In-game controls; their rows are placed below the board when drawn."""
        self._game_size_btns = self._difficulty_row(0, 34)

        bw, gap = 76, 6
        sx = _cx(6 * bw + 5 * gap)

        def _at(i: int, text: str, **colours: tuple) -> _Btn:
            return _Btn((sx + i * (bw + gap), 0, bw, 34), text, self._f_btn_sm, **colours)

        self._shuffle_btn = _at(0, "Shuffle", bg=COL_PINK, hover=(245, 210, 227), fg=COL_BASE)
        self._reset_btn = _at(1, "Reset")
        self._solve_btn = _at(2, "Solve", bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE)
        self._hint_btn = _at(3, "Hints", bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE)
        self._image_btn = _at(4, "Image")
        self._sound_btn = _at(5, "Sound")
        self._action_btns = [
            self._shuffle_btn,
            self._reset_btn,
            self._solve_btn,
            self._hint_btn,
            self._image_btn,
            self._sound_btn,
        ]

    def _build_overlay_btns(self) -> None:
        bw = 200
        self._win_again = _Btn(
            (_cx(bw), 330, bw, 48),
            "PLAY AGAIN",
            self._f_btn,
            bg=COL_GREEN,
            hover=(190, 240, 190),
            fg=COL_BASE,
        )
        self._win_menu = _Btn((_cx(bw), 390, bw, 42), "M E N U", self._f_btn_sm)

    # ── artwork ─────────────────────────────────────────────────────────────

    def _prepare_tile_images(self) -> None:
        """Slice the session's image into per-tile surfaces (cached per image/size)."""
        game = self._game
        assert game is not None
        key = (game.session.current_image, game.size)
        if key == self._art_key:
            return
        self._art_key = key
        self._tile_images = {}
        self._ref_image = None

        sz = game.size
        tpx = _tile_px(sz)
        img = load_square(game.session.current_image, self._settings, sz * tpx)
        if img is None:
            return

        self._ref_image = _to_surface(img.resize((REF_SIZE, REF_SIZE)))
        self._f_badge = pygame.font.SysFont("Helvetica", max(10, tpx // 5), bold=True)
        for val, piece in slice_tiles(img, sz).items():
            self._tile_images[val] = _to_surface(piece)

    def _cycle_image(self) -> None:
        game = self._game
        assert game is not None
        refs = available_images(self._settings, self._images)
        if not refs:
            self._status_msg = "No local images found."
            return
        current = game.session.current_image
        nxt = refs[(refs.index(current) + 1) % len(refs)] if current in refs else refs[0]
        game.select_image(nxt)
        self._status_msg = f"Image: {display_name(nxt)}"

    def _load_dropped(self, filename: str) -> None:
        """Turn a file dropped onto the window into the current puzzle image."""
        try:
            processed = process_file(
                Path(filename),
                self._settings.uploads_dir,
                size=self._settings.image_size,
                quality=self._settings.jpeg_quality,
            )
            record = self._images.save(processed)
        except UploadRejected as exc:
            self._status_msg = exc.message
            return
        except (OSError, PersistenceError):
            logger.exception("Image upload error")
            self._status_msg = "Failed to process image"
            return

        logger.info("Added custom image %s from %s", record.file_name, filename)
        if self._game is None:
            self._start_game(record.processed_path)
        else:
            self._game.select_image(record.processed_path)
        self._status_msg = f"Image: {record.original_name}"

    # ── layout helpers ──────────────────────────────────────────────────────

    def _tile_layout(self) -> tuple[int, int, int, int]:
        """Return (tile_px, origin_x, origin_y, total_px) for current game."""
        sz = self._game.size  # type: ignore[union-attr]
        tile_px = _tile_px(sz)
        total = sz * tile_px + (sz + 1) * TILE_GAP
        ox = _cx(total) + TILE_GAP
        oy = BOARD_TOP + TILE_GAP
        return tile_px, ox, oy, total

    def _tile_rect(self, pos: int, tpx: int, ox: int, oy: int) -> pygame.Rect:
        r, c = divmod(pos, self._game.size)  # type: ignore[union-attr]
        return pygame.Rect(
            ox + c * (tpx + TILE_GAP),
            oy + r * (tpx + TILE_GAP),
            tpx,
            tpx,
        )

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)

        _blit_center(
            self._surf,
            self._f_big.render("SLIDE  QUEST", True, COL_TEXT),
            80,
        )
        _blit_center(
            self._surf,
            self._f_body.render("Select difficulty", True, COL_SUBTEXT),
            210,
        )

        for d, btn in self._menu_size_btns.items():
            btn.bg = COL_GREEN if d == self._sel_difficulty else COL_SURFACE0
            btn.fg = COL_BASE if d == self._sel_difficulty else COL_TEXT
            btn.draw(self._surf)

        self._play_btn.draw(self._surf)
        self._hist_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                520,
            )
        _blit_center(
            self._surf,
            self._f_small.render("Drop an image file here to play with it", True, COL_OVERLAY0),
            WIN_H - 40,
        )

    def _draw_tile(self, val: int, rect: pygame.Rect, correct: bool, f_tile: pygame.font.Font) -> None:
        if val in self._tile_images:
            self._surf.blit(self._tile_images[val], rect.topleft)
            if self._hints:
                num_lbl = self._f_badge.render(str(val), True, (255, 255, 255))
                bw = num_lbl.get_width() + 8
                bh = num_lbl.get_height() + 4
                badge = pygame.Surface((bw, bh), pygame.SRCALPHA)
                badge.fill((0, 0, 0, 150))
                badge.blit(num_lbl, (4, 2))
                self._surf.blit(badge, (rect.x + 2, rect.y + 2))
            if correct and self._hints:
                pygame.draw.rect(self._surf, COL_GREEN, rect, width=3, border_radius=4)
            return

        col = COL_GREEN if correct else COL_BLUE
        pygame.draw.rect(self._surf, col, rect, border_radius=6)
        lbl = f_tile.render(str(val), True, COL_BASE)
        self._surf.blit(
            lbl,
            (
                rect.centerx - lbl.get_width() // 2,
                rect.centery - lbl.get_height() // 2,
            ),
        )

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        game = self._game
        assert game is not None
        session = game.session
        board = session.tiles
        tpx, ox, oy, total = self._tile_layout()
        f_tile = pygame.font.SysFont("Helvetica", max(14, tpx // 3), bold=True)

        # header
        _blit_center(
            self._surf,
            self._f_title.render(
                f"Slide Quest  {session.difficulty.label}", True, COL_TEXT
            ),
            14,
        )
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Moves: {session.moves}    "
                f"Time: {format_time(game.elapsed_seconds())}",
                True,
                COL_PINK,
            ),
            44,
        )

        # board bg
        pygame.draw.rect(
            self._surf,
            COL_MANTLE,
            pygame.Rect(_cx(total), BOARD_TOP, total, total),
            border_radius=10,
        )

        # tiles
        for pos, tile in board.by_position().items():
            if tile.is_empty:
                continue
            rect = self._tile_rect(pos, tpx, ox, oy)
            self._draw_tile(tile.id, rect, board.is_tile_correct(pos), f_tile)

        # reference image thumbnail (top-right)
        if self._ref_image is not None:
            rx = WIN_W - REF_SIZE - 8
            ry = 8
            pygame.draw.rect(
                self._surf, COL_SURFACE1,
                pygame.Rect(rx - 2, ry - 2, REF_SIZE + 4, REF_SIZE + 4),
                border_radius=6,
            )
            self._surf.blit(self._ref_image, (rx, ry))

        # control rows
        row_y = BOARD_TOP + total + 12
        for d, btn in self._game_size_btns.items():
            btn.rect.y = row_y
            btn.bg = COL_GREEN if d == session.difficulty else COL_SURFACE0
            btn.fg = COL_BASE if d == session.difficulty else COL_TEXT
            btn.draw(self._surf)

        self._hint_btn.text = "Hints on" if self._hints else "Hints"
        self._sound_btn.text = "Sound on" if self._sounds.enabled else "Sound off"
        row_y += 44
        for btn in self._action_btns:
            btn.rect.y = row_y
            btn.draw(self._surf)

        footer_y = row_y + 46
        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                footer_y,
            )
            footer_y += 20
        elif not session.is_playing and not session.is_won:
            _blit_center(
                self._surf,
                self._f_small.render("Press Shuffle to start", True, COL_SUBTEXT),
                footer_y,
            )
            footer_y += 20

        _blit_center(
            self._surf,
            self._f_small.render(
                "Arrows / WASD  move     X  shuffle     R  reset     Esc  menu",
                True,
                COL_OVERLAY0,
            ),
            footer_y,
        )

        if session.is_won:
            self._draw_win_overlay(total)

    def _draw_win_overlay(self, total: int) -> None:
        game = self._game
        assert game is not None
        session = game.session

        veil = pygame.Surface((total, total), pygame.SRCALPHA)
        veil.fill((17, 17, 27, 200))
        self._surf.blit(veil, (_cx(total), BOARD_TOP))

        _blit_center(
            self._surf,
            self._f_big.render("★  S O L V E D  ★", True, COL_GREEN),
            150,
        )
        if session.start_time is None:
            lines = [("Auto-solved", COL_SUBTEXT)]
        else:
            lines = [
                (f"Moves:  {session.moves}", COL_YELLOW),
                (f"Time:   {format_time(game.elapsed_seconds())}", COL_YELLOW),
            ]
        y = 220
        for txt, col in lines:
            _blit_center(self._surf, self._f_title.render(txt, True, col), y)
            y += 36

        self._win_again.draw(self._surf)
        self._win_menu.draw(self._surf)

    def _draw_history(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(
            self._surf,
            self._f_big.render("RECENT  GAMES", True, COL_TEXT),
            24,
        )

        y = 100
        try:
            records = self._history.list(self._settings.history_limit)
        except PersistenceError as exc:
            logger.warning("Could not load history: %s", exc)
            _blit_center(
                self._surf,
                self._f_body.render("Could not load the game history.", True, COL_RED),
                y + 30,
            )
            records = []
        else:
            if not records:
                _blit_center(
                    self._surf,
                    self._f_body.render("No games played yet.", True, COL_OVERLAY0),
                    y + 30,
                )

        for i, rec in enumerate(records, 1):
            head = f"{i:>2}.  {rec.difficulty}   {rec.moves} moves   {format_time(rec.time_elapsed)}"
            self._surf.blit(self._f_btn_sm.render(head, True, COL_TEXT), (50, y))
            sub = f"{rec.image_name}  ·  {time_ago(rec.completed_at)}"
            self._surf.blit(self._f_small.render(sub, True, COL_SUBTEXT), (80, y + 20))
            y += 50

        self._history_back.draw(self._surf)

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for d, b in self._menu_size_btns.items():
                if b.hit(ev.pos):
                    self._sel_difficulty = d
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._hist_btn.hit(ev.pos):
                self._screen = _Screen.HISTORY
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    _DIRS = {
        pygame.K_UP: Direction.UP,
        pygame.K_w: Direction.UP,
        pygame.K_DOWN: Direction.DOWN,
        pygame.K_s: Direction.DOWN,
        pygame.K_LEFT: Direction.LEFT,
        pygame.K_a: Direction.LEFT,
        pygame.K_RIGHT: Direction.RIGHT,
        pygame.K_d: Direction.RIGHT,
    }

    def _click_game(self, pos: tuple[int, int]) -> None:
        game = self._game
        assert game is not None

        if game.is_won:
            if self._win_again.hit(pos):
                game.shuffle()
                return
            if self._win_menu.hit(pos):
                self._screen = _Screen.MENU
                return

        for d, btn in self._game_size_btns.items():
            if btn.hit(pos):
                game.set_difficulty(d)
                self._sel_difficulty = d
                return

        if self._shuffle_btn.hit(pos):
            game.shuffle()
        elif self._reset_btn.hit(pos):
            game.reset()
        elif self._solve_btn.hit(pos):
            game.solve()
        elif self._hint_btn.hit(pos):
            self._hints = not self._hints
        elif self._image_btn.hit(pos):
            self._cycle_image()
        elif self._sound_btn.hit(pos):
            self._sounds.toggle()
        else:
            tpx, ox, oy, _ = self._tile_layout()
            for p, tile in game.session.tiles.by_position().items():
                if not tile.is_empty and self._tile_rect(p, tpx, ox, oy).collidepoint(pos):
                    game.move_tile(tile.id)
                    return

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        game = self._game
        assert game is not None
        if ev.type == pygame.MOUSEMOTION:
            for btn in (*self._game_size_btns.values(), *self._action_btns):
                btn.motion(ev.pos)
            self._win_again.motion(ev.pos)
            self._win_menu.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self._status_msg = ""
            self._click_game(ev.pos)
        elif ev.type == pygame.KEYDOWN:
            if ev.key in self._DIRS:
                game.move(self._DIRS[ev.key])
                self._status_msg = ""
            elif ev.key == pygame.K_x:
                game.shuffle()
            elif ev.key == pygame.K_r:
                game.reset()
            elif ev.key == pygame.K_v:
                game.solve()
            elif ev.key == pygame.K_h:
                self._hints = not self._hints
            elif ev.key == pygame.K_i:
                self._cycle_image()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._screen = _Screen.MENU
        return True

    def _ev_history(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._history_back.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._history_back.hit(ev.pos):
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_m):
                self._screen = _Screen.MENU
        return True

    # ── game state ──────────────────────────────────────────────────────────

    def _on_change(self, old: GameSession, new: GameSession, event: Event) -> None:
        """Session subscriber: clock timer, sounds, saving and artwork."""
        if is_ticking(new) and not is_ticking(old):
            pygame.time.set_timer(TICK_EVENT, int(self._settings.tick_interval * 1000))
        elif is_ticking(old) and not is_ticking(new):
            pygame.time.set_timer(TICK_EVENT, 0)

        if new.is_won and not old.is_won:
            self._sounds.play("win")
            self._recorder.record(new)
        elif isinstance(event, MoveTile):
            self._sounds.play("move")
        elif isinstance(event, Shuffle):
            self._sounds.play("shuffle")

        if (new.current_image, new.grid_size) != (old.current_image, old.grid_size):
            self._prepare_tile_images()

    def _start_game(self, image: str | None = None) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        pygame.time.set_timer(TICK_EVENT, 0)

        if image is None:
            refs = available_images(self._settings, self._images)
            image = refs[0] if refs else DEFAULT_IMAGE
        self._game = GamePlay(self._sel_difficulty, image)
        self._unsubscribe = self._game.subscribe(self._on_change)
        self._status_msg = ""
        self._prepare_tile_images()
        self._screen = _Screen.PLAYING

    def _collect_notices(self) -> None:
        for notice in self._recorder.drain_notices():
            self._status_msg = notice.message
            self._dirty = True

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
            _Screen.HISTORY: self._ev_history,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
            _Screen.HISTORY: self._draw_history,
        }

        running = True
        try:
            while running:
                for ev in pygame.event.get():
                    self._dirty = True
                    if ev.type == pygame.QUIT:
                        running = False
                        break
                    if ev.type == pygame.DROPFILE:
                        self._load_dropped(ev.file)
                        continue
                    if ev.type == TICK_EVENT:
                        continue
                    handler = _dispatch.get(self._screen)
                    if handler and not handler(ev):
                        running = False
                        break

                self._collect_notices()
                if self._dirty:
                    _draw[self._screen]()
                    pygame.display.flip()
                    self._dirty = False
                self._clock.tick(30)
        finally:
            pygame.time.set_timer(TICK_EVENT, 0)
            self._recorder.close()
            pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(settings: Settings, difficulty: Difficulty | None = None) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    app = PygameApp(settings, difficulty or settings.default_difficulty)
    app.run_loop()
