"""Pygame UI shell for Plandl, the daily aircraft guessing game.

Screens:
- Main menu
- Today's puzzle (progressive image reveal + cascading selectors)
- How to play
- Load failure (fatal for the session)

Deterministic selection/scoring/state lives in plandl/* (core modules); this
module only draws snapshots and forwards input.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pygame

from .catalog import CatalogError, load_catalog, manufacturers, models_for, versions_for
from .clock import Clock, RealClock
from .persistence import default_state_path, open_store
from .results import format_countdown, share_text, time_until_next_puzzle
from .rounds import DailyGame, GameSnapshot, GameStateError, Phase, StateStore, build_daily_game

CATALOG_PATH_ENV = "PLANDL_CATALOG_PATH"

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

FIELDS = ("manufacturer", "model", "version")
FIELD_LABELS = {"manufacturer": "Manufacturer", "model": "Model", "version": "Version"}

_BG = (3, 9, 78)
_PANEL_BG = (8, 18, 104)
_BORDER = (226, 236, 255)
_TEXT = (238, 245, 255)
_MUTED = (186, 200, 224)
_GOOD = (64, 170, 96)
_BAD = (196, 64, 64)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


def default_catalog_path() -> Path:
    explicit = os.environ.get(CATALOG_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path("planes.json")


class App:
    def __init__(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        self._surface = surface
        self._font = font
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


def _fit_label(font: pygame.font.Font, label: str, max_width: int) -> str:
    if max_width <= 0:
        return ""
    if font.size(label)[0] <= max_width:
        return label
    clipped = label
    while clipped and font.size(f"{clipped}...")[0] > max_width:
        clipped = clipped[:-1]
    return f"{clipped}..." if clipped else "..."


class MessageScreen:
    """Static lines of text; Esc/Backspace goes back (or quits when fatal)."""

    def __init__(self, app: App, title: str, lines: list[str], *, fatal: bool = False) -> None:
        self._app = app
        self._title = title
        self._lines = lines
        self._fatal = fatal
        self._small_font = pygame.font.Font(None, 26)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN):
            if self._fatal:
                self._app.quit()
            else:
                self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        surface.fill((10, 10, 14))
        title = self._app.font.render(self._title, True, (235, 235, 245))
        surface.blit(title, (40, 40))
        y = 100
        for line in self._lines:
            txt = self._small_font.render(line, True, (200, 200, 210))
            surface.blit(txt, (40, y))
            y += 28
        hint = "Press Esc to quit." if self._fatal else "Press Esc to go back."
        foot = self._small_font.render(hint, True, (140, 140, 150))
        surface.blit(foot, (40, surface.get_height() - 50))


class MenuScreen:
    def __init__(self, app: App, title: str, items: list[MenuItem], *, is_root: bool = False) -> None:
        self._app = app
        self._title = title
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 32)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._activate()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._back()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def _activate(self) -> None:
        if not self._items:
            return
        self._items[self._selected].action()

    def _back(self) -> None:
        if self._is_root:
            self._app.quit()
        else:
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        w, h = surface.get_size()
        header_bg = (18, 30, 118)
        active_bg = (244, 248, 255)
        active_text = (14, 26, 74)

        surface.fill(_BG)

        frame_margin = max(10, min(26, w // 34))
        frame = pygame.Rect(
            frame_margin,
            frame_margin,
            max(260, w - frame_margin * 2),
            max(220, h - frame_margin * 2),
        )
        pygame.draw.rect(surface, _PANEL_BG, frame)
        pygame.draw.rect(surface, _BORDER, frame, 2)

        header_h = max(34, min(52, h // 8))
        header = pygame.Rect(frame.x + 2, frame.y + 2, frame.w - 4, header_h)
        pygame.draw.rect(surface, header_bg, header)
        pygame.draw.line(surface, _BORDER, (header.x, header.bottom), (header.right, header.bottom), 1)

        title = self._title_font.render(self._title, True, _TEXT)
        surface.blit(title, title.get_rect(center=(frame.centerx, header.centery)))

        row_h = 40
        gap = 8
        total_h = row_h * len(self._items) + gap * max(0, len(self._items) - 1)
        y = header.bottom + max(24, (frame.bottom - header.bottom - total_h) // 2)
        for idx, item in enumerate(self._items):
            row = pygame.Rect(frame.x + frame.w // 4, y, frame.w // 2, row_h)
            selected = idx == self._selected
            if selected:
                pygame.draw.rect(surface, active_bg, row)
                pygame.draw.rect(surface, (120, 142, 196), row, 2)
            else:
                pygame.draw.rect(surface, (9, 20, 106), row)
                pygame.draw.rect(surface, (62, 84, 152), row, 1)
            color = active_text if selected else _TEXT
            label = _fit_label(self._item_font, item.label, row.w - 20)
            text = self._item_font.render(label, True, color)
            surface.blit(text, (row.x + 10, row.y + (row.h - text.get_height()) // 2))
            y += row_h + gap

        footer = "Up/Down: Move  |  Enter: Select  |  Esc: Back"
        foot = self._hint_font.render(footer, True, _MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(frame.centerx, frame.bottom - 10)))


def background_layout(
    view: tuple[int, int],
    image: tuple[int, int],
    *,
    scale_pct: float,
    offset_x: float,
    offset_y: float,
) -> tuple[int, int, int, int]:
    """Place an image like CSS ``background-size: N%`` + ``background-position: X% Y%``.

    Returns (width, height, left, top) of the scaled image relative to the view.
    """

    vw, vh = view
    iw, ih = image
    w = max(1, int(round(vw * scale_pct / 100.0)))
    h = max(1, int(round(ih * w / max(1, iw))))
    left = int(round((vw - w) * offset_x / 100.0))
    top = int(round((vh - h) * offset_y / 100.0))
    return w, h, left, top


def _blur(surface: pygame.Surface, radius_px: int) -> pygame.Surface:
    if radius_px <= 0:
        return surface
    w, h = surface.get_size()
    factor = 2 * radius_px + 1
    small = pygame.transform.smoothscale(surface, (max(1, w // factor), max(1, h // factor)))
    return pygame.transform.smoothscale(small, (w, h))


def _load_image(path: Path) -> pygame.Surface | None:
    try:
        raw = pygame.image.load(str(path))
    except (pygame.error, FileNotFoundError, OSError):
        return None
    # smoothscale needs 24/32-bit pixels; palette images are normalised here.
    surf = pygame.Surface(raw.get_size(), pygame.SRCALPHA)
    surf.blit(raw, (0, 0))
    return surf


def _placeholder_image() -> pygame.Surface:
    surf = pygame.Surface((640, 360), pygame.SRCALPHA)
    surf.fill((40, 46, 70))
    for x in range(0, 640, 40):
        pygame.draw.line(surf, (60, 68, 98), (x, 0), (x, 360), 1)
    for y in range(0, 360, 40):
        pygame.draw.line(surf, (60, 68, 98), (0, y), (640, y), 1)
    return surf


class DailyGameScreen:
    def __init__(self, app: App, *, game: DailyGame, clock: Clock, image_root: Path) -> None:
        self._app = app
        self._game = game
        self._clock = clock

        self._selection: dict[str, str] = {f: "" for f in FIELDS}
        self._focus = 0
        self._status = ""

        self._small_font = pygame.font.Font(None, 24)
        self._mid_font = pygame.font.Font(None, 30)
        self._big_font = pygame.font.Font(None, 48)

        image = _load_image(image_root / game.answer.aircraft.image)
        self._image = image if image is not None else _placeholder_image()
        self._scaled_cache: dict[tuple[int, int, int, int], pygame.Surface] = {}

    # ----------------------------------------------------------------- input

    def options_for(self, field_name: str) -> list[str]:
        catalog = self._game.catalog
        if field_name == "manufacturer":
            return manufacturers(catalog)
        if field_name == "model":
            return models_for(catalog, self._selection["manufacturer"])
        return versions_for(catalog, self._selection["manufacturer"], self._selection["model"])

    @property
    def selection(self) -> dict[str, str]:
        return dict(self._selection)

    def can_submit(self) -> bool:
        return all(self._selection[f] for f in FIELDS)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._app.pop()
            return

        phase = self._game.state.phase
        if phase is Phase.PLAYING:
            if key in (pygame.K_TAB, pygame.K_RIGHT):
                self._move_focus(1)
            elif key == pygame.K_LEFT:
                self._move_focus(-1)
            elif key in (pygame.K_UP, pygame.K_w):
                self._cycle(-1)
            elif key in (pygame.K_DOWN, pygame.K_s):
                self._cycle(1)
            elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self._submit()
        elif phase is Phase.ROUND_RESOLVED:
            if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                self._game.advance()
                self._clear_selection()
        elif key == pygame.K_c:
            self._copy_share_text()

    def _enabled_fields(self) -> int:
        # Model unlocks after a manufacturer, version after a model.
        if not self._selection["manufacturer"]:
            return 1
        if not self._selection["model"]:
            return 2
        return 3

    def _move_focus(self, delta: int) -> None:
        enabled = self._enabled_fields()
        self._focus = (self._focus + delta) % enabled

    def _cycle(self, delta: int) -> None:
        field_name = FIELDS[self._focus]
        options = self.options_for(field_name)
        if not options:
            return
        current = self._selection[field_name]
        if current in options:
            idx = (options.index(current) + delta) % len(options)
        else:
            idx = 0 if delta > 0 else len(options) - 1
        self._selection[field_name] = options[idx]
        # Changing a parent invalidates its dependents.
        for dependent in FIELDS[self._focus + 1 :]:
            self._selection[dependent] = ""

    def _submit(self) -> None:
        if not self.can_submit():
            return
        try:
            self._game.submit_guess(
                self._selection["manufacturer"],
                self._selection["model"],
                self._selection["version"],
            )
        except GameStateError as exc:
            self._status = str(exc)

    def _clear_selection(self) -> None:
        self._selection = {f: "" for f in FIELDS}
        self._focus = 0
        self._status = ""

    def _copy_share_text(self) -> None:
        text = share_text(self._game.state)
        try:
            if not pygame.scrap.get_init():
                pygame.scrap.init()
            pygame.scrap.put_text(text)
        except (pygame.error, AttributeError):
            self._status = "Clipboard unavailable."
            return
        self._status = "Results copied to clipboard!"

    # ---------------------------------------------------------------- render

    def render(self, surface: pygame.Surface) -> None:
        snap = self._game.snapshot()
        surface.fill(_BG)

        self._render_header(surface, snap)
        view = pygame.Rect(30, 70, 560, 315)
        self._render_image(surface, view, snap)

        panel = pygame.Rect(view.right + 20, view.y, surface.get_width() - view.right - 50, view.h)
        pygame.draw.rect(surface, _PANEL_BG, panel)
        pygame.draw.rect(surface, _BORDER, panel, 1)

        if snap.phase is Phase.PLAYING:
            self._render_selectors(surface, panel)
        elif snap.phase is Phase.ROUND_RESOLVED:
            self._render_round_result(surface, panel, snap)
        else:
            self._render_game_over(surface, panel, snap)

        if self._status:
            st = self._small_font.render(self._status, True, _MUTED)
            surface.blit(st, (30, view.bottom + 12))

        remaining = format_countdown(time_until_next_puzzle(self._clock.now()))
        cd = self._small_font.render(f"Next puzzle in {remaining}", True, _MUTED)
        surface.blit(cd, cd.get_rect(bottomright=(surface.get_width() - 30, surface.get_height() - 14)))

    def _render_header(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        title = self._big_font.render("Plandl", True, _TEXT)
        surface.blit(title, (30, 18))
        info = f"Round {snap.round}/5   Multiplier x{snap.multiplier}   Score {snap.score}"
        txt = self._mid_font.render(info, True, _MUTED)
        surface.blit(txt, txt.get_rect(topright=(surface.get_width() - 30, 28)))

    def _scaled_image(self, view: pygame.Rect, snap: GameSnapshot) -> tuple[pygame.Surface, int, int]:
        w, h, left, top = background_layout(
            view.size,
            self._image.get_size(),
            scale_pct=snap.reveal.scale_pct,
            offset_x=snap.offset_x,
            offset_y=snap.offset_y,
        )
        key = (w, h, snap.reveal.scale_pct, snap.reveal.blur_px)
        scaled = self._scaled_cache.get(key)
        if scaled is None:
            scaled = _blur(pygame.transform.smoothscale(self._image, (w, h)), snap.reveal.blur_px)
            self._scaled_cache = {key: scaled}
        return scaled, left, top

    def _render_image(self, surface: pygame.Surface, view: pygame.Rect, snap: GameSnapshot) -> None:
        scaled, left, top = self._scaled_image(view, snap)
        prev_clip = surface.get_clip()
        surface.set_clip(view)
        surface.fill((0, 0, 0), view)
        surface.blit(scaled, (view.x + left, view.y + top))
        surface.set_clip(prev_clip)
        pygame.draw.rect(surface, _BORDER, view, 2)

    def _render_selectors(self, surface: pygame.Surface, panel: pygame.Rect) -> None:
        enabled = self._enabled_fields()
        y = panel.y + 14
        for idx, field_name in enumerate(FIELDS):
            label = self._small_font.render(FIELD_LABELS[field_name], True, _MUTED)
            surface.blit(label, (panel.x + 12, y))
            y += 22
            box = pygame.Rect(panel.x + 12, y, panel.w - 24, 36)
            active = idx < enabled
            focused = active and idx == self._focus
            pygame.draw.rect(surface, (244, 248, 255) if focused else (9, 20, 106), box)
            pygame.draw.rect(surface, (120, 142, 196) if active else (50, 60, 110), box, 2)
            value = self._selection[field_name] or f"Select {field_name}..."
            color = (14, 26, 74) if focused else (_TEXT if active else (110, 120, 150))
            text = self._mid_font.render(_fit_label(self._mid_font, value, box.w - 16), True, color)
            surface.blit(text, (box.x + 8, box.y + (box.h - text.get_height()) // 2))
            y += box.h + 14

        hint = "Enter: Submit guess" if self.can_submit() else "Tab: Next field  Up/Down: Choose"
        txt = self._small_font.render(hint, True, _MUTED)
        surface.blit(txt, (panel.x + 12, panel.bottom - 30))

    def _render_round_result(self, surface: pygame.Surface, panel: pygame.Rect, snap: GameSnapshot) -> None:
        guess = snap.last_guess
        assert guess is not None
        rows = (
            ("Manufacturer", guess.manufacturer, guess.correct.manufacturer),
            ("Model", guess.model, guess.correct.model),
            ("Version", guess.version, guess.correct.version),
        )
        y = panel.y + 14
        for label, value, ok in rows:
            box = pygame.Rect(panel.x + 12, y, panel.w - 24, 48)
            pygame.draw.rect(surface, _GOOD if ok else _BAD, box)
            lbl = self._small_font.render(label, True, _TEXT)
            surface.blit(lbl, (box.x + 8, box.y + 4))
            val = self._mid_font.render(_fit_label(self._mid_font, value, box.w - 16), True, _TEXT)
            surface.blit(val, (box.x + 8, box.y + 22))
            y += box.h + 10

        finishing = guess.correct.all_correct or snap.round >= 5
        hint = "Enter: Finish game" if finishing else "Enter: Next round"
        txt = self._mid_font.render(hint, True, _TEXT)
        surface.blit(txt, (panel.x + 12, panel.bottom - 36))

    def _render_game_over(self, surface: pygame.Surface, panel: pygame.Rect, snap: GameSnapshot) -> None:
        aircraft = self._game.answer.aircraft
        final = snap.final_score if snap.final_score is not None else snap.score
        y = panel.y + 12
        score = self._big_font.render(f"Final score: {final}", True, _TEXT)
        surface.blit(score, (panel.x + 12, y))
        y += 50
        for line in (aircraft.manufacturer, aircraft.model, aircraft.version):
            txt = self._mid_font.render(_fit_label(self._mid_font, line, panel.w - 24), True, _TEXT)
            surface.blit(txt, (panel.x + 12, y))
            y += 30
        if aircraft.attribution:
            attr = _fit_label(self._small_font, f"Photo: {aircraft.attribution}", panel.w - 24)
            surface.blit(self._small_font.render(attr, True, _MUTED), (panel.x + 12, y))
        y += 30

        # Share grid: one row per guess, green/red per field.
        cell = 18
        for guess in self._game.state.guesses:
            x = panel.x + 12
            for ok in (guess.correct.manufacturer, guess.correct.model, guess.correct.version):
                pygame.draw.rect(surface, _GOOD if ok else _BAD, pygame.Rect(x, y, cell, cell))
                x += cell + 4
            y += cell + 4

        hint = self._small_font.render("C: Copy results  |  Esc: Back", True, _MUTED)
        surface.blit(hint, (panel.x + 12, panel.bottom - 26))


HOW_TO_PLAY = [
    "Identify today's aircraft from a zoomed-in, blurred photo.",
    "Each round reveals more of the image (five rounds in total).",
    "Pick manufacturer, then model, then version, and submit.",
    "A fully correct guess scores 100 x the round multiplier:",
    "round 1: x5, round 2: x4, round 3: x3, round 4: x2, round 5: x1.",
    "The game ends on a correct guess or after round 5.",
    "Everyone gets the same aircraft each day. Progress is saved.",
]


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    catalog_path: Path | None = None,
    state_path: Path | None = None,
    clock: Clock | None = None,
) -> int:
    pygame.init()

    pygame.display.set_caption("Plandl")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    frame_clock = pygame.time.Clock()

    app = App(surface=surface, font=font)
    wall_clock = clock or RealClock()
    catalog_file = catalog_path or default_catalog_path()

    try:
        with open_store(state_path or default_state_path()) as store:
            _push_root(app, catalog_file=catalog_file, store=store, clock=wall_clock)

            frame = 0
            while app.running:
                if event_injector is not None:
                    event_injector(frame)

                for event in pygame.event.get():
                    app.handle_event(event)

                app.render()

                pygame.display.flip()

                frame += 1
                if max_frames is not None and frame >= max_frames:
                    break

                frame_clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0


def _push_root(app: App, *, catalog_file: Path, store: StateStore, clock: Clock) -> None:
    try:
        catalog = load_catalog(catalog_file)
    except CatalogError as exc:
        app.push(
            MessageScreen(
                app,
                "Failed to load game data",
                ["The aircraft catalog could not be read.", str(exc), "Please restart the game."],
                fatal=True,
            )
        )
        return

    image_root = catalog_file.parent

    def open_daily() -> None:
        game = build_daily_game(catalog=catalog, clock=clock, store=store)
        app.push(DailyGameScreen(app, game=game, clock=clock, image_root=image_root))

    how_to_play = MessageScreen(app, "How to play", HOW_TO_PLAY)

    main_items = [
        MenuItem("Today's Puzzle", open_daily),
        MenuItem("How to Play", lambda: app.push(how_to_play)),
        MenuItem("Quit", app.quit),
    ]
    app.push(MenuScreen(app, "Plandl", main_items, is_root=True))
