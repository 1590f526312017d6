#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hex Cycle Viewer
----------------
Drag across hexagons to draw a loop. A closed simple loop takes the next
palette colour and keeps echoing while it fades; anything else flashes and
clears.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import pygame

from cycle_core.layout import HexLayout
from cycle_core.selection import SelectionPath
from cycle_core.session import HexCycleSession
from cycle_core.settings import load_settings
from cycle_core.snapshot import save_snapshot

LOG = logging.getLogger("hex_cycles")

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_PATH = os.path.join(SCRIPT_DIR, "config.json")

PATH_COLOR = (0, 0, 255)
OUTLINE_COLOR = (0, 0, 0)
BACKGROUND = (255, 255, 255)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hex Cycle Viewer")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to a JSON config file")
    parser.add_argument("--output-dir", help="Directory for grid snapshots (overrides snapshot_dir)")
    parser.add_argument("--debug", action="store_true", help="Start with fast debug timing")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


# ---------------------- Help overlay --------------------------
def _draw_help_overlay(screen, width, height):
    """Draw an in-app help window listing hotkeys. F2 toggles."""
    pad = 16
    max_w = min(640, int(width * 0.8))
    max_h = min(420, int(height * 0.8))
    surf = pygame.Surface((max_w, max_h), pygame.SRCALPHA)
    surf.fill((0, 0, 0, 200))
    title_font = pygame.font.Font(None, 30)
    item_font = pygame.font.Font(None, 22)

    y = pad
    surf.blit(title_font.render("Hex Cycles - Help (F2 to close)", True, (230, 230, 235)), (pad, y))
    y += 36
    items = [
        ("LMB drag", "Trace a loop of hexagons"),
        ("D", "Toggle fast debug timing"),
        ("R", "Reset all cells"),
        ("F3", "Toggle debug overlay"),
        ("F4", "Save grid snapshot PNG"),
        ("Esc", "Quit"),
    ]
    for key, desc in items:
        surf.blit(item_font.render(f"{key:>8}  -  {desc}", True, (235, 235, 240)), (pad, y))
        y += 24

    dst = screen.get_rect()
    screen.blit(surf, (dst.centerx - max_w // 2, dst.centery - max_h // 2))


def draw_grid(screen, session: HexCycleSession, layout: HexLayout):
    rgb = session.rendered_colors()
    for (i, j) in session.graph.cells():
        pts = layout.polygon((i, j))
        pygame.draw.polygon(screen, tuple(int(v) for v in rgb[i, j]), pts)
        pygame.draw.polygon(screen, OUTLINE_COLOR, pts, 1)

    for a, b in SelectionPath.segments(session.tracker.current(), session.graph):
        pygame.draw.line(screen, PATH_COLOR, layout.center(a), layout.center(b), 2)


def main(argv=None) -> None:
    args = parse_args(argv)
    log_level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = load_settings(Path(args.config))
        session = HexCycleSession(settings, debug=args.debug)
    except (RuntimeError, ValueError) as exc:
        LOG.error("%s", exc)
        sys.exit(1)
    snapshot_dir = Path(args.output_dir or settings["snapshot_dir"]).resolve()

    pygame.init()
    screen = pygame.display.set_mode((settings["width"], settings["height"]), pygame.RESIZABLE)
    pygame.display.set_caption("Hex Cycles")
    clock = pygame.time.Clock()

    layout = HexLayout(
        settings["width"], settings["height"], session.rows, session.cols,
        padding=settings["padding"], sensitivity=settings["selection_sensitivity"],
    )
    LOG.info("Launching viewer (%dx%d grid, debug=%s)", session.rows, session.cols, args.debug)

    debug_overlay = bool(settings["debug_overlay"])
    help_visible = False
    selecting = False

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT: running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                layout.relayout(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE: running = False
                elif event.key == pygame.K_F2: help_visible = not help_visible
                elif event.key == pygame.K_F3: debug_overlay = not debug_overlay
                elif event.key == pygame.K_F4:
                    try:
                        save_snapshot(session, snapshot_dir, int(settings["snapshot_scale"]))
                    except OSError as exc:
                        LOG.error("Snapshot failed: %s", exc)
                elif event.key == pygame.K_d: session.set_debug(not session.debug)
                elif event.key == pygame.K_r:
                    session.reset(); selecting = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                selecting = True
                session.on_gesture_start(layout.cell_at(*event.pos))
            elif event.type == pygame.MOUSEMOTION and selecting:
                cell = layout.cell_at(*event.pos)
                if cell is not None:
                    session.on_gesture_extend(cell)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and selecting:
                selecting = False
                session.on_gesture_end(pygame.time.get_ticks())

        session.tick(pygame.time.get_ticks())

        screen.fill(BACKGROUND)
        draw_grid(screen, session, layout)

        if help_visible:
            _draw_help_overlay(screen, *screen.get_size())

        if debug_overlay:
            verdict = session.last_verdict
            txt = (
                f"FPS:{clock.get_fps():5.1f}  DBG:{'ON' if session.debug else 'OFF'}"
                f"  DECAY:{session.scheduler.decaying_count()}  ECHO:{session.scheduler.pending()}/{session.scheduler.echo_firings}"
                f"  LAST:{verdict.reason if verdict else '-'}"
            )
            screen.blit(pygame.font.Font(None, 20).render(txt, True, (20, 20, 20)), (12, 10))

        pygame.display.flip(); clock.tick(settings["fps"])

    pygame.quit()


if __name__ == "__main__":
    main()
