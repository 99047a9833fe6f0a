"""Top-down pygame view of the ground plane.

Only what is needed to watch a run: the arena boundary, trails and bodies.
Positions are projected onto the ``x``/``z`` plane; the vertical ``y``
coordinate is dropped.
"""
import numpy as np
import pygame
import pygame.gfxdraw

from . import constants as C
from .simulation import RunState


def world_to_screen(pos, zoom, center):
    """Project world positions (shape ``(3,)`` or ``(N, 3)``) to pixels."""
    pos = np.asarray(pos, dtype=float)
    a, b = C.GROUND_PLANE_AXES
    plane = np.stack([pos[..., a], pos[..., b]], axis=-1)
    return plane * zoom + np.asarray(center, dtype=float)


def fit_zoom(boundary_radius, width=C.WIDTH, height=C.HEIGHT, margin=20):
    """Zoom that keeps the whole arena on screen."""
    return max(1e-3, (min(width, height) / 2 - margin) / boundary_radius)


def draw_frame(screen, frame, zoom, font=None):
    width, height = screen.get_size()
    center = (width / 2, height / 2)
    screen.fill(C.BLACK)

    if not frame.options.free_play:
        radius = int(frame.options.boundary_radius * zoom)
        pygame.gfxdraw.aacircle(screen, int(center[0]), int(center[1]), radius, C.DARK_GRAY)

    for body in frame.bodies:
        if len(body.trail) > 1:
            points = world_to_screen(body.trail, zoom, center)
            pygame.draw.aalines(screen, body.color, False, [(int(x), int(y)) for x, y in points])

    for body in frame.bodies:
        x, y = world_to_screen(body.position, zoom, center)
        r = int(max(2, body.radius * zoom))
        pygame.gfxdraw.filled_circle(screen, int(x), int(y), r, body.color)
        pygame.gfxdraw.aacircle(screen, int(x), int(y), r, body.color)

    if frame.termination is not None:
        x, y = world_to_screen(frame.termination.location, zoom, center)
        pygame.gfxdraw.aacircle(screen, int(x), int(y), 12, C.RED)

    if font is not None:
        text = f"{frame.state.value}  t={frame.simulation_time:.1f}  x{frame.options.speed_multiplier:g}"
        if frame.state is RunState.TERMINATED:
            text += f"  ({frame.termination.cause.value})"
        screen.blit(font.render(text, True, C.WHITE), (10, 10))
