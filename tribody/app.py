import argparse
import logging
import sys

import pygame

from . import constants as C
from .analysis import EnergyMonitor
from .errors import IllegalTransition, SimulationError
from .presets import DEFAULT_PRESET, PRESETS, get_preset
from .rendering import draw_frame, fit_zoom
from .simulation import RunState, SimulationController, SimulationOptions
from .state_manager import load_config, save_config

logger = logging.getLogger(__name__)

SPEED_STEPS = (0.0, 0.25, 0.5, 1.0, 2.0, 4.0, 8.0)


class Viewer:
    """Keyboard-driven window around a :class:`SimulationController`."""

    def __init__(self, controller: SimulationController, init_pygame: bool = True):
        self.controller = controller
        self.energy_monitor = EnergyMonitor()
        self.energy_monitor.set_initial_energy(controller.bodies, controller.options.g_constant)
        self.running = False
        self.frame = controller.frame()

        if init_pygame:
            pygame.init()
            self.screen = pygame.display.set_mode((C.WIDTH, C.HEIGHT))
            pygame.display.set_caption("Three Body Sandbox")
            self.clock = pygame.time.Clock()
            self.font = pygame.font.Font(None, 22)
        else:
            self.screen = None
            self.clock = None
            self.font = None

    # ------------------------------------------------------------------
    def handle_key(self, key) -> None:
        """Map one key press to one controller call."""
        ctl = self.controller
        try:
            if key == pygame.K_ESCAPE:
                self.running = False
            elif key == pygame.K_SPACE:
                if ctl.state is RunState.SETUP:
                    self.frame = ctl.start()
                    self.energy_monitor.set_initial_energy(ctl.bodies, ctl.options.g_constant)
                elif ctl.state is RunState.RUNNING:
                    self.frame = ctl.pause()
                elif ctl.state is RunState.PAUSED:
                    self.frame = ctl.resume()
            elif key == pygame.K_s:
                self.frame = ctl.stop()
            elif key == pygame.K_r:
                self.frame = ctl.reset()
            elif key == pygame.K_d:
                self.frame = ctl.reset(to_defaults=True)
            elif key == pygame.K_f:
                self.frame = ctl.set_free_play(not ctl.options.free_play)
            elif key in (pygame.K_UP, pygame.K_DOWN):
                self.frame = ctl.set_speed(self._next_speed(key == pygame.K_UP))
        except IllegalTransition as exc:
            logger.info("Ignored key: %s", exc)

    def _next_speed(self, faster):
        current = self.controller.options.speed_multiplier
        if faster:
            return next((s for s in SPEED_STEPS if s > current), SPEED_STEPS[-1])
        return next((s for s in reversed(SPEED_STEPS) if s < current), SPEED_STEPS[0])

    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def update(self, dt) -> None:
        previous = self.controller.state
        self.frame = self.controller.step(dt)
        if self.frame.state is RunState.RUNNING:
            self.energy_monitor.update(self.controller.bodies, self.controller.options.g_constant)
        elif self.frame.state is RunState.TERMINATED and previous is RunState.RUNNING:
            info = self.frame.termination
            logger.info(
                "Run ended by %s at t=%.2f", info.cause.value, self.frame.simulation_time
            )

    def draw(self) -> None:
        if self.screen is None:
            return
        zoom = fit_zoom(self.controller.options.boundary_radius, *self.screen.get_size())
        draw_frame(self.screen, self.frame, zoom, self.font)
        pygame.display.flip()

    def run(self) -> None:
        """Main loop: one controller step per rendered frame."""
        if self.screen is None or self.clock is None:
            raise RuntimeError("Viewer cannot run without pygame initialized")
        self.running = True
        while self.running:
            dt = self.clock.tick(C.FPS) / 1000.0
            self.handle_events()
            self.update(dt)
            self.draw()
        pygame.quit()

    def run_headless(self, ticks, dt=1.0 / C.FPS):
        """Start the run and feed ``ticks`` fixed deltas without a window."""
        if self.controller.state is RunState.SETUP:
            self.frame = self.controller.start()
            self.energy_monitor.set_initial_energy(
                self.controller.bodies, self.controller.options.g_constant
            )
        self.running = True
        for _ in range(ticks):
            self.update(dt)
            if self.frame.state is not RunState.RUNNING:
                break
        self.running = False
        return self.frame


def build_parser():
    parser = argparse.ArgumentParser(description="Three-body gravity sandbox")
    parser.add_argument("--preset", default=DEFAULT_PRESET, choices=sorted(PRESETS))
    parser.add_argument("--load", help="Load bodies and options from a JSON file")
    parser.add_argument("--save", help="Write the final bodies and options to a JSON file")
    parser.add_argument("--free-play", action="store_true", help="Disable the boundary")
    parser.add_argument("--speed", type=float, help="Speed multiplier")
    parser.add_argument("--trail-length", type=int, help="Trail capacity per body")
    parser.add_argument("--gravity", type=float, help="Gravitational constant")
    parser.add_argument("--boundary-radius", type=float, help="Arena radius")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--ticks", type=int, default=600, help="Headless frame count")
    parser.add_argument("--log-level", default="INFO")
    return parser


def _options_from_args(args, base):
    overrides = {}
    if args.free_play:
        overrides["free_play"] = True
    if args.speed is not None:
        overrides["speed_multiplier"] = args.speed
    if args.trail_length is not None:
        overrides["trail_capacity"] = args.trail_length
    if args.gravity is not None:
        overrides["g_constant"] = args.gravity
    if args.boundary_radius is not None:
        overrides["boundary_radius"] = args.boundary_radius
    return SimulationOptions.from_value({**base.to_dict(), **overrides})


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.load:
            bodies_config, base = load_config(args.load)
        else:
            bodies_config, base = get_preset(args.preset), SimulationOptions()
        controller = SimulationController(bodies_config, _options_from_args(args, base))
    except (OSError, SimulationError) as exc:
        logger.error("Could not set up the simulation: %s", exc)
        return 1

    viewer = Viewer(controller, init_pygame=not args.headless)
    if args.headless:
        frame = viewer.run_headless(args.ticks)
        logger.info(
            "Finished in state %s after %d steps (energy drift %.3e %%)",
            frame.state.value, frame.step_count, viewer.energy_monitor.latest,
        )
    else:
        viewer.run()

    if args.save:
        save_config(args.save, controller)
    return 0


if __name__ == "__main__":
    sys.exit(main())
