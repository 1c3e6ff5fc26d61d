"""
Pygame host for the CHIP-8 core.

Keyboard mapping (common layout):

  CHIP-8  =>  Keyboard
  1 2 3 C =>  1 2 3 4
  4 5 6 D =>  Q W E R
  7 8 9 E =>  A S D F
  A 0 B F =>  Z X C V

Space pauses/resumes, Escape quits. A square-wave beep plays whenever the
sound timer is non-zero (requires a working mixer).
"""
from __future__ import annotations

import logging
import sys

try:
    import pygame
except Exception:
    print("This emulator requires pygame. Install with: pip install pygame", file=sys.stderr)
    raise

from .config import Config
from .interpreter import Interpreter

logger = logging.getLogger(__name__)

# Keyboard mapping: CHIP-8 key index -> pygame key
KEYMAP = {
    0x0: pygame.K_x,
    0x1: pygame.K_1,
    0x2: pygame.K_2,
    0x3: pygame.K_3,
    0x4: pygame.K_q,
    0x5: pygame.K_w,
    0x6: pygame.K_e,
    0x7: pygame.K_a,
    0x8: pygame.K_s,
    0x9: pygame.K_d,
    0xA: pygame.K_z,
    0xB: pygame.K_c,
    0xC: pygame.K_4,
    0xD: pygame.K_r,
    0xE: pygame.K_f,
    0xF: pygame.K_v,
}
REVERSE_KEYMAP = {pgk: k_idx for k_idx, pgk in KEYMAP.items()}


def apply_key(interp: Interpreter, key: int, is_down: bool) -> None:
    """Route one pygame key transition to the interpreter."""
    if is_down and key == pygame.K_ESCAPE:
        interp.halt()
    elif is_down and key == pygame.K_SPACE:
        interp.toggle_pause()
    elif key in REVERSE_KEYMAP:
        interp.state.keypad.set(REVERSE_KEYMAP[key], is_down)


class Frontend:
    def __init__(self, config: Config):
        self.config = config
        self.scale = config.scale
        self.surface = None
        self.clock = None
        self.sound = None

    def open(self, width: int, height: int):
        # mixer format must be set before pygame.init() opens the device
        pygame.mixer.pre_init(44100, -16, 1, 256)
        pygame.init()
        self.surface = pygame.display.set_mode(
            (width * self.scale, height * self.scale))
        pygame.display.set_caption("chipvm")
        self.clock = pygame.time.Clock()
        self._init_audio()

    def close(self):
        pygame.quit()

    def _init_audio(self):
        try:
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("Audio disabled: %s", e)
            return
        # generate a 100ms square wave buffer
        import numpy as np
        sr = 44100
        duration = 0.1
        t = np.arange(int(sr * duration))
        wave = ((t * self.config.tone_hz * 2 / sr) % 2 >= 1).astype('float32') * 2 - 1
        wave = (wave * 32767).astype('int16')
        self.sound = pygame.mixer.Sound(buffer=wave.tobytes())
        self.sound.set_volume(0.2)

    def handle_events(self, interp: Interpreter):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                interp.halt()
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                apply_key(interp, event.key, event.type == pygame.KEYDOWN)

    def render(self, interp: Interpreter):
        display = interp.state.display
        if not display.dirty:
            return
        surf = self.surface
        surf.lock()
        surf.fill(self.config.bg_color)
        pixel_size = self.scale
        for y, row in enumerate(display.rows()):
            for x, on in enumerate(row):
                if on:
                    rect = pygame.Rect(x * pixel_size, y *
                                       pixel_size, pixel_size, pixel_size)
                    pygame.draw.rect(surf, self.config.fg_color, rect)
        surf.unlock()
        pygame.display.flip()
        display.dirty = False

    def play_sound_if_needed(self, interp: Interpreter):
        if self.sound is not None and interp.state.beeping:
            # Fire-and-forget short blip
            self.sound.play()

    def tick(self, fps: int):
        self.clock.tick(fps)
