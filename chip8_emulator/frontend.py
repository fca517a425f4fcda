# Display-free pieces of the window: key event queue, frame building, beep
# switching and the per-update step. Chip8Window wires these to pyglet.
from collections import deque

import numpy as np

from .config import split_rgba
from .machine import WIDTH, HEIGHT
from .scheduler import TIMER_HZ

# how often the window runs a scheduler step
UPDATE_INTERVAL = 1.0 / TIMER_HZ


class KeyQueue:
    """Key events collected between steps and applied all at once before a step.

    A press and the release of that same key never land in the same step, so a
    quick tap is still seen by at least one step's instructions.
    """

    def __init__(self):
        self.events = deque()

    def press(self, index):
        self.events.append((index, True))

    def release(self, index):
        self.events.append((index, False))

    def clear(self):
        self.events.clear()

    def __len__(self):
        return len(self.events)

    def drain(self, machine):
        pressed_now = set()
        while self.events:
            index, pressed = self.events[0]
            if not pressed and index in pressed_now:
                # leave the release (and everything after it) for the next step
                break
            self.events.popleft()
            if pressed:
                machine.press_key(index)
                pressed_now.add(index)
            else:
                machine.release_key(index)


def run_step(scheduler, keys):
    """One window update: keypad first, then the instructions for this step."""
    keys.drain(scheduler.machine)
    return scheduler.step()


def soft_reset(scheduler, keys, seed=None):
    """Bring machine, random source and pacing back to their cold-boot state."""
    keys.clear()
    scheduler.machine.reset()
    scheduler.cpu.rng.seed(seed)
    scheduler.reset()


class FrameBuilder:
    """Turns the framebuffer into scaled RGBA rows, bottom row first for pyglet."""

    def __init__(self, scale, fg_color, bg_color, pixel_outlines=True):
        self.scale = scale
        self.fg = np.array(split_rgba(fg_color), dtype=np.uint8)
        self.bg = np.array(split_rgba(bg_color), dtype=np.uint8)
        cell = np.ones((scale, scale), dtype=bool)
        if pixel_outlines and scale > 2:
            cell[0, :] = cell[-1, :] = cell[:, 0] = cell[:, -1] = False
        self.cell_mask = np.tile(cell, (HEIGHT, WIDTH))

    def build(self, framebuffer):
        on = framebuffer.reshape(HEIGHT, WIDTH)
        scaled = np.repeat(np.repeat(on, self.scale, axis=0), self.scale, axis=1)
        scaled &= self.cell_mask
        rgba = np.where(scaled[..., None], self.fg, self.bg)
        # pyglet's origin is bottom-left, CHIP8's is top-left
        return np.ascontiguousarray(rgba[::-1], dtype=np.uint8)


class Beeper:
    """Plays the tone while the sound timer is nonzero, given a pyglet-like player."""

    def __init__(self, player):
        self.player = player
        self.playing = False

    def update(self, sound_timer):
        if sound_timer > 0 and not self.playing:
            self.player.play()
            self.playing = True
        elif sound_timer == 0 and self.playing:
            self.player.pause()
            self.playing = False

    def silence(self):
        if self.playing:
            self.player.pause()
            self.playing = False
