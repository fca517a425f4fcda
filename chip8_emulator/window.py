# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The emulation itself lives in
# Machine/CPU/Scheduler; this window only feeds it keys and presents its output.
import logging

import numpy as np
import pyglet
from pyglet.window import key
from pyglet.media import synthesis

from .errors import Chip8Error
from .frontend import UPDATE_INTERVAL, Beeper, FrameBuilder, KeyQueue, run_step, soft_reset
from .machine import WIDTH, HEIGHT
from .scheduler import Scheduler

log = logging.getLogger(__name__)

# map binding keys
KEYMAP = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


def generate_tone(config, duration=0.25):
    envelope = synthesis.FlatEnvelope(amplitude=config.amplitude)
    wave = synthesis.Square(duration=duration, frequency=config.square_wave_freq,
                            sample_rate=config.audio_sample_rate, envelope=envelope)
    return pyglet.media.StaticSource(wave)


class Chip8Window(pyglet.window.Window):

    def __init__(self, machine, config, cpu=None, rom_name=""):
        self.pixel_scale = config.scale_factor
        super().__init__(
            width=WIDTH * self.pixel_scale,
            height=HEIGHT * self.pixel_scale,
            caption="CHIP-8 Emulator %s" % rom_name,
            vsync=False
        )
        self.machine = machine
        self.config = config
        self.scheduler = Scheduler(machine, config.instructions_per_second, cpu=cpu,
                                   on_timer_tick=self._timer_tick)
        self.keys = KeyQueue()
        self.error = None

        self.frames = FrameBuilder(self.pixel_scale, config.fg_color, config.bg_color,
                                   config.pixel_outlines)

        # creating ImageData once, updated in place every frame
        blank = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self.image = pyglet.image.ImageData(self.width, self.height, 'RGBA', blank.tobytes())

        # Beep sound, looped while the sound timer runs
        self.beep_player = pyglet.media.Player()
        self.beep_player.queue(generate_tone(config))
        self.beep_player.loop = True
        self.beeper = Beeper(self.beep_player)

        # Performance tracking
        self._cps_counter = 0
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0",
            font_size=12,
            x=5,
            y=self.height - 15,
            anchor_x='left',
            anchor_y='center',
            color=(255, 0, 0, 255)
        )

        pyglet.clock.schedule_interval(self.update, UPDATE_INTERVAL)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- emulation step ----
    def update(self, dt):
        before = self.scheduler.cpu.cycle_count
        try:
            run_step(self.scheduler, self.keys)
        except Chip8Error as e:
            log.error("Emulation error: %s", e)
            self.error = e
            self.close()
        self._cps_counter += self.scheduler.cpu.cycle_count - before

    def _update_bench(self, dt):
        self.cps_label.text = "Cycles/s: %d" % (self._cps_counter / dt)
        self._cps_counter = 0

    # ---- sound ----
    def _timer_tick(self, sound_timer):
        self.beeper.update(sound_timer)

    # ---- Drawing ----
    def on_draw(self):
        if self.machine.draw_flag:
            rgba = self.frames.build(self.machine.framebuffer)
            self.image.set_data('RGBA', self.width * 4, rgba.tobytes())
            self.machine.draw_flag = False
        self.clear()
        self.image.blit(0, 0)
        self.cps_label.draw()

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.SPACE:
            self.scheduler.toggle_pause()
            if self.scheduler.paused:
                self.beeper.silence()
        elif symbol == key.EQUAL:
            log.info("Reset")
            self.beeper.silence()
            soft_reset(self.scheduler, self.keys, self.config.seed)
        elif symbol == key.F1:
            package_log = logging.getLogger("chip8_emulator")
            debug = package_log.getEffectiveLevel() > logging.DEBUG
            package_log.setLevel(logging.DEBUG if debug else logging.INFO)
            log.info("Debug logging: %s", debug)
        elif symbol in KEYMAP:
            self.keys.press(KEYMAP[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in KEYMAP:
            self.keys.release(KEYMAP[symbol])

    def close(self):
        pyglet.clock.unschedule(self.update)
        pyglet.clock.unschedule(self._update_bench)
        if self.beep_player is not None:
            self.beep_player.delete()
            self.beep_player = None
        super().close()
