from dataclasses import dataclass
from typing import Optional


# Settings for speed, window, colors and sound.
# Colors are RGBA8888: 0xRRGGBBAA.
@dataclass
class Config:
    instructions_per_second: int = 700
    scale_factor: int = 20          # 64x32 becomes 1280x640
    fg_color: int = 0xFFFFFFFF      # white
    bg_color: int = 0x000000FF      # black
    pixel_outlines: bool = True
    square_wave_freq: int = 440     # middle A
    audio_sample_rate: int = 44100
    volume: int = 3000              # int16 scale, 32767 is max
    seed: Optional[int] = None

    @property
    def amplitude(self):
        return max(0.0, min(1.0, self.volume / 32767))


def split_rgba(color):
    return ((color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
