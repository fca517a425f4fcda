from chip8_emulator.__main__ import build_parser, config_from_args, load_rom, main
from chip8_emulator.config import split_rgba
from chip8_emulator.machine import ENTRY_POINT, MAX_ROM_SIZE


def test_missing_rom_exits_with_error(tmp_path, capsys):
    assert main([str(tmp_path / "nope.ch8")]) == 1
    assert "Failed to open ROM" in capsys.readouterr().err


def test_oversized_rom_exits_with_error(tmp_path, capsys):
    rom = tmp_path / "big.ch8"
    rom.write_bytes(b"\x00" * (MAX_ROM_SIZE + 1))
    assert main([str(rom)]) == 1
    assert "ROM is too big" in capsys.readouterr().err


def test_load_rom(tmp_path):
    rom = tmp_path / "ibm.ch8"
    rom.write_bytes(b"\x00\xE0\x12\x00")
    m = load_rom(str(rom))
    assert m.memory[ENTRY_POINT:ENTRY_POINT + 4] == b"\x00\xE0\x12\x00"


def test_arguments_override_config():
    args = build_parser().parse_args(
        ["game.ch8", "--ips", "1000", "--fg", "0x00FF00FF", "--no-outlines", "--seed", "7"])
    config = config_from_args(args)
    assert config.instructions_per_second == 1000
    assert config.fg_color == 0x00FF00FF
    assert config.bg_color == 0x000000FF
    assert not config.pixel_outlines
    assert config.seed == 7
    assert config.scale_factor == 20


def test_config_amplitude():
    args = build_parser().parse_args(["game.ch8", "--volume", "40000"])
    assert config_from_args(args).amplitude == 1.0


def test_split_rgba():
    assert split_rgba(0x11223344) == (0x11, 0x22, 0x33, 0x44)
