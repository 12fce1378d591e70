"""Tests for the command line launcher."""

from PIL import Image
from PySide6.QtCore import QSettings

from mapgrid.__main__ import build_parser, render_snapshot
from mapgrid.settings import AppSettings


class TestLauncher:
    def test_parser_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.profile == "default"
        assert args.snapshot is None
        assert (args.width, args.height) == (800, 600)

    def test_headless_snapshot(self, tmp_path) -> None:
        settings = AppSettings("test", QSettings(str(tmp_path / "mapgrid.ini"), QSettings.Format.IniFormat))
        output = tmp_path / "out" / "grid.png"
        args = build_parser().parse_args(
            ["--snapshot", str(output), "--width", "320", "--height", "240", "--spacing", "10"]
        )

        path = render_snapshot(settings, args)

        assert path == output
        with Image.open(path) as image:
            assert image.size == (320, 240)
            # Opaque background everywhere, grid blended on top
            assert image.convert("RGBA").getpixel((0, 0))[3] == 255
