"""
Main entry point for mapgrid.
Usage: python -m mapgrid [--snapshot PATH]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox

from . import __version__
from .gui.main_window import MainWindow
from .gui.map_view.grid_overlay import attach_overlay
from .gui.map_view.scheduler import ManualFrameScheduler
from .gui.map_view.surfaces import PillowCanvas
from .map.mercator import WebMercatorViewport
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging

logger = logging.getLogger(f"{__name__}.main")


def show_error_dialog(title: str, message: str, details: Optional[str] = None) -> None:
    """Show error dialog to user."""
    app = QApplication.instance()
    if not app:
        app = QApplication(sys.argv)

    msg_box = QMessageBox()
    msg_box.setIcon(QMessageBox.Icon.Critical)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)

    if details:
        msg_box.setDetailedText(details)

    msg_box.exec()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mapgrid", description="Measurement grid overlay for maps")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--profile", default="default", help="settings profile name")
    parser.add_argument(
        "--snapshot",
        type=Path,
        metavar="PATH",
        help="render the grid at the configured view into PATH and exit",
    )
    parser.add_argument("--width", type=int, default=800, help="snapshot width in pixels")
    parser.add_argument("--height", type=int, default=600, help="snapshot height in pixels")
    parser.add_argument("--spacing", type=float, help="grid spacing in meters for the snapshot")
    return parser


def render_snapshot(settings: AppSettings, args: argparse.Namespace) -> Path:
    """Render the overlay headlessly at the configured initial view."""
    overlay_config = settings.overlay
    viewport = WebMercatorViewport(args.width, args.height, overlay_config.center, overlay_config.zoom)
    viewport.mark_ready()

    grid_settings = overlay_config.build_grid_settings()
    grid_settings.enabled = True
    grid_settings.anchor = viewport.get_center()
    if args.spacing is not None:
        grid_settings.spacing_m = args.spacing

    canvas = PillowCanvas(args.width, args.height)
    scheduler = ManualFrameScheduler()
    handles = attach_overlay(viewport, canvas, grid_settings, scheduler)
    scheduler.flush()

    logger.info(
        f"Rendered {handles.runtime.mode.value} grid at {handles.runtime.spacing_px_x:.1f}px spacing"
    )
    path = canvas.save(args.snapshot, background=(46, 52, 64, 1.0))
    handles.detach()
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = AppSettings(args.profile)
    except ConfigError as e:
        print(f"mapgrid: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)
    logger.info(f"Starting mapgrid {__version__}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.warning(f"  {warning}")
    if not validation.is_valid:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        if args.snapshot is None:
            show_error_dialog(
                "Configuration Error",
                "Configuration validation failed. Please check your settings.",
                "\n".join(validation.errors),
            )
        return 1

    if args.snapshot is not None:
        try:
            path = render_snapshot(settings, args)
        except OSError as e:
            logger.error(f"Could not write snapshot: {e}")
            return 1
        print(path)
        return 0

    try:
        app = QApplication(sys.argv[:1])
        app.setApplicationName("mapgrid")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("mapgrid")
        app.setStyle("Fusion")

        main_window = MainWindow(settings)
        main_window.show()

        logger.info("Application started successfully")
        return app.exec()

    except Exception as e:
        logger.exception("Unhandled exception in main")
        show_error_dialog("Application Error", "An unexpected error occurred.", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
