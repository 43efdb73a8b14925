#!/usr/bin/env python3
"""
Issue Viewer Startup Script

Runs either the viewer daemon (GitHub polling + grid rendering) or the web
preview as separate Python processes that communicate via the status file.
"""

import argparse
import sys
import time
import traceback
from typing import Optional

from display_surface import (
    GridDisplay, PreviewDisplay, ROTATIONS, DEFAULT_ROTATION, SPI_BUS, SPI_DEVICE, SPI_SPEED,
)
from grid_layout import DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT
from issue_source import IssueSource
from metric_display import GridComposer
from settings import DEFAULT_SETTINGS_PATH, load_settings
from status_channel import FileStatusChannel
from web_interface import create_app


def run_cycle(source: IssueSource, composer: GridComposer,
              channel: Optional[FileStatusChannel] = None) -> int:
    """
    One display cycle: collect metrics, compose them, record the result.

    Errors propagate after being recorded so the caller decides about retries.
    """
    try:
        metrics = source.collect_metrics()
        columns_used = composer.compose(metrics)
    except Exception as exc:
        if channel:
            channel.record_cycle(composer.display, 0, source.last_counts, error=str(exc))
        raise

    if channel:
        channel.record_cycle(composer.display, columns_used, source.last_counts)
    print(f"✓ Rendered {columns_used} columns")
    return columns_used


def build_display(args):
    if args.preview:
        return PreviewDisplay(DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT, rotation=args.rotation,
                              serpentine=args.serpentine)
    return GridDisplay(
        bus=args.bus,
        device=args.device,
        speed=args.spi_speed,
        rotation=args.rotation,
        serpentine=args.serpentine,
        brightness=args.brightness,
        debug=args.controller_debug,
    )


def run_viewer_mode(args):
    """Viewer process: polls GitHub and drives the grid."""
    settings = load_settings(args.settings)
    poll_interval = args.poll_interval or settings.poll_interval

    display = build_display(args)
    composer = GridComposer(display)
    source = IssueSource(settings)
    channel = FileStatusChannel(status_path=args.status_file)

    print("🎛️ Viewer mode")
    print(f"  Settings    : {args.settings}")
    print(f"  Repositories: {', '.join(r.full_name for r in settings.repositories)}")
    print(f"  Status file : {args.status_file}")
    print(f"  Poll every  : {poll_interval}s")
    print()

    try:
        while True:
            try:
                run_cycle(source, composer, channel)
            except Exception as e:
                print(f"✗ Display cycle failed: {e}")
                traceback.print_exc()
                if args.once:
                    raise

            if args.once:
                break
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        print("\n👋 Viewer stopped by user")
    finally:
        source.close()
        display.close()


def run_web_mode(args):
    """Web/preview process."""
    channel = FileStatusChannel(status_path=args.status_file)
    web_interface = create_app(status_channel=channel, host=args.host, port=args.port)

    print("🌐 Web/Preview mode")
    print(f"  Status file : {args.status_file}")
    print(f"  URL: http://{args.host}:{args.port}")
    print()

    web_interface.run(debug=args.debug)


def build_parser():
    parser = argparse.ArgumentParser(description='GitHub issue viewer for an LED grid')

    parser.add_argument('--mode', choices=['viewer', 'web'], default='viewer',
                        help='Run the polling viewer (hardware) or the web preview')

    # Shared options
    parser.add_argument('--status-file', default='run_state/status.json',
                        help='Path to status file (default: run_state/status.json)')

    # Viewer options
    parser.add_argument('--settings', default=DEFAULT_SETTINGS_PATH,
                        help=f'Settings file (default: {DEFAULT_SETTINGS_PATH})')
    parser.add_argument('--poll-interval', type=float, default=None,
                        help='Seconds between GitHub polls (default: from settings, 600)')
    parser.add_argument('--once', action='store_true',
                        help='Render a single cycle and exit')
    parser.add_argument('--preview', action='store_true',
                        help='Render into memory instead of the SPI device')
    parser.add_argument('--bus', type=int, default=SPI_BUS,
                        help=f'SPI bus number (default: {SPI_BUS})')
    parser.add_argument('--device', type=int, default=SPI_DEVICE,
                        help=f'SPI device number (default: {SPI_DEVICE})')
    parser.add_argument('--spi-speed', type=int, default=SPI_SPEED,
                        help=f'SPI speed in Hz (default: {SPI_SPEED})')
    parser.add_argument('--brightness', type=int, default=50,
                        help='LED brightness 0-255 (default: 50)')
    parser.add_argument('--rotation', type=int, default=DEFAULT_ROTATION, choices=ROTATIONS,
                        help=f'Panel rotation in degrees (default: {DEFAULT_ROTATION})')
    parser.add_argument('--serpentine', action='store_true',
                        help='Strips are wired back and forth')
    parser.add_argument('--controller-debug', action='store_true',
                        help='Enable display controller debug output')

    # Web options
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host to bind to (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=5000,
                        help='Port to listen on (default: 5000)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode for Flask')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    print("🎨 LED Grid Issue Viewer")
    print("=" * 40)
    print(f"Mode: {args.mode}")
    print()

    try:
        if args.mode == 'viewer':
            run_viewer_mode(args)
        else:
            run_web_mode(args)
    except Exception as e:
        print(f"❌ Error: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
