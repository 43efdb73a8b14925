#!/usr/bin/env python3
"""
LED Grid display surfaces

Buffered 16x16 grid addressed by (column, row). `GridDisplay` pushes frames to
the SCORPIO/ESP32 strip driver over SPI; `PreviewDisplay` keeps them in memory.
"""

import sys
import time
from typing import List, Sequence, Tuple

from grid_layout import DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT
from metric_display import Color, HardwareError, OFF

# SPI Configuration
SPI_BUS = 0  # SPI bus number (0 = /dev/spidev0.X)
SPI_DEVICE = 0  # CE0
SPI_SPEED = 8000000  # 8 MHz default
SPI_MODE = 3  # CPOL=1, CPHA=1 required by ESP32 slave driver

MAX_SPI_TRANSFER = 4096
MAX_PIXELS_SET_ALL = (MAX_SPI_TRANSFER - 1) // 3
MAX_PIXELS_PER_RANGE = min(255, (MAX_SPI_TRANSFER - 4) // 3)

ROTATIONS = (0, 90, 180, 270)
DEFAULT_ROTATION = 180  # panel is mounted upside down

# Command definitions
CMD_SET_BRIGHTNESS = 0x02
CMD_SHOW = 0x03
CMD_SET_RANGE = 0x05
CMD_SET_ALL = 0x06
CMD_CONFIG = 0x07
CMD_PING = 0xFF


def _pad_payload(payload):
    pad_len = (-len(payload)) % 4
    if pad_len:
        payload.extend([0] * pad_len)
    return payload


class DisplaySurface:
    """Pixel buffer shared by every display; subclasses implement _push()"""

    def __init__(self, width: int = DEFAULT_GRID_WIDTH, height: int = DEFAULT_GRID_HEIGHT,
                 rotation: int = 0, serpentine: bool = False):
        if rotation not in ROTATIONS:
            raise ValueError(f"Rotation must be one of {ROTATIONS}, got {rotation}")
        if rotation in (90, 270) and width != height:
            raise ValueError("Quarter-turn rotation needs a square grid")
        self.width = width
        self.height = height
        self.rotation = rotation
        self.serpentine = serpentine
        self._pixels: List[List[Color]] = [[OFF] * width for _ in range(height)]
        self._shown: List[List[Color]] = self.rows()

    def _check_bounds(self, column: int, row: int):
        if not (0 <= column < self.width and 0 <= row < self.height):
            raise IndexError(f"Pixel ({column}, {row}) outside {self.width}x{self.height} grid")

    def set_pixel(self, column: int, row: int, color: Sequence[int]):
        """Buffer a pixel; nothing reaches the panel until flush()"""
        self._check_bounds(column, row)
        self._pixels[row][column] = Color.of(color)

    def get_pixel(self, column: int, row: int) -> Color:
        self._check_bounds(column, row)
        return self._pixels[row][column]

    def clear(self):
        """Reset the buffer to background (buffer only)"""
        for row in self._pixels:
            row[:] = [OFF] * self.width

    def rows(self) -> List[List[Color]]:
        """Copy of the buffer, row 0 first"""
        return [list(row) for row in self._pixels]

    def _source_pixel(self, x: int, y: int) -> Color:
        """Buffer pixel shown at physical position (x, y) after rotation"""
        if self.rotation == 0:
            return self._pixels[y][x]
        if self.rotation == 180:
            return self._pixels[self.height - 1 - y][self.width - 1 - x]
        if self.rotation == 90:
            return self._pixels[self.width - 1 - x][y]
        return self._pixels[x][self.height - 1 - y]

    def physical_frame(self) -> List[Tuple[int, int, int]]:
        """Flatten the buffer strip by strip, one strip per physical column"""
        frame = []
        for strip in range(self.width):
            leds = range(self.height)
            if self.serpentine and strip % 2 == 1:
                leds = reversed(leds)
            for led in leds:
                frame.append(tuple(self._source_pixel(strip, led)))
        return frame

    def shown_rows(self) -> List[List[Color]]:
        """Copy of the frame from the last successful flush, row 0 first"""
        return [list(row) for row in self._shown]

    def flush(self):
        """Push the buffered frame to the device"""
        self._push(self.physical_frame())
        self._shown = self.rows()

    def _push(self, frame: List[Tuple[int, int, int]]):
        raise NotImplementedError

    def close(self):
        pass


class PreviewDisplay(DisplaySurface):
    """
    In-memory display used for previews and dry runs.
    Mirrors the dimensions of the real panel but performs no I/O.
    """

    def __init__(self, width: int = DEFAULT_GRID_WIDTH, height: int = DEFAULT_GRID_HEIGHT, **kwargs):
        super().__init__(width, height, **kwargs)
        self.flush_count = 0

    def _push(self, _frame):
        self.flush_count += 1


class GridDisplay(DisplaySurface):
    """Drive the LED grid via SPI, one strip per grid column"""

    def __init__(self, bus=SPI_BUS, device=SPI_DEVICE, speed=SPI_SPEED, mode=SPI_MODE,
                 width=DEFAULT_GRID_WIDTH, height=DEFAULT_GRID_HEIGHT,
                 rotation=DEFAULT_ROTATION, serpentine=False, brightness=None,
                 debug=False, spi=None):
        super().__init__(width, height, rotation=rotation, serpentine=serpentine)
        self.debug = debug
        self.strip_count = width
        self.leds_per_strip = height
        self.current_brightness = None

        if spi is None:
            import spidev
            spi = spidev.SpiDev()
            try:
                spi.open(bus, device)
            except OSError as exc:
                raise HardwareError(f"Cannot open /dev/spidev{bus}.{device}: {exc}") from exc
        try:
            spi.max_speed_hz = speed
            spi.mode = mode
            spi.bits_per_word = 8
        except OSError as exc:
            spi.close()
            raise HardwareError(f"Cannot configure /dev/spidev{bus}.{device}: {exc}") from exc
        self.spi = spi

        if self.debug:
            print("SPI Grid Display initialized")
            print(f"  Device: /dev/spidev{bus}.{device}")
            print(f"  Speed: {speed/1000000:.1f} MHz")
            print(f"  Mode: {mode}")
            print(f"  Grid: {width} x {height} (rotation {rotation})")

        # Test ping
        try:
            self._xfer([CMD_PING])
            time.sleep(0.01)
            if self.debug:
                print("✓ SPI connection OK\n")
        except HardwareError as e:
            print(f"Warning: SPI test failed: {e}\n", file=sys.stderr)

        try:
            self.configure()
            if brightness is not None:
                self.set_brightness(brightness)
        except HardwareError:
            self.spi.close()
            raise

    def _xfer(self, payload):
        buf = list(payload)
        _pad_payload(buf)
        try:
            return self.spi.xfer2(buf)
        except OSError as exc:
            raise HardwareError(f"SPI transfer failed: {exc}") from exc

    def configure(self):
        """Tell the driver how many strips and LEDs per strip to expect"""
        self._xfer([
            CMD_CONFIG,
            self.strip_count & 0xFF,
            (self.leds_per_strip >> 8) & 0xFF,
            self.leds_per_strip & 0xFF,
            1 if self.debug else 0,
        ])
        if self.debug:
            print(f"✓ Configuration sent (strips={self.strip_count}, leds/strip={self.leds_per_strip})")

    def set_brightness(self, brightness):
        """Set global brightness (0-255)"""
        level = int(brightness) & 0xFF
        self.current_brightness = level
        self._xfer([CMD_SET_BRIGHTNESS, level])

    def _push(self, frame):
        if len(frame) <= MAX_PIXELS_SET_ALL:
            data = [CMD_SET_ALL]
            for r, g, b in frame:
                data.extend([r & 0xFF, g & 0xFF, b & 0xFF])
            self._xfer(data)
        else:
            start = 0
            while start < len(frame):
                count = min(MAX_PIXELS_PER_RANGE, len(frame) - start)
                payload = [
                    CMD_SET_RANGE,
                    (start >> 8) & 0xFF,
                    start & 0xFF,
                    count
                ]
                for r, g, b in frame[start:start + count]:
                    payload.extend([r & 0xFF, g & 0xFF, b & 0xFF])
                self._xfer(payload)
                start += count

        self._xfer([CMD_SHOW])

    def close(self):
        """Close SPI connection"""
        self.spi.close()
