#!/usr/bin/env python3
"""
Web preview for the issue viewer

Flask server that shows the last frame the viewer daemon pushed to the grid,
read back from the shared status file.
"""

import time
from typing import Any, Dict

from flask import Flask, jsonify, render_template

from grid_layout import DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT
from status_channel import FileStatusChannel


class ViewerWebInterface:
    """Read-only web view of the grid status"""

    def __init__(self, status_channel: FileStatusChannel,
                 host: str = '0.0.0.0',
                 port: int = 5000,
                 width: int = DEFAULT_GRID_WIDTH,
                 height: int = DEFAULT_GRID_HEIGHT):
        """
        Initialize web interface

        Args:
            status_channel: FileStatusChannel the daemon writes to
            host: Host to bind to
            port: Port to listen on
            width: Grid width used before the daemon has reported
            height: Grid height used before the daemon has reported
        """
        self.status_channel = status_channel
        self.host = host
        self.port = port
        self.width = width
        self.height = height

        self.app = Flask(__name__)
        self._register_routes()

    def _register_routes(self):
        """Register Flask routes"""

        @self.app.route('/')
        def index():
            """Grid preview page"""
            return render_template('index.html', status=self._status_payload())

        @self.app.route('/api/status')
        def api_get_status():
            """API: Full status including repository counts"""
            return jsonify(self._status_payload())

        @self.app.route('/api/frame')
        def api_get_frame():
            """API: Only the current frame"""
            status = self._status_payload()
            return jsonify({
                'grid': status['grid'],
                'frame': status['frame'],
                'timestamp': status['timestamp'],
            })

    def run(self, debug=False):
        """Start the web server"""
        print(f"🌐 Starting web preview at http://{self.host}:{self.port}")
        self.app.run(host=self.host, port=self.port, debug=debug, threaded=True)

    def _status_payload(self) -> Dict[str, Any]:
        """Normalize the daemon status so every consumer sees the same structure."""
        raw_status = self.status_channel.read_status()
        if not raw_status:
            return self._empty_status()

        status = dict(raw_status)
        status.setdefault('grid', {'width': self.width, 'height': self.height})
        status.setdefault('frame', self._blank_frame(status['grid']))
        status.setdefault('columns_used', 0)
        status.setdefault('repositories', [])
        status.setdefault('last_error', None)
        status['timestamp'] = status.get('updated_at') or time.time()
        return status

    def _blank_frame(self, grid: Dict[str, int]):
        return [[[0, 0, 0]] * grid['width'] for _ in range(grid['height'])]

    def _empty_status(self):
        """Fallback status when the daemon has not written a status file yet."""
        grid = {'width': self.width, 'height': self.height}
        return {
            'grid': grid,
            'frame': self._blank_frame(grid),
            'columns_used': 0,
            'repositories': [],
            'last_error': None,
            'timestamp': time.time(),
        }


def create_app(status_channel: FileStatusChannel = None,
               host: str = '0.0.0.0',
               port: int = 5000,
               width: int = DEFAULT_GRID_WIDTH,
               height: int = DEFAULT_GRID_HEIGHT):
    """Factory function to create the web preview"""
    if status_channel is None:
        status_channel = FileStatusChannel()
    return ViewerWebInterface(status_channel, host=host, port=port, width=width, height=height)
