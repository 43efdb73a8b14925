#!/usr/bin/env python3
"""
Web preview for the issue viewer

Flask app serving the last frame the viewer daemon pushed to the grid.
"""

from .app import ViewerWebInterface, create_app

__all__ = ["ViewerWebInterface", "create_app"]
