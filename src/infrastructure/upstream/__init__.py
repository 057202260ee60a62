"""
Upstream Module

Client for the external headless-browser rendering service.
"""

from .browser_rendering import BrowserRenderingClient, build_payload

__all__ = ["BrowserRenderingClient", "build_payload"]
