from .screenshot_controller import ScreenshotController, ScreenshotResult, assemble_artifact

__all__ = ["ScreenshotController", "ScreenshotResult", "assemble_artifact"]
