import argparse
from pathlib import Path
from typing import Optional, Sequence

class Config:
    """
    Central configuration manager for the rehab angle tracker.
    Handles command-line argument parsing, debug modes, and pipeline tuning constants.
    """

    def __init__(self):
        # Application mode settings
        self.debug_mode: str = "debug_no_save"
        self.save_frames: bool = False
        self.debug_dir: Optional[Path] = None

        # Landmark confidence thresholds
        self.visibility_threshold: float = 0.65  # Every landmark of a limb must exceed this

        # Smoothing parameters (lower alpha = smoother, slower to respond)
        self.landmark_smoothing: float = 0.3
        self.angle_smoothing: float = 0.3

        # Detection loss handling
        self.no_detection_frames: int = 10  # Consecutive empty frames before angles reset

        # Geometry guard against coincident landmarks
        self.min_vector_length: float = 1e-6

        # Frame loop pacing
        self.target_fps: float = 30.0

        # Service settings
        self.host: str = "0.0.0.0"
        self.port: int = 8000

        # Human-readable descriptions for each debug mode
        self.mode_descriptions = {
            "debug": "Debug Mode (with frame trace saving)",
            "debug_no_save": "Debug Mode (without frame trace saving)",
            "non_debug": "Non-Debug Mode (minimal logging)"
        }

    def setup_from_args(self, argv: Optional[Sequence[str]] = None):
        """
        Parse command line arguments and configure application settings.
        Creates debug directory if frame trace saving is enabled.
        """
        parser = argparse.ArgumentParser(description="Rehab Angle Tracker Backend")
        parser.add_argument(
            "--mode",
            choices=["debug", "debug_no_save", "non_debug"],
            default="debug_no_save",
            help="Debug mode setting"
        )
        parser.add_argument("--visibility-threshold", type=float, default=self.visibility_threshold,
                            help="Minimum landmark visibility for a limb to be trusted")
        parser.add_argument("--landmark-smoothing", type=float, default=self.landmark_smoothing,
                            help="EMA factor applied to landmark positions")
        parser.add_argument("--angle-smoothing", type=float, default=self.angle_smoothing,
                            help="EMA factor applied to joint angles")
        parser.add_argument("--no-detection-frames", type=int, default=self.no_detection_frames,
                            help="Empty frames tolerated before angles reset")
        parser.add_argument("--fps", type=float, default=self.target_fps, help="Nominal frame rate")
        parser.add_argument("--host", default=self.host)
        parser.add_argument("--port", type=int, default=self.port)
        args = parser.parse_args(argv)

        self.debug_mode = args.mode
        self.save_frames = (self.debug_mode == "debug")
        self.visibility_threshold = args.visibility_threshold
        self.landmark_smoothing = args.landmark_smoothing
        self.angle_smoothing = args.angle_smoothing
        self.no_detection_frames = args.no_detection_frames
        self.target_fps = args.fps
        self.host = args.host
        self.port = args.port

        # Create debug trace directory if needed
        if self.save_frames:
            self.debug_dir = Path("debug_frames")
            self.debug_dir.mkdir(exist_ok=True)

    @property
    def mode_description(self) -> str:
        """Get human-readable description of current mode"""
        return self.mode_descriptions[self.debug_mode]

# Global configuration instance - import this in other modules
config = Config()
