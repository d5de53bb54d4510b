import json
import time

from config import config
from models.schemas import FrameOutput
from utils.logging_utils import logger

class DebugService:
    """
    Debug frame trace recording for development and threshold tuning.
    Appends one JSON line per processed frame when debug mode saving is enabled.
    """

    @staticmethod
    def save_frame_trace(session_id: str, output: FrameOutput):
        """
        Append the frame's angles, feedback and rep count to debug_frames/<session_id>.jsonl.
        Trace writing never interrupts the frame loop.
        """
        if not config.save_frames or not config.debug_dir:
            return

        record = {
            "session": session_id,
            "frame": output.frame_index,
            "time": time.time(),
            "pose_detected": output.pose_detected,
            "tracking": output.is_tracking,
            "angles": output.angles.model_dump(),
            "feedback": output.feedback,
            "reps": output.rep_count,
            "valid": output.validation.valid if output.validation else None,
        }

        filepath = config.debug_dir / f"trace_{session_id}.jsonl"
        try:
            with open(filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
            logger.debug(f"Debug trace saved: frame {output.frame_index} -> {filepath.name}")
        except OSError as e:
            logger.error(f"Error saving debug trace: {e}")

# Global service instance
debug_service = DebugService()
