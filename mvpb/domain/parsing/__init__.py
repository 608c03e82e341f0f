"""Pure parsers over accumulated model output."""

from .code_blocks import extract_files
from .language import detect_language, normalize_language
from .narrative import extract_narrative
from .step_inference import STEP_RULES, infer_current_step

__all__ = [
    "extract_files",
    "detect_language",
    "normalize_language",
    "extract_narrative",
    "STEP_RULES",
    "infer_current_step",
]
