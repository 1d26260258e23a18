"""Option inference for nativefier."""

from .inference import OptionsInference, OptionsInferenceService, infer_title, normalize_url

__all__ = ["OptionsInference", "OptionsInferenceService", "infer_title", "normalize_url"]
