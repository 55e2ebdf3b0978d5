"""
Configuration management for the clipgrade service.
"""
import copy
from typing import Dict, Any, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Settings
    app_name: str = "clipgrade - Video Submission Evaluation"
    version: str = "1.0.0"
    api_prefix: str = "/v1"
    log_level: str = "INFO"

    # Language policy thresholds (tuned against observed model failures)
    very_low_score_cutoff: int = 15          # overall in (0, cutoff) is forced to zero
    suspicious_score_ceiling: int = 40       # upper bound for the difficulty-phrase check
    suspicious_score_cutoff: int = 30        # overall must also be below this
    consistency_overall_floor: int = 50      # overall above this is cross-checked
    consistency_core_average_floor: int = 40 # core mean below this is inconsistent
    adjusted_score_bonus: int = 10
    adjusted_score_minimum: int = 10
    high_score_indicator_floor: int = 50

    # Parsing limits
    min_feedback_length: int = 20
    max_bullet_points: int = 8
    feedback_fallback_chars: int = 300
    meaningful_line_count: int = 5

    # Optional YAML file replacing the built-in language denylists
    lexicon_path: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_policy_config(overrides: Dict[str, Any] = None) -> Dict[str, Any]:
    """Get language policy configuration with optional overrides."""
    base_config = {
        "thresholds": {
            "very_low_score": settings.very_low_score_cutoff,
            "suspicious_ceiling": settings.suspicious_score_ceiling,
            "suspicious_cutoff": settings.suspicious_score_cutoff,
            "consistency_overall": settings.consistency_overall_floor,
            "consistency_core_average": settings.consistency_core_average_floor,
            "high_score_indicator": settings.high_score_indicator_floor,
        },
        "adjustment": {
            "bonus": settings.adjusted_score_bonus,
            "minimum": settings.adjusted_score_minimum,
        },
    }

    if overrides:
        # Deep merge overrides
        for key, value in overrides.items():
            if key in base_config and isinstance(base_config[key], dict):
                base_config[key].update(value)
            else:
                base_config[key] = value

    return base_config


def get_policy_presets() -> Dict[str, Dict[str, Any]]:
    """Get predefined threshold presets for the language policy."""
    presets = {
        "strict": {
            "name": "Strict (High Sensitivity)",
            "description": "Rejects more borderline submissions",
            "thresholds": {
                "very_low_score": 25,
                "suspicious_ceiling": 50,
                "suspicious_cutoff": 40,
                "consistency_overall": 45,
                "consistency_core_average": 45,
                "high_score_indicator": 40,
            }
        },
        "balanced": {
            "name": "Balanced (Default)",
            "description": "Thresholds matching production behavior",
            "thresholds": get_policy_config()["thresholds"],
        },
        "lenient": {
            "name": "Lenient (Low Sensitivity)",
            "description": "Only rejects clear violations",
            "thresholds": {
                "very_low_score": 10,
                "suspicious_ceiling": 30,
                "suspicious_cutoff": 20,
                "consistency_overall": 60,
                "consistency_core_average": 30,
                "high_score_indicator": 60,
            }
        },
    }
    return copy.deepcopy(presets)
