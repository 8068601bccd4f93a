"""
Model router for selecting the model and sampling settings per interview feature.
"""
from typing import Dict, Any
from app.core.config import INTERVIEW_MODEL

# Feature -> generation settings
MODEL_ROUTING: Dict[str, Dict[str, Any]] = {
    "interview_question": {"model": INTERVIEW_MODEL, "temperature": 0.7, "max_tokens": 300},
    "interview_evaluation": {"model": INTERVIEW_MODEL, "temperature": 0.3, "max_tokens": 600},
    "interview_summary": {"model": INTERVIEW_MODEL, "temperature": 0.7, "max_tokens": 600},
}

DEFAULT_ROUTE: Dict[str, Any] = {"model": INTERVIEW_MODEL, "temperature": 0.7, "max_tokens": 1024}


def get_route_for_feature(feature: str) -> Dict[str, Any]:
    """
    Get generation settings for a feature.

    Args:
        feature: Feature name (e.g., "interview_question", "interview_evaluation")

    Returns:
        Dict with model, temperature and max_tokens
    """
    return MODEL_ROUTING.get(feature, DEFAULT_ROUTE)
