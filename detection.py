import logging
import os
from typing import Dict

import requests

import config

logger = logging.getLogger(__name__)


def confidence_label(probability: float) -> str:
    if probability < 0.4:
        return "Low"
    if probability > 0.7:
        return "High"
    return "Medium"


def _result(is_ai: bool, confidence: str, details: str, probability=None) -> Dict:
    return {
        'isAIGenerated': is_ai,
        'confidence': confidence,
        'probability': probability,
        'details': details,
    }


def _generated_probability(data) -> float:
    if not isinstance(data, dict):
        return 0.0
    documents = data.get('documents')
    if isinstance(documents, list) and documents:
        document = documents[0]
    else:
        document = data.get('document')
    if not isinstance(document, dict):
        return 0.0
    try:
        return max(0.0, min(1.0, float(document.get('completely_generated_prob') or 0)))
    except (TypeError, ValueError):
        return 0.0


def detect_ai(text: str) -> Dict:
    """Ask GPTZero whether ``text`` was written by an AI model."""
    if not isinstance(text, str):
        return _result(False, "Low", "Invalid text format for detection")
    trimmed = text.strip()
    if len(trimmed) < config.MIN_DETECTION_CHARS:
        return _result(False, "Low", "Text too short for reliable detection")

    api_key = os.getenv('GPTZERO_API_KEY')
    if not api_key:
        logger.warning("GPTZERO_API_KEY not set, AI detection unavailable")
        return _result(False, "Low", "API key not configured - detection service unavailable")

    document = trimmed[:config.GPTZERO_MAX_CHARS]
    logger.info(f"Sending {len(document)} characters to GPTZero")
    try:
        response = requests.post(
            config.GPTZERO_API_URL,
            json={'document': document},
            headers={
                'x-api-key': api_key,
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            },
            timeout=config.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"GPTZero detection failed: {e}")
        return _result(False, "Low", f"GPTZero detection service error: {e}")

    probability = _generated_probability(data)

    if probability > 0.5:
        details = f"This text has a {round(probability * 100)}% probability of being AI-generated according to GPTZero."
    else:
        details = "Analysis based on GPTZero's specialized AI detection."
    return _result(probability > 0.5, confidence_label(probability), details, probability)
