import logging
from typing import Dict, Optional

import config
import providers

logger = logging.getLogger(__name__)

GENRES = [
    "Mathematical Logic/Formal Proof",
    "Philosophical Argumentation",
    "Empirical Research/Analysis",
    "Literary/Textual Criticism",
    "Theological/Religious Discourse",
    "Scientific Theory/Hypothesis",
    "Legal Argumentation",
    "Historical Analysis",
    "Mixed/Interdisciplinary",
]

# Percentage weights per evaluation parameter
GENRE_WEIGHTS = {
    "Mathematical Logic/Formal Proof": {
        'inferentialStructure': 40, 'conceptualControl': 35,
        'argumentativeIntegrity': 15, 'synthesisIntegration': 10,
    },
    "Philosophical Argumentation": {
        'inferentialStructure': 25, 'conceptualControl': 30,
        'argumentativeIntegrity': 25, 'synthesisIntegration': 20,
    },
    "Empirical Research/Analysis": {
        'inferentialStructure': 25, 'conceptualControl': 20,
        'argumentativeIntegrity': 30, 'synthesisIntegration': 25,
    },
    "Literary/Textual Criticism": {
        'inferentialStructure': 20, 'conceptualControl': 25,
        'argumentativeIntegrity': 25, 'synthesisIntegration': 30,
    },
}
DEFAULT_WEIGHTS = {
    'inferentialStructure': 25, 'conceptualControl': 25,
    'argumentativeIntegrity': 25, 'synthesisIntegration': 25,
}

CRITERIA = {
    'provesWhatItSetsOut': 'Does the paper successfully demonstrate its stated thesis? Are conclusions warranted?',
    'worthinessOfGoal': 'Does it address significant questions in its field?',
    'nonTrivialityLevel': 'Does it tackle genuinely challenging problems with real insight?',
    'proofStrength': 'How rigorous and convincing is the argumentation? Is evidence well integrated?',
    'functionalWritingQuality': 'Is the writing precise and does it serve the argument?',
}

ASSESSMENT_FIELDS = [
    'thesisClarity',
    'evidenceQuality',
    'logicalStructure',
    'counterargumentHandling',
    'significanceOfContribution',
]

LABELS = ["Exceptional", "Strong", "Adequate", "Weak", "Poor"]


def cogency_label(score: float) -> str:
    if score >= 9:
        return "Exceptional"
    if score >= 7:
        return "Strong"
    if score >= 5:
        return "Adequate"
    if score >= 3:
        return "Weak"
    return "Poor"


def _score(value, low=1, high=10):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    return max(low, min(high, round(number, 1)))


def detect_genre(text: str, provider: Optional[str] = None) -> Dict:
    """Classify the genre of ``text`` and return weights for evaluating it."""
    if not text or not text.strip():
        raise ValueError("Text is required")
    genre_list = "\n".join(f"- {genre}" for genre in GENRES)
    prompt = f"""You are an expert in academic genre classification. Determine the genre or
disciplinary mode of the text below.

TEXT TO CLASSIFY:
{text[:config.GENRE_SAMPLE_CHARS]}

GENRE OPTIONS:
{genre_list}

Return ONLY valid JSON:
{{
  "genre": "one of the genre options",
  "confidence": number between 0 and 1,
  "reasoning": "why this genre classification"
}}"""
    reply = providers.complete(prompt, provider=provider, temperature=0.1, max_tokens=1500)
    try:
        parsed = providers.extract_json(reply)
    except ValueError as e:
        logger.warning(f"Genre detection returned unparseable output: {e}")
        parsed = {}

    genre = parsed.get('genre')
    if genre not in GENRES:
        genre = "Mixed/Interdisciplinary"
    try:
        confidence = max(0.0, min(1.0, float(parsed.get('confidence', 0))))
    except (TypeError, ValueError):
        confidence = 0.0
    return {
        'genre': genre,
        'confidence': confidence,
        'reasoning': str(parsed.get('reasoning', '')),
        'evaluationWeights': dict(GENRE_WEIGHTS.get(genre, DEFAULT_WEIGHTS)),
    }


def _criteria_block() -> str:
    return "\n".join(
        f"{i}. {name} (1-10): {question}"
        for i, (name, question) in enumerate(CRITERIA.items(), start=1)
    )


def _criteria_shape() -> str:
    return "{" + ", ".join(f'"{name}": 1-10' for name in CRITERIA) + "}"


def _normalize_proof_quality(raw) -> Dict[str, float]:
    raw = providers.as_dict(raw)
    return {name: _score(raw.get(name)) for name in CRITERIA}


def analyze_argument(text: str, title: str = "", provider: Optional[str] = None) -> Dict:
    """Evaluate a single paper for cogency and argumentative strength."""
    if not text or not text.strip():
        raise ValueError("Text is required")
    title = title or "Untitled Document"
    criteria_shape = _criteria_shape()
    assessment_shape = ",\n    ".join(f'"{field}": "2-3 sentence assessment"' for field in ASSESSMENT_FIELDS)
    prompt = f"""You are an expert evaluator of academic and scholarly writing. Complex, technical
arguments are not to be penalized for being demanding.

Paper Title: {title}
Paper Content:
{text}

EVALUATION CRITERIA:
{_criteria_block()}

Return ONLY valid JSON:
{{
  "overallCogencyScore": 1-10,
  "cogencyLabel": "{'/'.join(LABELS)}",
  "proofQuality": {criteria_shape},
  "detailedAssessment": {{
    {assessment_shape}
  }},
  "overallJudgment": "4-5 sentence overall assessment"
}}"""
    reply = providers.complete(prompt, provider=provider, temperature=0.3)
    parsed = providers.extract_json(reply)

    proof_quality = _normalize_proof_quality(parsed.get('proofQuality'))
    if parsed.get('overallCogencyScore') is not None:
        overall = _score(parsed.get('overallCogencyScore'))
    else:
        overall = round(sum(proof_quality.values()) / len(proof_quality), 1)
    label = parsed.get('cogencyLabel')
    if label not in LABELS:
        label = cogency_label(overall)
    details = providers.as_dict(parsed.get('detailedAssessment'))
    return {
        'overallCogencyScore': overall,
        'cogencyLabel': label,
        'proofQuality': proof_quality,
        'detailedAssessment': {field: str(details.get(field, '')) for field in ASSESSMENT_FIELDS},
        'overallJudgment': str(parsed.get('overallJudgment', '')),
    }


def compare_arguments(text_a: str, text_b: str, provider: Optional[str] = None) -> Dict:
    """Compare the argumentative strength of two papers on the same criteria."""
    if not text_a or not text_a.strip() or not text_b or not text_b.strip():
        raise ValueError("Both texts are required")
    criteria_shape = _criteria_shape()
    prompt = f"""You are an expert evaluator comparing the argumentative strength of two papers.

PAPER A:
{text_a}

PAPER B:
{text_b}

Rate both papers on each criterion:
{_criteria_block()}

Return ONLY valid JSON:
{{
  "paperAScore": 1-10,
  "paperBScore": 1-10,
  "comparisonBreakdown": {{
    "paperA": {criteria_shape},
    "paperB": {criteria_shape}
  }},
  "detailedComparison": "paragraph comparing the two papers",
  "reasoning": "why the stronger paper wins"
}}"""
    reply = providers.complete(prompt, provider=provider, temperature=0.3)
    parsed = providers.extract_json(reply)

    breakdown = providers.as_dict(parsed.get('comparisonBreakdown'))
    paper_a = _normalize_proof_quality(breakdown.get('paperA'))
    paper_b = _normalize_proof_quality(breakdown.get('paperB'))
    score_a = _score(parsed['paperAScore']) if parsed.get('paperAScore') is not None \
        else round(sum(paper_a.values()) / len(paper_a), 1)
    score_b = _score(parsed['paperBScore']) if parsed.get('paperBScore') is not None \
        else round(sum(paper_b.values()) / len(paper_b), 1)

    if score_a > score_b:
        winner = 'A'
    elif score_b > score_a:
        winner = 'B'
    else:
        winner = 'Tie'
    return {
        'winner': winner,
        'winnerScore': max(score_a, score_b),
        'paperAScore': score_a,
        'paperBScore': score_b,
        'comparisonBreakdown': {'paperA': paper_a, 'paperB': paper_b},
        'detailedComparison': str(parsed.get('detailedComparison', '')),
        'reasoning': str(parsed.get('reasoning', '')),
    }
