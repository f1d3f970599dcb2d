import logging
import re
from difflib import ndiff
from typing import Dict, List, Optional, Tuple

import providers

logger = logging.getLogger(__name__)

RIP_OFF_LABELS = [
    "Unrelated",
    "Superficially similar",
    "Possibly derivative",
    "Likely derivative",
    "Clear rip-off",
]
DEVELOPMENT_DIRECTIONS = ['A develops B', 'B develops A', 'mutual development', 'no development']
AFFINITY_CLASSES = [
    'Doctrinally kindred',
    'Methodologically kindred',
    'Doctrinally opposed',
    'Methodologically opposed',
    'Ambiguous / Neutral',
]


def tag_word_diff(line1: str, line2: str) -> Tuple[str, str]:
    diff = ndiff(line1.split(), line2.split())
    tagged_line1, tagged_line2 = [], []

    for word in diff:
        if word.startswith('- '):
            tagged_line1.append(f"<del>{word[2:]}</del>")
        elif word.startswith('+ '):
            tagged_line2.append(f"<ins>{word[2:]}</ins>")
        elif word.startswith('  '):
            word_clean = word[2:]
            tagged_line1.append(word_clean)
            tagged_line2.append(word_clean)
    return ' '.join(tagged_line1), ' '.join(tagged_line2)


def diff_revision(original: str, revised: str) -> List[Dict]:
    """Paragraph-by-paragraph word diff of a rewrite against its source."""
    paragraphs1 = [p.strip() for p in re.split(r'\n\s*\n', original or '') if p.strip()]
    paragraphs2 = [p.strip() for p in re.split(r'\n\s*\n', revised or '') if p.strip()]
    results = []
    for i in range(max(len(paragraphs1), len(paragraphs2))):
        para1 = paragraphs1[i] if i < len(paragraphs1) else ""
        para2 = paragraphs2[i] if i < len(paragraphs2) else ""
        tagged1, tagged2 = tag_word_diff(para1, para2)
        results.append({
            'paragraph': i + 1,
            'original': tagged1,
            'revised': tagged2,
            'changed': para1.split() != para2.split(),
        })
    return results


def _similarity(value) -> int:
    try:
        number = round(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, number))


def compare_passages(text_a: str, text_b: str, provider: Optional[str] = None,
                     title_a: str = "Text A", title_b: str = "Text B") -> Dict:
    """Multi-dimensional comparison of two passages.

    Covers content overlap, style, whether one passage is derivative of the
    other, the direction of intellectual development, and doctrinal or
    methodological affinity.
    """
    if not text_a or not text_a.strip() or not text_b or not text_b.strip():
        raise ValueError("Both texts are required")

    prompt = f"""You are an advanced text comparison analyzer. Compare the two texts below on
content similarity (lexical overlap, conceptual paraphrase, argument structure), stylistic
similarity (sentence rhythm, rhetorical devices, tone), epistemic profile (compression,
abstraction, inferential complexity) and subject matter.

{title_a.upper()}:
{text_a}

{title_b.upper()}:
{text_b}

Return ONLY valid JSON:
{{
  "overallSimilarityScore": 0-100,
  "ripOffRisk": {{
    "label": "one of: {' | '.join(RIP_OFF_LABELS)}",
    "explanation": "why",
    "matchingSections": ["closely matching passages, if any"]
  }},
  "developmentRelationship": {{
    "direction": "one of: {' | '.join(DEVELOPMENT_DIRECTIONS)}",
    "description": "how one text builds on the other"
  }},
  "doctrinalAffinity": {{
    "classification": "one of: {' | '.join(AFFINITY_CLASSES)}",
    "justification": "why",
    "contentAgreement": 0-10,
    "methodologicalSimilarity": 0-10
  }},
  "detailedAnalysis": "several paragraphs of comparative analysis"
}}"""
    reply = providers.complete(prompt, provider=provider, temperature=0.3)
    parsed = providers.extract_json(reply)

    rip_off = providers.as_dict(parsed.get('ripOffRisk'))
    development = providers.as_dict(parsed.get('developmentRelationship'))
    affinity = providers.as_dict(parsed.get('doctrinalAffinity'))

    direction = development.get('direction')
    if direction not in DEVELOPMENT_DIRECTIONS:
        direction = 'no development'
    classification = affinity.get('classification')
    if classification not in AFFINITY_CLASSES:
        classification = 'Ambiguous / Neutral'

    return {
        'overallSimilarityScore': _similarity(parsed.get('overallSimilarityScore')),
        'ripOffRisk': {
            'label': str(rip_off.get('label', 'Unrelated')),
            'explanation': str(rip_off.get('explanation', '')),
            'matchingSections': providers.as_list(rip_off.get('matchingSections')),
        },
        'developmentRelationship': {
            'direction': direction,
            'description': str(development.get('description', '')),
        },
        'doctrinalAffinity': {
            'classification': classification,
            'justification': str(affinity.get('justification', '')),
            'contentAgreement': min(10, _similarity(affinity.get('contentAgreement'))),
            'methodologicalSimilarity': min(10, _similarity(affinity.get('methodologicalSimilarity'))),
        },
        'detailedAnalysis': str(parsed.get('detailedAnalysis', '')),
    }
