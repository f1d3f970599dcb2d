"""Framework scoring: intelligence, cogency, originality and quality.

Each framework is a fixed list of 40 metrics. The text and the metric list
are sent to an LLM which returns a score (0-100) with an assessment for
every metric, an overall score, a summary and a verdict.
"""
import logging
from typing import Dict, List, Optional

import providers

logger = logging.getLogger(__name__)

INTELLIGENCE_METRICS = [
    "Compression (density of meaning per word)",
    "Abstraction (ability to move beyond surface detail)",
    "Inference depth (multi-step reasoning)",
    "Epistemic friction (acknowledging uncertainty or limits)",
    "Cognitive distancing (seeing from outside a frame)",
    "Counterfactual reasoning",
    "Analogical depth (quality of comparisons)",
    "Semantic topology (connectedness of ideas)",
    "Asymmetry (unexpected but apt perspective shifts)",
    "Conceptual layering (multiple levels at once)",
    "Original definition-making",
    "Precision of terms",
    "Distinction-tracking (keeping categories straight)",
    "Avoidance of tautology",
    "Avoidance of empty generality",
    "Compression of examples into principle",
    "Ability to invert perspective",
    "Anticipation of objections",
    "Integration of disparate domains",
    "Self-reflexivity (awareness of own stance)",
    "Elimination of redundancy",
    "Conceptual economy (no waste concepts)",
    "Epistemic risk-taking (sticking neck out coherently)",
    "Generativity (producing new questions/angles)",
    "Ability to revise assumptions midstream",
    "Distinguishing signal vs. noise",
    "Recognizing hidden assumptions",
    "Tracking causal chains",
    "Separating correlation from causation",
    "Managing complexity without collapse",
    "Detecting paradox or tension",
    "Apt compression into aphorism",
    "Clarity under pressure (handling difficult material)",
    "Distinguishing levels (fact vs. meta-level)",
    "Relating concrete to abstract seamlessly",
    "Control of scope (not sprawling aimlessly)",
    "Detecting pseudo-intelligence",
    "Balancing simplicity with depth",
    "Strategic omission (knowing what not to say)",
    "Transferability (insight applies beyond the case)",
]

COGENCY_METRICS = [
    "Logical validity",
    "Absence of contradictions",
    "Strength of evidence/reasons",
    "Proportionality (conclusion matches support)",
    "Avoiding non sequiturs",
    "Explicit structure (clear argument shape)",
    "Distinction between premises and conclusion",
    "Consistent terminology",
    "Focus (avoiding drift)",
    "Avoiding circularity",
    "Handling counterexamples",
    "Responsiveness to objections",
    "Causal adequacy",
    "Inferential tightness",
    "Avoiding overgeneralization",
    "Avoiding straw man reasoning",
    "Recognizing scope limits",
    "Avoiding equivocation",
    "Hierarchy of reasons (primary vs. secondary)",
    "Consistency with background knowledge",
    "Recognizing exceptions",
    "Correct use of examples",
    "Avoidance of loaded language as substitute for reason",
    "Clear priority of claims",
    "Avoiding category mistakes",
    "Explicitness of assumptions",
    "Non-redundancy in support",
    "Alignment between thesis and support",
    "Avoidance of spurious precision",
    "Adequate differentiation (not lumping opposites)",
    "Soundness of analogies",
    "Progressive buildup (no jumps)",
    "Avoidance of double standards",
    "Balance of concession and assertion",
    "Clarity of logical connectives",
    "Preservation of distinctions across argument",
    "Avoiding irrelevant material",
    "Correct handling of probability",
    "Strength of causal explanation vs. correlation",
    "Stability under reformulation (holds when restated)",
]

ORIGINALITY_METRICS = [
    "Novel perspective",
    "Uncommon connections",
    "Surprising but apt analogies",
    "Invention of new distinctions",
    "Reframing of common problem",
    "New conceptual synthesis",
    "Fresh metaphors",
    "Generating new questions",
    "Counterintuitive insight that holds",
    "Unusual compression (shortcuts that work)",
    "Distilling cliché into clarity",
    "Reinterpreting tradition",
    "Productive paradox",
    "Idiosyncratic voice",
    "Unusual but precise phrasing",
    "Structural inventiveness (form matches thought)",
    "Surprising yet valid inference",
    "Non-standard angle on standard issue",
    "Repurposing known concept in new domain",
    "Avoiding mimicry",
    "Shunning jargon clichés",
    "Generating conceptual friction",
    "Independent pattern recognition",
    "Unexpected causal explanation",
    "Tension between domains (philosophy + science, etc.)",
    "Provocative but defensible claim",
    "Lateral connections (cross-field links)",
    "Subversion of default framing",
    "Detection of neglected detail",
    "Reverse engineering assumptions",
    "Productive misfit with genre/style",
    "Intellectually playful but rigorous",
    "Constructive violation of expectations",
    "Voice not reducible to formula",
    "Revaluing the obvious",
    "Absence of derivative cadence",
    "Independent synthesis of sources",
    "Discovery of hidden symmetry",
    "Generating terms others adopt",
    "Staying power (insight lingers after reading)",
]

QUALITY_METRICS = [
    "Clarity of expression",
    "Flow and readability",
    "Stylistic control",
    "Grammar and syntax precision",
    "Appropriate tone",
    "Balance of brevity and elaboration",
    "Coherence across sections",
    "Engagement/interest",
    "Rhythm of sentences",
    "Absence of filler",
    "Clear introduction of themes",
    "Effective closure/resolution",
    "Variety of sentence structure",
    "Apt vocabulary (not inflated)",
    "Avoiding clichés",
    "Consistency of style",
    "Accessibility (lay reader can follow)",
    "Respect for audience intelligence",
    "Memorability of phrasing",
    "Avoidance of redundancy",
    "Natural transitions",
    "Balanced paragraphing",
    "Pacing (not rushed, not dragging)",
    "Smooth handling of complexity",
    "Apt use of examples or illustration",
    "Ability to hold reader attention",
    "Economy of language",
    "Emphasis where needed",
    "Voice consistency",
    "Avoidance of awkwardness",
    "Seamless integration of quotes/sources",
    "Good proportion of abstract vs. concrete",
    "Non-mechanical style",
    "Absence of distracting errors",
    "Balance of analysis and narrative",
    "Cadence (natural spoken rhythm)",
    "Avoidance of pedantry",
    "Polish (reads as finished, not drafty)",
    "Unifying theme or through-line",
    "Overall reader impact (leaves an impression)",
]

FRAMEWORKS = {
    'intelligence': {
        'metrics': INTELLIGENCE_METRICS,
        'focus': 'intellectual power: compression, abstraction, inference depth and conceptual control',
    },
    'cogency': {
        'metrics': COGENCY_METRICS,
        'focus': 'logical rigor and argumentative strength',
    },
    'originality': {
        'metrics': ORIGINALITY_METRICS,
        'focus': 'intellectual originality: novel perspectives, syntheses and distinctions',
    },
    'quality': {
        'metrics': QUALITY_METRICS,
        'focus': 'overall writing quality: clarity, flow, style and polish',
    },
}

CALIBRATION = """CRITICAL CALIBRATION: Use the full scoring range.
- 95-99: Genius level (Freud, Kant, Wittgenstein)
- 85-94: Exceptional intellectual work (top university professors)
- 75-84: Superior capability (advanced graduate level)
- 60-74: Above average work
- Below 60: Average or below average"""

FALLBACK_SCORE = 50


def metrics_for(framework: str) -> List[str]:
    try:
        return FRAMEWORKS[framework]['metrics']
    except KeyError:
        raise ValueError(
            f"Unknown framework '{framework}'. Allowed frameworks: {', '.join(FRAMEWORKS)}"
        )


def create_framework_prompt(text: str, framework: str) -> str:
    metrics = metrics_for(framework)
    numbered = "\n".join(f"{i}. {metric}" for i, metric in enumerate(metrics, start=1))
    return f"""You are an expert evaluator of {FRAMEWORKS[framework]['focus']}.
Analyze the text below against each of the {len(metrics)} {framework} parameters.

{CALIBRATION}

For each parameter, quote the text directly and explain why the quote demonstrates
(or fails to demonstrate) the parameter.

TEXT TO ANALYZE:
\"\"\"
{text}
\"\"\"

PARAMETERS TO EVALUATE:
{numbered}

Return ONLY a valid JSON object with this exact structure:
{{
  "scores": [
    {{
      "metric": "metric name",
      "score": number from 0 to 100,
      "assessment": "\\"direct quote\\" -> explanation",
      "strengths": ["specific textual evidence"],
      "weaknesses": ["areas for improvement"]
    }}
  ],
  "overallScore": number from 0 to 100,
  "summary": "performance summary",
  "verdict": "final assessment of intellectual caliber"
}}"""


def _clamp(value, low: int, high: int, default: int):
    try:
        number = round(float(value))
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


def fallback_result(framework: str, reason: str) -> Dict:
    return {
        'frameworkType': framework,
        'scores': [
            {
                'metric': metric,
                'score': FALLBACK_SCORE,
                'assessment': 'Analysis parsing failed',
                'strengths': ['Unable to parse response'],
                'weaknesses': [reason],
            }
            for metric in metrics_for(framework)
        ],
        'overallScore': FALLBACK_SCORE,
        'verdict': 'Analysis could not be completed due to parsing error',
        'summary': 'The system encountered an error while processing the analysis',
    }


def parse_framework_response(response_text: str, framework: str) -> Dict:
    try:
        parsed = providers.extract_json(response_text)
    except ValueError as e:
        logger.warning(f"Could not parse {framework} analysis: {e}")
        return fallback_result(framework, str(e))

    scores = []
    raw_scores = parsed.get('scores')
    for entry in raw_scores if isinstance(raw_scores, list) else []:
        if not isinstance(entry, dict):
            continue
        scores.append({
            'metric': str(entry.get('metric', '')),
            'score': _clamp(entry.get('score'), 0, 100, FALLBACK_SCORE),
            'assessment': str(entry.get('assessment', '')),
            'strengths': providers.as_list(entry.get('strengths')),
            'weaknesses': providers.as_list(entry.get('weaknesses')),
        })

    if parsed.get('overallScore') is not None:
        overall = _clamp(parsed.get('overallScore'), 0, 100, FALLBACK_SCORE)
    elif scores:
        overall = round(sum(s['score'] for s in scores) / len(scores))
    else:
        overall = 0

    return {
        'frameworkType': framework,
        'scores': scores,
        'overallScore': overall,
        'verdict': str(parsed.get('verdict', '')),
        'summary': str(parsed.get('summary', '')),
    }


def analyze_framework(text: str, framework: str, provider: Optional[str] = None) -> Dict:
    """Score ``text`` on every metric of ``framework`` using ``provider``."""
    metrics_for(framework)
    if not text or not text.strip():
        raise ValueError("Text is required")
    name = providers.resolve_provider(provider)
    response_text = providers.complete(create_framework_prompt(text, framework), provider=name)
    result = parse_framework_response(response_text, framework)
    result['provider'] = name
    return result


def _winner(score_a, score_b) -> str:
    if score_a > score_b:
        return 'A'
    if score_b > score_a:
        return 'B'
    return 'Tie'


def compare_framework(text_a: str, text_b: str, framework: str,
                      provider: Optional[str] = None) -> Dict:
    analysis_a = analyze_framework(text_a, framework, provider)
    analysis_b = analyze_framework(text_b, framework, provider)

    comparison_prompt = f"""Compare these two {framework} analyses and explain which text performs better and why:

TEXT A OVERALL SCORE: {analysis_a['overallScore']}/100
TEXT B OVERALL SCORE: {analysis_b['overallScore']}/100

TEXT A SUMMARY: {analysis_a['summary']}
TEXT B SUMMARY: {analysis_b['summary']}

Provide a 2-3 sentence comparison explaining the key differences and which text demonstrates superior {framework}."""
    comparison = providers.complete(comparison_prompt, provider=analysis_a['provider'])

    return {
        'frameworkType': framework,
        'textA': analysis_a,
        'textB': analysis_b,
        'comparison': comparison,
        'winner': _winner(analysis_a['overallScore'], analysis_b['overallScore']),
    }
