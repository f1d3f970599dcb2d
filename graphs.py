"""Charts drawn from a plain-language description.

The LLM picks the chart type, the labels and the data points (sampling a
function, or inventing plausible figures for economic or scientific
requests); matplotlib renders them to SVG.
"""
import io
import logging
from numbers import Number
from typing import Dict, List, Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt  # noqa: E402

import providers  # noqa: E402

logger = logging.getLogger(__name__)

GRAPH_TYPES = ('line', 'bar', 'scatter', 'pie', 'area')
DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 400
MIN_SIZE, MAX_SIZE = 200, 2000
COLORS = ['#2563eb', '#dc2626', '#16a34a', '#d97706', '#7c3aed', '#0891b2', '#db2777', '#65a30d']

GRAPH_SYSTEM_PROMPT = ("You are an expert data visualization assistant. Generate realistic, "
                       "appropriate data for graphs based on user requests.")


def create_graph_prompt(description: str) -> str:
    return f"""Analyze this graph request and return ONLY valid JSON:
{{
  "graphType": "{'|'.join(GRAPH_TYPES)}",
  "title": "Graph title",
  "xLabel": "X-axis label",
  "yLabel": "Y-axis label",
  "data": [{{"x": number or category label, "y": number}}],
  "description": "Brief description of what the graph shows"
}}

Request: "{description}"

Guidelines:
1. For a mathematical function (y=x^2, sin(x), ...) sample it over a sensible domain, -10 to 10 by default
2. For economic or scientific data, create realistic sample data with appropriate scales and units
3. Choose the most appropriate graph type for the data
4. Generate 10-50 points for functions and time series, 5-10 categories for categorical data"""


def _size(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(MIN_SIZE, min(MAX_SIZE, number))


def _plain(text) -> str:
    # a stray pair of dollar signs would be parsed as mathtext
    return str(text or '').replace('$', r'\$')


def normalize_points(data) -> List[Dict]:
    """Accept numbers, ``[x, y]`` pairs, ``{x, y}`` or ``{label, value}`` objects.

    Bare numbers are plotted against their position. Points whose y value is
    not a number are dropped.
    """
    if not isinstance(data, list):
        return []
    points = []
    for index, item in enumerate(data):
        if isinstance(item, dict):
            x = item.get('x', item.get('label', index))
            y = item.get('y', item.get('value'))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            x, y = item
        else:
            x, y = index, item
        try:
            y = float(y)
        except (TypeError, ValueError):
            continue
        points.append({'x': x, 'y': y})
    return points


def _categorical(points) -> bool:
    return not all(isinstance(p['x'], Number) and not isinstance(p['x'], bool) for p in points)


def render_svg(points: List[Dict], graph_type: str, title: str = '', x_label: str = '',
               y_label: str = '', width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> str:
    if not points:
        raise ValueError("No data points to plot")
    if graph_type not in GRAPH_TYPES:
        raise ValueError(f"Unknown graph type '{graph_type}'. Allowed types: {', '.join(GRAPH_TYPES)}")

    ys = [p['y'] for p in points]
    fig, ax = plt.subplots(figsize=(width / 100, height / 100), dpi=100)
    try:
        if graph_type == 'pie':
            if any(y < 0 for y in ys) or sum(ys) <= 0:
                raise ValueError("Pie charts need non-negative values with a positive total")
            ax.pie(ys, labels=[_plain(p['x']) for p in points], colors=COLORS,
                   autopct='%1.1f%%', startangle=90,
                   wedgeprops=dict(edgecolor='white', linewidth=1.5))
            ax.axis('equal')
        else:
            if graph_type == 'bar' or _categorical(points):
                xs = list(range(len(points)))
                ax.set_xticks(xs)
                ax.set_xticklabels([_plain(p['x']) for p in points], fontsize=8,
                                   rotation=20 if len(points) > 6 else 0)
            else:
                xs = [p['x'] for p in points]

            if graph_type == 'bar':
                ax.bar(xs, ys, color=COLORS[0], width=0.6, edgecolor='white')
            elif graph_type == 'scatter':
                ax.scatter(xs, ys, color=COLORS[0], s=18)
            elif graph_type == 'area':
                ax.fill_between(xs, ys, color=COLORS[0], alpha=0.3)
                ax.plot(xs, ys, color=COLORS[0], linewidth=1.5)
            else:
                ax.plot(xs, ys, color=COLORS[0], linewidth=1.5)

            ax.set_xlabel(_plain(x_label), fontsize=9)
            ax.set_ylabel(_plain(y_label), fontsize=9)
            ax.grid(alpha=0.3)
            ax.spines['top'].set_visible(False)
            ax.spines['right'].set_visible(False)
        ax.set_title(_plain(title), fontsize=11, fontweight='bold')
        fig.tight_layout()

        buf = io.BytesIO()
        with matplotlib.rc_context({'svg.fonttype': 'none'}):
            fig.savefig(buf, format='svg', metadata={'Date': None})
        return buf.getvalue().decode('utf-8')
    finally:
        plt.close(fig)


def generate_graph(description: str = '', provider: Optional[str] = None, graph_type: Optional[str] = None,
                   title: Optional[str] = None, x_label: Optional[str] = None, y_label: Optional[str] = None,
                   data=None, width=None, height=None) -> Dict:
    """Build an SVG chart from ``description``.

    Explicit ``graph_type``, labels and ``data`` override what the model
    suggests. When ``data`` is given the model is not consulted at all.
    """
    if graph_type in (None, '', 'auto'):
        graph_type = None
    elif graph_type not in GRAPH_TYPES:
        raise ValueError(f"Unknown graph type '{graph_type}'. Allowed types: {', '.join(GRAPH_TYPES)}")

    analysis = {}
    if data is None:
        if not description or not description.strip():
            raise ValueError("Graph description is required")
        reply = providers.complete(create_graph_prompt(description), provider=provider,
                                   system=GRAPH_SYSTEM_PROMPT, temperature=0.3)
        analysis = providers.extract_json(reply)
        data = analysis.get('data')

    suggested = analysis.get('graphType')
    graph_type = graph_type or (suggested if suggested in GRAPH_TYPES else 'line')
    title = title or str(analysis.get('title') or 'Generated graph')
    points = normalize_points(data)
    logger.info(f"Rendering {graph_type} graph with {len(points)} points")

    svg = render_svg(
        points, graph_type, title,
        x_label or str(analysis.get('xLabel') or ''),
        y_label or str(analysis.get('yLabel') or ''),
        _size(width, DEFAULT_WIDTH), _size(height, DEFAULT_HEIGHT),
    )
    return {
        'svg': svg,
        'title': title,
        'description': str(analysis.get('description') or description or 'Generated graph'),
        'graphType': graph_type,
        'points': points,
    }
