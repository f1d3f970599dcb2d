import io
import re
from typing import Dict, List, Tuple
from xml.sax.saxutils import escape

from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
PDF_MIMETYPE = 'application/pdf'
TXT_MIMETYPE = 'text/plain'


def strip_tags(text: str) -> str:
    return re.sub(r'<[^>]+>', '', text or '')


def format_analysis_txt(analysis: Dict, framework_name: str) -> str:
    """Render a framework analysis as a plain-text report."""
    lines = [
        f"{framework_name.upper()} ANALYSIS REPORT",
        '=' * 50,
        '',
        f"Overall Score: {analysis.get('overallScore', 0)}/100",
        '',
        'DETAILED METRICS:',
        '==================',
        '',
    ]
    for index, score in enumerate(analysis.get('scores', []), start=1):
        lines.append(f"{index}. {score.get('metric', '')}")
        lines.append(f"Score: {score.get('score', 0)}/100")
        lines.append(f"Assessment: {score.get('assessment', '')}")
        lines.append(f"Strengths: {', '.join(score.get('strengths', []))}")
        lines.append(f"Weaknesses: {', '.join(score.get('weaknesses', []))}")
        lines.append('')
    lines += [
        'SUMMARY:',
        '=========',
        analysis.get('summary', ''),
        '',
        'VERDICT:',
        '========',
        analysis.get('verdict', ''),
    ]
    return '\n'.join(lines)


def analysis_sections(analysis: Dict) -> List[Tuple[str, str]]:
    """Split a framework analysis into (heading, body) pairs for docx/pdf output."""
    sections = [('Overall Score', f"{analysis.get('overallScore', 0)}/100")]
    for index, score in enumerate(analysis.get('scores', []), start=1):
        body = '\n'.join([
            f"Score: {score.get('score', 0)}/100",
            f"Assessment: {score.get('assessment', '')}",
            f"Strengths: {', '.join(score.get('strengths', []))}",
            f"Weaknesses: {', '.join(score.get('weaknesses', []))}",
        ])
        sections.append((f"{index}. {score.get('metric', '')}", body))
    sections.append(('Summary', analysis.get('summary', '')))
    sections.append(('Verdict', analysis.get('verdict', '')))
    return sections


def build_docx(title: str, text: str) -> bytes:
    doc = Document()
    doc.add_heading(title, 0)
    for paragraph in strip_tags(text).split('\n\n'):
        if paragraph.strip():
            doc.add_paragraph(paragraph.strip())
    doc_io = io.BytesIO()
    doc.save(doc_io)
    return doc_io.getvalue()


def build_pdf(title: str, sections: List[Tuple[str, str]]) -> bytes:
    buffer = io.BytesIO()
    pdf = SimpleDocTemplate(buffer, pagesize=A4, title=title)
    styles = getSampleStyleSheet()
    story = [Paragraph(escape(title), styles['Title']), Spacer(1, 12)]
    for heading, body in sections:
        if heading:
            story.append(Paragraph(escape(heading), styles['Heading2']))
        for paragraph in strip_tags(body).split('\n'):
            if paragraph.strip():
                story.append(Paragraph(escape(paragraph.strip()), styles['BodyText']))
        story.append(Spacer(1, 8))
    pdf.build(story)
    return buffer.getvalue()


def text_sections(text: str) -> List[Tuple[str, str]]:
    return [('', paragraph) for paragraph in strip_tags(text).split('\n\n') if paragraph.strip()]


def download_name(title: str, extension: str) -> str:
    stem = re.sub(r'[^A-Za-z0-9_-]+', '_', title.strip()).strip('_') or 'document'
    return f"{stem}.{extension}"
