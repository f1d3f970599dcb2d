import logging
import io
import os

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

import argumentative
import chunking
import compare
import config
import detection
import documents
import frameworks
import graphs
import providers
import reports
import rewriter
import search
from storage import storage

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO'),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

FRAMEWORK_RULE = 'any(intelligence, cogency, originality, quality):framework'

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_BYTES
CORS(app, resources={r"/api/*": {"origins": os.getenv('CORS_ORIGINS', '*')}})


def _payload():
    return request.get_json(silent=True) or {}


def _required_text(data, key, label=None):
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{label or key} is required")
    return value


def _optional_text(data, key):
    value = data.get(key)
    return value if isinstance(value, str) and value.strip() else None


def _positive_int(data, key, default):
    value = data.get(key)
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a whole number")
    if number <= 0:
        raise ValueError(f"{key} must be positive")
    return number


# Error handlers

@app.errorhandler(providers.UnknownProviderError)
@app.errorhandler(ValueError)
def handle_bad_request(e):
    return jsonify({'error': str(e)}), 400


@app.errorhandler(documents.DocumentError)
def handle_document_error(e):
    return jsonify({'error': str(e)}), 400


@app.errorhandler(providers.ProviderNotConfiguredError)
def handle_not_configured(e):
    logger.warning(f"Provider unavailable: {e}")
    return jsonify({'error': str(e)}), 503


@app.errorhandler(providers.ProviderError)
@app.errorhandler(search.SearchError)
def handle_upstream_error(e):
    logger.error(f"Upstream service error: {e}")
    return jsonify({'error': str(e)}), 502


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    limit_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
    return jsonify({'error': f'File too large. Maximum size is {limit_mb}MB.'}), 413


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return jsonify({'error': e.description}), e.code
    logger.exception(f"Unhandled error on {request.path}: {e}")
    return jsonify({'error': f'Request failed: {e}'}), 500


# Providers and uploads

@app.route('/api/provider-status', methods=['GET', 'POST'])
def provider_status():
    return jsonify(providers.provider_status()), 200


@app.route('/api/upload', methods=['POST'])
def upload_document():
    if 'file' not in request.files:
        return jsonify({'error': 'No file uploaded'}), 400
    result = documents.extract_text(request.files['file'])
    result['shouldChunk'] = chunking.should_chunk(result['text'])
    return jsonify(result), 200


@app.route('/api/dictation', methods=['POST'])
def dictation():
    if 'audio' not in request.files:
        return jsonify({'error': 'No audio file uploaded'}), 400
    audio = request.files['audio']
    extension = documents.file_extension(audio.filename)
    is_audio = (audio.mimetype or '').startswith('audio/') or extension in config.AUDIO_EXTENSIONS
    if not is_audio:
        return jsonify({'error': 'Only audio files are allowed for dictation'}), 400

    filename = audio.filename if extension in config.AUDIO_EXTENSIONS else 'dictation.webm'
    text = documents.DocumentProcessor.transcribe_audio(audio.read(), filename)
    return jsonify({'text': text, 'success': True}), 200


@app.route('/api/detect-ai', methods=['POST'])
def detect_ai():
    text = _required_text(_payload(), 'text', 'Text')
    logger.info(f"AI detection request for {len(text)} chars")
    return jsonify(detection.detect_ai(text)), 200


# Scoring

@app.route(f'/api/analyze/<{FRAMEWORK_RULE}>', methods=['POST'])
def analyze_framework(framework):
    data = _payload()
    text = _required_text(data, 'text', 'Text')
    provider = data.get('provider')
    logger.info(f"{framework.capitalize()} analysis request: {len(text)} chars, provider {provider}")

    result = frameworks.analyze_framework(text, framework, provider)
    saved = storage.create_analysis(framework, text, result, passage_a_title=data.get('title'))
    result['analysisId'] = saved['id']
    return jsonify(result), 200


@app.route(f'/api/compare/<{FRAMEWORK_RULE}>', methods=['POST'])
def compare_framework(framework):
    data = _payload()
    text_a = _required_text(data, 'textA')
    text_b = _required_text(data, 'textB')
    provider = data.get('provider')
    logger.info(
        f"{framework.capitalize()} comparison request: {len(text_a)} / {len(text_b)} chars, provider {provider}"
    )

    result = frameworks.compare_framework(text_a, text_b, framework, provider)
    saved = storage.create_analysis(
        f'{framework}-comparison', text_a, result, passage_b=text_b,
        passage_a_title=data.get('titleA'), passage_b_title=data.get('titleB'),
    )
    result['analysisId'] = saved['id']
    return jsonify(result), 200


@app.route('/api/analyze/argumentative', methods=['POST'])
def analyze_argumentative():
    data = _payload()
    text_a = _required_text(data, 'textA')
    text_b = _optional_text(data, 'textB')
    provider = data.get('provider')

    if text_b:
        result = {'comparativeAnalysis': argumentative.compare_arguments(text_a, text_b, provider)}
    else:
        result = {'singlePaperAnalysis': argumentative.analyze_argument(text_a, data.get('titleA', ''), provider)}
    saved = storage.create_analysis(
        'argumentative', text_a, result, passage_b=text_b,
        passage_a_title=data.get('titleA'), passage_b_title=data.get('titleB'),
    )
    result['analysisId'] = saved['id']
    return jsonify(result), 200


@app.route('/api/analyze/enhanced-comparison', methods=['POST'])
def enhanced_comparison():
    data = _payload()
    text_a = _required_text(data, 'textA')
    text_b = _required_text(data, 'textB')

    result = compare.compare_passages(
        text_a, text_b, data.get('provider'),
        title_a=data.get('titleA') or 'Text A', title_b=data.get('titleB') or 'Text B',
    )
    saved = storage.create_analysis(
        'enhanced-comparison', text_a, result, passage_b=text_b,
        passage_a_title=data.get('titleA'), passage_b_title=data.get('titleB'),
    )
    result['analysisId'] = saved['id']
    return jsonify(result), 200


@app.route('/api/detect-genre', methods=['POST'])
def detect_genre():
    data = _payload()
    text = _required_text(data, 'text', 'Text')
    return jsonify(argumentative.detect_genre(text, data.get('provider'))), 200


@app.route('/api/analyses', methods=['GET'])
def recent_analyses():
    limit = request.args.get('limit', default=10, type=int)
    return jsonify(storage.get_recent_analyses(limit)), 200


@app.route('/api/analyses/<int:analysis_id>', methods=['GET'])
def get_analysis(analysis_id):
    analysis = storage.get_analysis(analysis_id)
    if not analysis:
        return jsonify({'error': 'Analysis not found'}), 404
    return jsonify(analysis), 200


# Chunking and rewriting

@app.route('/api/chunk-text', methods=['POST'])
def chunk_text():
    data = _payload()
    text = _required_text(data, 'text', 'Text')
    chunk_size = _positive_int(data, 'chunkSize', config.PREVIEW_CHUNK_WORDS)
    return jsonify({
        'chunks': chunking.chunk_text(text, chunk_size),
        'stats': chunking.document_stats(text),
        'shouldChunk': chunking.should_chunk(text),
    }), 200


@app.route('/api/get-document-chunks', methods=['POST'])
def get_document_chunks():
    data = _payload()
    text = _required_text(data, 'sourceText', 'Source text')
    max_words = _positive_int(data, 'maxWordsPerChunk', config.REWRITE_CHUNK_WORDS)
    chunks = rewriter.document_chunks(text, max_words, bool(data.get('preserveMath', True)))
    return jsonify({
        'chunks': [
            {
                'id': chunk['id'],
                'content': chunk['content'],
                'word_count': chunk['word_count'],
                'preview': chunking.preview(chunk['content']),
                'has_math': chunk['has_math'],
            }
            for chunk in chunks
        ],
        'totalChunks': len(chunks),
        'estimatedTime': chunking.estimate_processing_time(chunks),
    }), 200


@app.route('/api/rewrite-document', methods=['POST'])
def rewrite_document():
    data = _payload()
    text = _required_text(data, 'text', 'Text')
    instructions = _required_text(data, 'instructions', 'Rewrite instructions')
    options = {
        'content_source': _optional_text(data, 'contentSource'),
        'style_source': _optional_text(data, 'styleSource'),
        'preserve_math': bool(data.get('preserveMath', True)),
    }

    if chunking.should_chunk(text):
        rewritten = rewriter.rewrite_chunks(text, instructions, data.get('provider'), **options)['text']
    else:
        rewritten = rewriter.rewrite_document(text, instructions, data.get('provider'), **options)
    return jsonify({
        'rewrittenText': rewritten,
        'changes': compare.diff_revision(text, rewritten),
    }), 200


@app.route('/api/rewrite-selected-chunks', methods=['POST'])
def rewrite_selected_chunks():
    data = _payload()
    text = _required_text(data, 'text', 'Text')
    instructions = _required_text(data, 'instructions', 'Rewrite instructions')
    chunk_ids = data.get('chunkIds') or None
    if chunk_ids is not None and not isinstance(chunk_ids, list):
        raise ValueError("chunkIds must be a list")

    result = rewriter.rewrite_chunks(
        text, instructions, data.get('provider'),
        chunk_ids=chunk_ids,
        content_source=_optional_text(data, 'contentSource'),
        style_source=_optional_text(data, 'styleSource'),
        preserve_math=bool(data.get('preserveMath', True)),
        max_words_per_chunk=_positive_int(data, 'maxWordsPerChunk', config.REWRITE_CHUNK_WORDS),
    )
    return jsonify(result), 200


@app.route('/api/solve-homework', methods=['POST'])
def solve_homework():
    data = _payload()
    assignment = _required_text(data, 'assignment', 'Assignment text')
    return jsonify({'solution': rewriter.solve_homework(assignment, data.get('provider'))}), 200


@app.route('/api/chat', methods=['POST'])
def chat():
    data = _payload()
    message = _required_text(data, 'message', 'Message')
    reply = rewriter.chat(message, _optional_text(data, 'context'), data.get('provider'))
    return jsonify({'message': reply}), 200


# Graphs

@app.route('/api/generate-graph', methods=['POST'])
def generate_graph():
    data = _payload()
    description = data.get('prompt') or data.get('description') or ''
    if not isinstance(description, str):
        raise ValueError("Prompt must be text")
    points = data.get('data')
    if points is not None and not isinstance(points, list):
        raise ValueError("data must be a list of points")
    logger.info(f"Graph generation request: {description[:100]!r}, provider {data.get('provider')}")

    result = graphs.generate_graph(
        description, data.get('provider'),
        graph_type=data.get('type'),
        title=_optional_text(data, 'title'),
        x_label=_optional_text(data, 'xLabel'),
        y_label=_optional_text(data, 'yLabel'),
        data=points,
        width=data.get('width'),
        height=data.get('height'),
    )
    return jsonify(result), 200


# Search

@app.route('/api/search', methods=['POST'])
def search_web():
    data = _payload()
    query = _required_text(data, 'query', 'Search query')
    results = search.search_google(query, int(data.get('numResults') or 5))
    return jsonify({'results': results}), 200


@app.route('/api/generate-search-queries', methods=['POST'])
def generate_search_queries():
    text = _required_text(_payload(), 'text', 'Text')
    return jsonify({'queries': search.generate_search_queries(text)}), 200


# Downloads

@app.route(f'/api/download-<{FRAMEWORK_RULE}>', methods=['POST'])
def download_framework_report(framework):
    analysis = _payload().get('analysisData')
    if not isinstance(analysis, dict) or not analysis.get('scores'):
        return jsonify({'error': 'Analysis data is required'}), 400

    content = reports.format_analysis_txt(analysis, framework.capitalize())
    return send_file(
        io.BytesIO(content.encode('utf-8')),
        mimetype=reports.TXT_MIMETYPE,
        as_attachment=True,
        download_name=f"{framework}-analysis.txt",
    )


@app.route('/api/download-document', methods=['POST'])
def download_document():
    data = _payload()
    title = data.get('title') or 'Document'
    file_format = (data.get('format') or 'docx').lower()
    analysis = data.get('analysisData')
    text = data.get('text') if isinstance(data.get('text'), str) else ''

    if not text.strip() and not isinstance(analysis, dict):
        return jsonify({'error': 'No text provided for download'}), 400

    if file_format == 'pdf':
        sections = reports.analysis_sections(analysis) if isinstance(analysis, dict) else reports.text_sections(text)
        content, mimetype = reports.build_pdf(title, sections), reports.PDF_MIMETYPE
    elif file_format == 'docx':
        if isinstance(analysis, dict):
            text = reports.format_analysis_txt(analysis, title).replace('\n', '\n\n')
        content, mimetype = reports.build_docx(title, text), reports.DOCX_MIMETYPE
    elif file_format == 'txt':
        if isinstance(analysis, dict):
            text = reports.format_analysis_txt(analysis, title)
        content, mimetype = reports.strip_tags(text).encode('utf-8'), reports.TXT_MIMETYPE
    else:
        return jsonify({'error': f"Unsupported format '{file_format}'. Use docx, pdf or txt"}), 400

    return send_file(
        io.BytesIO(content),
        mimetype=mimetype,
        as_attachment=True,
        download_name=reports.download_name(title, file_format),
    )


if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_DEBUG', '0') == '1', host='0.0.0.0', port=int(os.getenv('PORT', '5000')))
