import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20 MB
TEXT_EXTENSIONS = {'.txt', '.docx', '.pdf'}
AUDIO_EXTENSIONS = {'.mp3', '.wav', '.m4a', '.webm', '.ogg'}
DOCUMENT_EXTENSIONS = TEXT_EXTENSIONS | AUDIO_EXTENSIONS

PROVIDERS = ('openai', 'anthropic', 'perplexity', 'deepseek', 'gemini')
DEFAULT_PROVIDER = os.getenv('DEFAULT_PROVIDER', 'openai')

DEFAULT_MODELS = {
    'openai': 'gpt-4o',
    'anthropic': 'claude-3-5-sonnet-20241022',
    'perplexity': 'sonar',
    'deepseek': 'deepseek-chat',
    'gemini': 'gemini-2.0-flash',
}

PROVIDER_KEYS = {
    'openai': 'OPENAI_API_KEY',
    'anthropic': 'ANTHROPIC_API_KEY',
    'perplexity': 'PERPLEXITY_API_KEY',
    'deepseek': 'DEEPSEEK_API_KEY',
    'gemini': 'GEMINI_API_KEY',
}

PROVIDER_BASE_URLS = {
    'perplexity': 'https://api.perplexity.ai',
    'deepseek': 'https://api.deepseek.com/v1',
}

MAX_TOKENS = int(os.getenv('MAX_TOKENS', '4000'))

# Chunking
PREVIEW_CHUNK_WORDS = 500
REWRITE_CHUNK_WORDS = 800
REWRITE_OVERLAP_WORDS = 100
CHUNK_THRESHOLD_WORDS = 1000
SECONDS_PER_CHUNK = 30

# Rewrite source truncation (characters)
CONTENT_SOURCE_LIMIT = 3000
STYLE_SOURCE_LIMIT = 2000
GENRE_SAMPLE_CHARS = 3000

# AI detection
GPTZERO_API_URL = 'https://api.gptzero.me/v2/predict/text'
GPTZERO_MAX_CHARS = 9500
MIN_DETECTION_CHARS = 50

GOOGLE_SEARCH_URL = 'https://www.googleapis.com/customsearch/v1'
HTTP_TIMEOUT = int(os.getenv('HTTP_TIMEOUT', '60'))


def model_for(provider: str) -> str:
    return os.getenv(f'{provider.upper()}_MODEL', DEFAULT_MODELS[provider])


def api_key_for(provider: str):
    return os.getenv(PROVIDER_KEYS[provider])
