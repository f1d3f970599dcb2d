"""Command-line analysis of a single document.

Usage: python doc_analyzer.py essay.docx --framework cogency --provider anthropic
"""
import argparse
import logging
import os
import sys
from datetime import datetime

import config
import documents
import frameworks
import providers
import reports

logger = logging.getLogger(__name__)


# --- Document Extraction ---
def extract_text_from_file(file_path):
    with open(file_path, 'rb') as f:
        data = f.read()
    return documents.DocumentProcessor.extract(data, os.path.basename(file_path))


# --- Save Report ---
def save_report(analysis, framework, output_path=None):
    if not output_path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = f"{framework}_report_{timestamp}.txt"
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(reports.format_analysis_txt(analysis, framework))
        f.write("\n")
    return output_path


def run_document_evaluation(file_path, framework, provider=None, output_path=None):
    text = extract_text_from_file(file_path)
    if not text.strip():
        raise documents.DocumentError(f"No text could be extracted from {file_path}")
    logger.info(f"Analyzing {file_path} ({len(text.split())} words) for {framework}")
    analysis = frameworks.analyze_framework(text, framework, provider)
    return save_report(analysis, framework, output_path)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Score a document with an LLM and save a text report.")
    parser.add_argument("file", help="txt, docx, pdf or audio file to analyze")
    parser.add_argument("--framework", choices=list(frameworks.FRAMEWORKS), default="intelligence")
    parser.add_argument("--provider", choices=list(config.PROVIDERS), default=None)
    parser.add_argument("--output", help="where to write the report (default: timestamped file)")
    return parser.parse_args(argv)


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    args = parse_args(argv)
    try:
        output_file = run_document_evaluation(args.file, args.framework, args.provider, args.output)
    except (OSError, documents.DocumentError, providers.ProviderError) as e:
        logger.error(str(e))
        return 1
    print(f"Report saved as: {output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
