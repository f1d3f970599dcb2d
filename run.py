#!/usr/bin/env python3
"""
Passage Evaluator Application Launcher
"""
import importlib
import os
import sys


def check_requirements():
    """Check if required packages are installed"""
    required_packages = [
        'flask',
        'flask_cors',
        'docx',
        'PyPDF2',
        'reportlab',
        'matplotlib',
        'requests',
        'dotenv',
        'openai',
        'anthropic',
        'google.generativeai',
    ]

    missing_packages = []
    for package in required_packages:
        try:
            importlib.import_module(package)
        except ImportError:
            missing_packages.append(package)

    if missing_packages:
        print("Missing required packages:")
        for package in missing_packages:
            print(f"  - {package}")
        print("\nPlease install them using:")
        print("pip install -e .")
        return False

    return True


def check_provider_keys():
    """Check that at least one LLM provider has an API key"""
    from providers import provider_status

    status = provider_status()
    configured = [name for name, ok in status.items() if ok]
    if not configured:
        print("Warning: no LLM provider API key found!")
        print("Set OPENAI_API_KEY, ANTHROPIC_API_KEY, PERPLEXITY_API_KEY, DEEPSEEK_API_KEY or GEMINI_API_KEY in a .env file")
        return False

    print(f"Configured providers: {', '.join(configured)}")
    return True


def main():
    """Main launcher function"""
    print("Starting Passage Evaluator...")
    print("=" * 50)

    if not check_requirements():
        sys.exit(1)

    if not check_provider_keys():
        print("Analysis endpoints will return 503 until a provider key is set")

    from app import app
    port = int(os.getenv('PORT', '5000'))
    print(f"Starting server at http://localhost:{port}")
    print("=" * 50)
    app.run(debug=os.getenv('FLASK_DEBUG', '0') == '1', host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
