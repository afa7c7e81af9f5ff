"""Post-clone environment setup helper.

Run once after creating the virtualenv and installing the package:

    python -m venv .venv
    pip install -e ".[test]"
    python setup_env.py

This script:
1. Verifies all required third-party imports resolve.
2. Verifies the narrator package imports cleanly.
3. Checks that config.yaml parses and the API key variable is set.
"""

import sys


def verify_imports() -> None:
    print("Verifying core imports...")
    required = [
        ("requests", "requests"),
        ("pandas", "pandas"),
        ("yaml", "PyYAML"),
        ("dotenv", "python-dotenv"),
    ]
    all_ok = True
    for mod, pkg in required:
        try:
            __import__(mod)
            print(f"  [OK] {pkg}")
        except ImportError:
            print(f"  [MISSING] {pkg}  →  run: pip install {pkg}")
            all_ok = False

    if not all_ok:
        print("\nSome packages are missing. Run:  pip install -e .")
        sys.exit(1)


def verify_pipeline_imports() -> None:
    print("\nVerifying narrator source imports...")
    try:
        from crypto_narrator.providers.market import BinanceTickerProvider  # noqa: F401
        from crypto_narrator.providers.sentiment import FearGreedProvider  # noqa: F401
        from crypto_narrator.providers.llm import OpenAIChatProvider  # noqa: F401
        from crypto_narrator.pipeline.engine import PipelineEngine  # noqa: F401
        print("  [OK] All narrator modules import cleanly.")
    except Exception as exc:
        print(f"  [ERROR] Narrator import failed: {exc}")
        sys.exit(1)


def verify_config() -> None:
    print("\nVerifying config.yaml and environment...")
    from crypto_narrator.core.config import Settings, load_config

    try:
        settings = Settings.from_dict(load_config())
    except (FileNotFoundError, ValueError) as exc:
        print(f"  [ERROR] {exc}")
        sys.exit(1)
    print(f"  [OK] config.yaml parsed: symbol {settings.symbol}, model {settings.model}")

    if settings.api_key:
        print(f"  [OK] {settings.api_key_env} is set")
    else:
        print(f"  [WARN] {settings.api_key_env} is not set, add it to .env (see .env.example)")
    if settings.publish_enabled and settings.publish_sink == "x" and not settings.access_token:
        print(f"  [WARN] publishing to x is enabled but {settings.access_token_env} is not set")


if __name__ == "__main__":
    print("=" * 60)
    print("  Crypto Narrator: Environment Setup Check")
    print("=" * 60)
    verify_imports()
    verify_pipeline_imports()
    verify_config()
    print("\n" + "=" * 60)
    print("  Setup complete. You can now run: python run_pipeline.py")
    print("=" * 60)
