"""Crypto narrator entry point.

Usage:
    python run_pipeline.py

Loads config.yaml, runs PipelineEngine once for the target below, and
reports success/failure to stdout and the narrator log.
"""

import sys
from dotenv import load_dotenv

load_dotenv()  # must precede package imports so env vars are available at module load

from crypto_narrator.core.config import Settings, load_config  # noqa: E402
from crypto_narrator.core.logger import logger, set_level  # noqa: E402
from crypto_narrator.pipeline.engine import PipelineEngine  # noqa: E402

TARGET_PRICE = "$97k-$100k"
TARGET_DATE = "31 de dezembro de 2024"


def main() -> int:
    """Run the pipeline. Returns 0 on success, 1 on failure."""
    try:
        settings = Settings.from_dict(load_config())
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"run_pipeline: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    set_level(settings.log_level)

    try:
        engine = PipelineEngine(settings)
        result = engine.run(TARGET_PRICE, TARGET_DATE)
    except Exception as exc:
        logger.error(f"run_pipeline: PipelineEngine raised: {exc}", exc_info=True)
        print(f"ERROR: pipeline failed: {exc}", file=sys.stderr)
        return 1

    print("\n=== Dados em Tempo Real ===")
    print(result.realtime_report.text)
    print("\n=== Análise Preditiva ===")
    print(result.prediction_report.text)
    if not result.publish_results:
        print("\n=== Thread ===")
        for message in result.messages:
            print(f"{message}\n")

    failed = [r for r in result.publish_results if not r.ok]
    if failed:
        print(f"ERROR: {len(failed)} message(s) not published", file=sys.stderr)
        return 1

    print(f"SUCCESS: {len(result.messages)} messages, {len(result.warnings)} extraction warning(s)")
    logger.info(f"run_pipeline: completed, {len(result.messages)} messages")
    return 0


if __name__ == "__main__":
    sys.exit(main())
