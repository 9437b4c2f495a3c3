"""
Command-line interface for the video translator.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_settings
from .errors import ApplicationError
from .models import JobInput
from .pipeline import DubPipeline
from .schemas import TranslationData

logger = logging.getLogger("vidtranslate")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(description="Translate and dub Chinese short-form videos")
    ap.add_argument("--env-file", default=None, help="Load settings from this .env file")
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    tr = sub.add_parser("translate", help="Dub one local video file")
    tr.add_argument("--input_video", required=True)
    tr.add_argument("--target-language", required=True, help="Target language code, e.g. 'en', 'es'")
    tr.add_argument(
        "--upload-dir",
        default=None,
        help="Where the stored and translated videos are written (defaults to settings)",
    )
    tr.add_argument("--no-dub", action="store_true", help="Only stream-copy the video")

    return ap.parse_args(argv)


def _translate(args: argparse.Namespace) -> int:
    settings = load_settings(args.env_file)
    overrides = {}
    if args.upload_dir:
        overrides["upload_dir"] = Path(args.upload_dir)
    if args.no_dub:
        overrides["dubbing_enabled"] = False
    if overrides:
        settings = replace(settings, **overrides)

    src = Path(args.input_video)
    if not src.is_file():
        logger.error(f"Input video not found: {src}")
        return 2

    with open(src, "rb") as f:
        job = JobInput(payload=f, original_filename=src.name, target_language=args.target_language)
        try:
            result = DubPipeline(settings).run(job)
        except ApplicationError as e:
            logger.error(f"Translation failed: {e.message}")
            return 1

    data = TranslationData.from_result(result, str(settings.upload_dir))
    print(json.dumps(data.model_dump(exclude_none=True), ensure_ascii=False, indent=2))
    logger.info(f"Done (translated) -> {result.output_video}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "serve":
        import uvicorn

        from .server import create_app

        app = create_app(load_settings(args.env_file))
        uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.verbose else "info")
        return

    sys.exit(_translate(args))


if __name__ == "__main__":
    main()
