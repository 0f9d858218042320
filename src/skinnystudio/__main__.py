"""Skinny Studio orchestrator entry point.

Changes:
  - 2026-03-04: --log-level flag; defaults to SKINNY_LOG_LEVEL.
  - 2026-02-20: Serve the versioned API with uvicorn (``--dev`` enables reload).
"""

import argparse
import logging

from skinnystudio import __version__
from skinnystudio.config import get_settings
from skinnystudio.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Skinny Studio orchestrator - chat-driven creative generation API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skinnystudio                         Serve on 127.0.0.1:8888
  skinnystudio --host 0.0.0.0 -p 9000  Listen on all interfaces
  skinnystudio --dev                   Auto-reload on source changes
""",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=8888,
        help="Port to bind (default: 8888)",
    )
    parser.add_argument(
        "--dev", action="store_true", help="Development mode with auto-reload"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: SKINNY_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=args.log_level or settings.log_level)

    if settings.google_ai_api_key is None and settings.orchestration_mode == "platform_key":
        logger.warning("orchestration_mode is platform_key but no platform key is configured")
    if not settings.usage_logging_enabled:
        logger.info("Supabase not configured; usage rows will not be written")

    from skinnystudio.api.serve import run_api_server

    try:
        run_api_server(host=args.host, port=args.port, dev=args.dev)
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
