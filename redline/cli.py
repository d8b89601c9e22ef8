"""
Redline command line interface.

    redline-compare original.txt revised.txt
    redline-compare original.txt revised.txt --json
    redline-compare original.txt revised.txt --html redline.html
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from redline.core.config import get_settings
from redline.core.logging_config import setup_logging
from redline.services.comparison import (
    RedlineEngine,
    format_comparison_report,
    generate_redline,
)

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog="redline-compare",
        description="Compare two versions of a legal document",
    )
    parser.add_argument("original", type=Path, help="Original document (UTF-8 text)")
    parser.add_argument("revised", type=Path, help="Revised document (UTF-8 text)")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--html", "-o", type=Path, help="Write the HTML redline to this file")
    parser.add_argument("--detect-moves", action="store_true", help="Report relocated paragraphs as moved")
    parser.add_argument("--log-level", default="WARNING", help="Log level (logs share stdout with the report)")

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(level=args.log_level)

    try:
        original = args.original.read_text(encoding="utf-8")
        revised = args.revised.read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ Could not read input: {e}", file=sys.stderr)
        return 2

    config = settings.engine_config()
    if args.detect_moves:
        config["detect_moves"] = True

    engine = RedlineEngine(config)
    result = engine.compare(original, revised, args.original.name, args.revised.name)

    if args.json:
        print(json.dumps(result.to_dict(include_content=False), ensure_ascii=False, indent=2))
    else:
        print(format_comparison_report(result))

    if args.html:
        redline = generate_redline(result)
        args.html.write_text(redline.html_content, encoding="utf-8")
        logger.info(f"Wrote HTML redline to {args.html}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
