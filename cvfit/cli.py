"""Command-line entrypoint for a single fit analysis.

Example:
  cvfit --job-url https://company.example/careers/123 --cv-file cv.pdf
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from cvfit.core.config import settings
from cvfit.core.errors import PipelineError
from cvfit.services.pipeline import AnalysisPipeline
from cvfit.shared.logging_config import setup_logging
from cvfit.shared.models import CvDocument


def load_document(path: str) -> CvDocument:
    p = Path(path)
    media_type, _ = mimetypes.guess_type(p.name)
    return CvDocument(content=p.read_bytes(), media_type=media_type, filename=p.name)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Analyse how well a CV fits a job posting")
    parser.add_argument("--job-url", required=True, help="URL of the job posting")
    parser.add_argument("--cv-file", required=True, help="CV file (.pdf or .docx)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        document = load_document(args.cv_file)
    except OSError as exc:
        print(f"Cannot read {args.cv_file}: {exc}", file=sys.stderr)
        return 1

    pipeline = AnalysisPipeline.from_settings(settings)
    try:
        analysis = asyncio.run(pipeline.run(args.job_url, document))
    except PipelineError as exc:
        print(exc.message, file=sys.stderr)
        return 1

    print(analysis)
    return 0


if __name__ == "__main__":
    sys.exit(main())
