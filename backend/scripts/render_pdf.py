from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from urllib.parse import parse_qsl, urlsplit

from pdfthis.config import settings
from pdfthis.services.content_selector import parameters_from_pairs
from pdfthis.services.pdf_service import generate_pdf


def _parse_query(value: str) -> list[tuple[str, str]]:
    return parse_qsl(value.lstrip("?"), keep_blank_values=True)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Render the pdfthis document for a query string into a local file."
    )
    parser.add_argument("--query", default="", help='e.g. "title=Hello&text=Body&count=3"')
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000/",
        help="Origin and path shown in the instructions example URL.",
    )
    parser.add_argument("--out", type=Path, default=Path("pdfthis.pdf"))
    parser.add_argument("--unicode", action="store_true", default=settings.unicode_support)
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    base = urlsplit(args.base_url)
    params = parameters_from_pairs(_parse_query(args.query))
    try:
        rendered = generate_pdf(
            params,
            origin=f"{base.scheme}://{base.netloc}",
            path=base.path or "/",
            unicode_support=bool(args.unicode),
            unicode_font_path=settings.unicode_font_path,
            creator=settings.app_name,
        )
    except Exception as exc:
        print(f"Failed to generate PDF: {exc}", file=sys.stderr)
        return 1

    args.out.write_bytes(rendered.content)
    print(f"wrote {args.out} ({rendered.page_count} page(s), {len(rendered.content)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
