import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from invoice_fraud.config.settings import Settings
from invoice_fraud.extraction.factory import TextLayerDetectorFactory
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.factory import OcrExtractorFactory
from invoice_fraud.pdf.factory import PdfReaderFactory
from invoice_fraud.processor.exceptions import ProcessorError
from invoice_fraud.processor.exporter import InvoiceExporter
from invoice_fraud.processor.file_loader import FileLoader
from invoice_fraud.processor.mode_selector import ProcessingModeSelector
from invoice_fraud.processor.processor import build_processor


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="invoice_fraud",
        description="Extract vehicle invoice fields and score them for fraud.",
    )
    parser.add_argument("file", type=Path, help="PDF or image invoice")
    parser.add_argument("--mime-type", default=None, help="Override the guessed MIME type")
    parser.add_argument(
        "--plan-only",
        action="store_true",
        help="Print the sync/async processing plan without processing",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> load file -> process -> print export JSON."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)

    try:
        document = FileLoader().load(args.file, mime_type=args.mime_type)
    except ProcessorError as exc:
        Log.error(f"Cannot process {args.file}: {exc}")
        return 1

    pdf_reader = PdfReaderFactory.create(settings)

    if args.plan_only:
        selector = ProcessingModeSelector(
            pdf_reader,
            TextLayerDetectorFactory.create(settings, pdf_reader),
            sync_threshold_ms=settings.sync_threshold_ms,
            max_pages_sync=settings.max_pages_sync,
        )
        plan = selector.select(document)
        print(json.dumps({**asdict(plan), "mode": plan.mode.value}, indent=2))
        return 0

    with OcrExtractorFactory.create(settings, pdf_reader) as ocr_extractor:
        processor = build_processor(settings, pdf_reader, ocr_extractor)
        review = processor.process(document)

    print(InvoiceExporter().to_json(review))
    return 0


if __name__ == "__main__":
    sys.exit(main())
