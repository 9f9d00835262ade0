import os
import argparse
import json
import logging
import time

from pedigree_scan.config import PipelineConfig
from pedigree_scan.engines import ENGINE_NAMES, create_engine
from pedigree_scan.errors import ScanError
from pedigree_scan.scanner import MISSING_IMAGE_MESSAGE, scan_card

logger = logging.getLogger(__name__)

VALID_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp', '.gif', '.webp', '.pdf'}


def collect_references(args):
    """Image references from the command line plus any files in --input_dir."""
    references = list(args.images)
    if args.input_dir:
        if not os.path.isdir(args.input_dir):
            logger.error("Input directory not found: %s", args.input_dir)
        else:
            all_files = sorted(f for f in os.listdir(args.input_dir)
                               if os.path.isfile(os.path.join(args.input_dir, f)))
            files = [f for f in all_files if os.path.splitext(f)[1].lower() in VALID_EXTENSIONS]
            skipped = len(all_files) - len(files)
            if skipped:
                logger.info("Skipped %d non-image files (e.g. .gitkeep)", skipped)
            logger.info("Found %d card files in %s", len(files), args.input_dir)
            references.extend(os.path.join(args.input_dir, f) for f in files)
    return references


def output_stem(reference, seen=None):
    """
    Output file stem for a reference: its base name without extension.

    Pass the same ``seen`` dict for a whole batch; a repeated stem gets a
    numeric suffix (card, card_2, card_3) so outputs never overwrite.
    """
    name = reference.rstrip('/').rsplit('/', 1)[-1] or "card"
    stem = os.path.splitext(name)[0]
    if seen is None:
        return stem
    count = seen.get(stem, 0) + 1
    seen[stem] = count
    return stem if count == 1 else f"{stem}_{count}"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Rabbit pedigree card scanner")
    parser.add_argument("images", nargs="*", help="Card image paths, file:// URIs or http(s) URLs")
    parser.add_argument("--input_dir", type=str, default=None, help="Directory of card images to process")
    parser.add_argument("--output_dir", type=str, default="output", help="Directory to save .txt/.tsv outputs")
    parser.add_argument("--engine", choices=ENGINE_NAMES, default="tesseract", help="OCR engine (default: tesseract)")
    parser.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode")
    parser.add_argument("--no-preprocess", action="store_true", help="Skip denoise/deskew before OCR")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING"], default="INFO",
                        help="Set logging verbosity (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("surya").setLevel(logging.WARNING)

    config = PipelineConfig(
        engine=args.engine,
        tesseract_psm=args.psm,
        denoise=not args.no_preprocess,
        deskew=not args.no_preprocess,
        keep_models_loaded=True,
    )

    references = collect_references(args)
    if not references:
        print(MISSING_IMAGE_MESSAGE)
        logger.error("Nothing to scan: pass image references or --input_dir")
        return 1

    os.makedirs(args.output_dir, exist_ok=True)
    start_time = time.time()
    failures = 0
    seen_stems = {}
    engine = create_engine(config.engine, config=config)

    for reference in references:
        logger.info("Processing %s...", reference)
        stem = output_stem(reference, seen_stems)
        try:
            result = scan_card(reference, engine=engine, on_status=print, config=config)
        except ScanError as e:
            failures += 1
            error_path = os.path.join(args.output_dir, stem + ".error.json")
            with open(error_path, "w", encoding="utf-8") as f:
                json.dump({"image": reference, "error": str(e)}, f, indent=2, ensure_ascii=False)
            continue

        with open(os.path.join(args.output_dir, stem + ".txt"), "w", encoding="utf-8") as f:
            f.write(result.readable)
        with open(os.path.join(args.output_dir, stem + ".tsv"), "w", encoding="utf-8") as f:
            f.write(result.tsv + "\n")

    logger.info("Processing complete in %.2fs (%d failed). Results saved to %s",
                time.time() - start_time, failures, args.output_dir)
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
