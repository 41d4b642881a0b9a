"""
Batch synthesis from the command line.

    tts-workbench --text-file lines.txt --voice LS --out export.zip
    tts-workbench --csv sheet.csv --voice LS --split --workers 2 --out export.zip
    tts-workbench --sheet corpus.xlsx --voice LS --out export.zip
"""
import argparse
import logging
from typing import List, Optional

from .core.config import EXPORT_CONFIG, SYNTHESIS_CONFIG
from .core.types import InputError
from .services import (
    SynthesisClient, SynthesisParams, export_archive, parse_csv, parse_text_lines, parse_xlsx,
    synthesize_batch
)
from .utils.logger import logger, set_console_level


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Batch text-to-speech into a ZIP of WAV files")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text-file", help="UTF-8 text file, one entry per line")
    source.add_argument("--csv", help="CSV sheet with name and text columns")
    source.add_argument("--sheet", help="Excel workbook (.xlsx) with name and text columns")
    parser.add_argument("--sheet-name", help="Worksheet to read (default: the first)")
    parser.add_argument("--voice", required=True, help="Speaker name (spk_name)")
    parser.add_argument("--speed", type=float, default=1.0)
    parser.add_argument("--volume", type=float, default=1.0)
    parser.add_argument("--pitch", type=float, default=1.0)
    parser.add_argument("--split", action="store_true", help="One segment per sentence")
    parser.add_argument("--workers", type=int, default=SYNTHESIS_CONFIG.max_workers)
    parser.add_argument("--url", default=SYNTHESIS_CONFIG.base_url, help="Synthesis backend base URL")
    parser.add_argument("--out", default=EXPORT_CONFIG.archive_name, help="Output ZIP path")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        set_console_level(logging.DEBUG)

    try:
        if args.csv:
            entries = parse_csv(args.csv)
        elif args.sheet:
            entries = parse_xlsx(args.sheet, sheet=args.sheet_name)
        else:
            with open(args.text_file, encoding="utf-8") as f:
                entries = parse_text_lines(f.read())
        params = SynthesisParams(args.voice, args.speed, args.volume, args.pitch).validate()
    except (InputError, ValueError, OSError) as e:
        logger.error(str(e))
        return 2

    def report(done: int, total: int, status: str) -> None:
        logger.info(f"[{round(done / total * 100)}%] {status}")

    with SynthesisClient(params, args.url) as client:
        groups = synthesize_batch(entries, client, split=args.split, max_workers=args.workers, progress=report)

    written = export_archive(groups, args.out)
    logger.info(f"Exported {len(written)} files to {args.out}")
    return 0 if written else 1
