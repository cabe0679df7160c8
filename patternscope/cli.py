"""
patternscope CLI
================
Detect patterns in, fingerprint and compare tabular data files.

Files are CSV (.csv) or JSON records (.json, a list of objects); output is
JSON on stdout.

Usage:
    patternscope detect data.csv                   # Baseline patterns
    patternscope detect data.csv --advanced        # Baseline + advanced
    patternscope fingerprint data.csv --id sales   # Fingerprint
    patternscope compare a.csv b.csv               # Similarity report
    patternscope --config my.yaml --log-level DEBUG detect data.csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from patternscope.config import configure
from patternscope.detectors import AdvancedPatternDetector, PatternDetector
from patternscope.errors import PatternScopeError
from patternscope.fingerprint import FingerprintGenerator
from patternscope.similarity import AnalyzedDataset, SimilarityEngine
from patternscope.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def load_table(path: str) -> pd.DataFrame:
    """Read a CSV or JSON records file."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"No such file: {path}")
    if file_path.suffix.lower() == ".json":
        return pd.read_json(file_path, orient="records")
    return pd.read_csv(file_path)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_detect(args, settings) -> int:
    table = load_table(args.file)
    if args.advanced:
        patterns = AdvancedPatternDetector(settings=settings).detect_advanced_patterns(table)
    else:
        patterns = PatternDetector(settings=settings).detect_patterns(table)
    _emit([p.to_dict() for p in patterns])
    return 0


def cmd_fingerprint(args, settings) -> int:
    table = load_table(args.file)
    patterns = PatternDetector(settings=settings).detect_patterns(table)
    generator = FingerprintGenerator(settings=settings)
    fingerprint = generator.generate_fingerprint(
        table, patterns, args.id, primary_field=args.primary_field,
    )
    _emit(fingerprint.to_dict())
    return 0


def cmd_compare(args, settings) -> int:
    detector = PatternDetector(settings=settings)
    datasets = []
    for path in (args.first, args.second):
        table = load_table(path)
        datasets.append(AnalyzedDataset(
            dataset_id=Path(path).stem,
            data=table,
            patterns=detector.detect_patterns(table),
        ))

    engine = SimilarityEngine(settings=settings)
    _emit(engine.compare_dataset_patterns(*datasets).to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patternscope",
        description="Pattern detection, fingerprinting and similarity for tabular data",
    )
    parser.add_argument("--config", "-c", type=str, help="YAML settings file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Detect patterns in a file")
    detect.add_argument("file", help="CSV or JSON records file")
    detect.add_argument("--advanced", "-a", action="store_true", help="Include advanced detectors")
    detect.set_defaults(func=cmd_detect)

    fingerprint = subparsers.add_parser("fingerprint", help="Fingerprint a file")
    fingerprint.add_argument("file", help="CSV or JSON records file")
    fingerprint.add_argument("--id", required=True, help="Fingerprint id")
    fingerprint.add_argument("--primary-field", default=None, help="Field for temporal/anomaly signatures")
    fingerprint.set_defaults(func=cmd_fingerprint)

    compare = subparsers.add_parser("compare", help="Compare two files")
    compare.add_argument("first", help="First CSV or JSON records file")
    compare.add_argument("second", help="Second CSV or JSON records file")
    compare.set_defaults(func=cmd_compare)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = configure(config_path=args.config)
        setup_logging(settings, level=args.log_level, stream=sys.stderr)
        return args.func(args, settings)
    except (PatternScopeError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
