"""
Command-line interface: rank the concepts most similar to one or more CUIs.

Usage:
    cui2vec cui2vec_pretrained.csv C0000005 --skip-first --top-k 10
    python -m cui2vec cui2vec_pretrained.csv C0000005 C0000039 --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from cui2vec.embeddings import MalformedRecordError, UnknownConceptError, load_model_file

EXIT_MALFORMED_MODEL = 1
EXIT_UNKNOWN_CUI = 2
EXIT_UNREADABLE_MODEL = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cui2vec",
        description="Rank concepts in a cui2vec model by similarity to the given CUIs",
    )
    parser.add_argument("model", help="Path to the cui2vec CSV model")
    parser.add_argument("cuis", nargs="+", metavar="CUI", help="Target CUI(s)")
    parser.add_argument(
        "--skip-first",
        action="store_true",
        help="Skip the first line of the model (the header)",
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=10,
        help="Number of similar concepts to print per CUI (default: 10, 0 = all)",
    )
    parser.add_argument(
        "--load-workers",
        type=int,
        default=None,
        help="Parser threads while loading (default: CUI2VEC_LOAD_WORKERS or CPU count)",
    )
    parser.add_argument(
        "--query-workers",
        type=int,
        default=None,
        help="Concurrent comparisons per query (default: CUI2VEC_QUERY_WORKERS or 2x CPU count)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while loading")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        model = load_model_file(
            args.model,
            args.skip_first,
            num_workers=args.load_workers,
            progress=args.progress,
        )
    except MalformedRecordError as exc:
        print(f"error: {args.model}: {exc}", file=sys.stderr)
        return EXIT_MALFORMED_MODEL
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {args.model}: {exc}", file=sys.stderr)
        return EXIT_UNREADABLE_MODEL

    top_k = args.top_k or None
    results = {}
    for cui in args.cuis:
        try:
            results[cui] = model.similar(cui, top_k=top_k, num_workers=args.query_workers)
        except UnknownConceptError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_UNKNOWN_CUI

    if args.json:
        payload = {
            cui: [{"cui": c.cui, "value": c.value} for c in concepts]
            for cui, concepts in results.items()
        }
        print(json.dumps(payload, indent=2))
        return 0

    for cui, concepts in results.items():
        print(f"# {cui}")
        for rank, concept in enumerate(concepts, start=1):
            print(f"{rank}\t{concept.cui}\t{concept.value:.6g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
