import argparse
import logging
import sys

from titlefilter.config import settings
from titlefilter.pipeline.evaluator import RuleEvaluator
from titlefilter.pipeline.normalizer import ConversionError, IdentityConverter, VariantNormalizer
from titlefilter.pipeline.orchestrator import Candidate, run_pass
from titlefilter.pipeline.preprocessor import MissingElementsError, apply_visibility, extract_candidates


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Title Filter - filter release titles with AND/OR/regex rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rule syntax:
  ;  or ；   AND between groups      1080p|2160p；简体|繁体
  |          OR inside a group       HEVC|x265
  /pattern/  regular expression      /\\[第\\d+集\\]/；1080p

Examples:
  titlefilter "HEVC|x265；简体" -i titles.txt
  titlefilter "/s0?1e\\d+/" -i listing.html --html > filtered.html
        """
    )
    parser.add_argument("rule", nargs="?", default="", help="Filter rule (empty shows everything)")
    parser.add_argument("-i", "--input", type=argparse.FileType("r", encoding="utf-8"),
                        default=sys.stdin, metavar="FILE",
                        help="Titles, one per line, or a listing page with --html (default: stdin)")
    parser.add_argument("--html", action="store_true",
                        help="Treat input as a listing page and print it with rows hidden")
    parser.add_argument("--show-hidden", action="store_true",
                        help="Also print hidden titles, prefixed with '-'")
    parser.add_argument("--no-variants", action="store_true",
                        help="Disable Simplified/Traditional matching")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    evaluator = None
    if args.no_variants:
        evaluator = RuleEvaluator(VariantNormalizer(IdentityConverter()))

    raw = args.input.read()

    try:
        if args.html:
            candidates = extract_candidates(raw)
        else:
            candidates = [Candidate(handle=str(n), title=line)
                          for n, line in enumerate(raw.splitlines()) if line.strip()]
        results, summary = run_pass(args.rule, candidates, evaluator)
    except MissingElementsError as exc:
        print(f"[-] {exc}", file=sys.stderr)
        return 2
    except ConversionError as exc:
        print(f"[-] {exc}", file=sys.stderr)
        return 1

    if args.html:
        print(apply_visibility(raw, results))
    else:
        for candidate in candidates:
            if results[candidate.handle]:
                print(candidate.title)
            elif args.show_hidden:
                print(f"- {candidate.title}")

    print(f"[+] {summary.visible}/{summary.total} visible"
          f" | groups: {summary.group_count}"
          f" | regex fallbacks: {summary.fallback_count}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
