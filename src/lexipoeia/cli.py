"""lexipoeia CLI - generate words from a specification file.

Usage:
    lexipoeia language.lex                  (writes language.lex.words)
    lexipoeia language.lex out.txt
    lexipoeia language.lex --analyze
    lexipoeia language.lex --dump yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from lexipoeia.analyzer import analyze_specification, format_report
from lexipoeia.backends import GenerationError, WordGenerator
from lexipoeia.serialization import spec_to_json, spec_to_yaml
from lexipoeia.spec_builder import SpecParseError, parse_spec_file

logger = logging.getLogger("lexipoeia")

DUMP_FORMATS = {"json": spec_to_json, "yaml": spec_to_yaml}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexipoeia",
        description="Generate words for a constructed language from a specification file",
    )
    parser.add_argument("inputfile", help="Specification file (UTF-8)")
    parser.add_argument(
        "outputfile",
        nargs="?",
        help="Where to write the words (default: <inputfile>.words)",
    )
    parser.add_argument(
        "--analyze",
        "-a",
        action="store_true",
        help="Print a diagnostics report for the specification to stderr",
    )
    parser.add_argument(
        "--dump",
        choices=sorted(DUMP_FORMATS),
        help="Print the compiled specification instead of generating words",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    try:
        spec = parse_spec_file(args.inputfile)
    except OSError as e:
        logger.error("Could not open the input file %s: %s", args.inputfile, e)
        return 1
    except SpecParseError as e:
        logger.error("Invalid specification %s: %s", args.inputfile, e)
        return 1

    if args.analyze:
        report = analyze_specification(spec)
        print(format_report(report), file=sys.stderr)

    if args.dump:
        sys.stdout.write(DUMP_FORMATS[args.dump](spec))
        sys.stdout.write("\n")
        return 0

    output = args.outputfile or f"{args.inputfile}.words"
    generator = WordGenerator(spec)
    try:
        generator.check()
        with open(output, "w", encoding="utf-8") as f:
            generator.write_words(f)
    except OSError as e:
        logger.error("Could not write the output file %s: %s", output, e)
        return 1
    except GenerationError as e:
        logger.error("Generation failed: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
