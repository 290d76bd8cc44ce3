#!/usr/bin/env python3

import argparse
import json
import logging
import sys
import time
from contextlib import ExitStack

from omega_match.omega_match import get_version
from nerc.annotator import Annotator
from nerc.feature_descriptor import create_feature_descriptor
from nerc.params_parser import parse_file
from nerc.resolver import ConfigurationError, Gazetteer, GazetteerMatcher

__version__ = "0.1.0"


def read_sentences(stream):
    """Yield one token list per non-blank line of whitespace-tokenized text."""
    for line in stream:
        tokens = line.split()
        if tokens:
            yield tokens


def run_features(args) -> int:
    params = parse_file(args.params)
    sys.stdout.write(create_feature_descriptor(params))
    return 0


def run_tag(args, logger) -> int:
    ne_types = None
    if args.ne_types:
        ne_types = [t.strip() for t in args.ne_types.split(",") if t.strip()]

    load_start = time.time()
    gazetteer = Gazetteer.from_directory(args.dict_path)
    logger.info(
        "Loaded %s dictionaries in %.3fs: %s",
        len(gazetteer),
        time.time() - load_start,
        ", ".join(gazetteer.labels),
    )

    with ExitStack() as stack:
        input_stream = (
            stack.enter_context(open(args.input, "r", encoding="utf-8"))
            if args.input
            else sys.stdin
        )
        output_stream = (
            stack.enter_context(open(args.output, "w", encoding="utf-8", newline="\n"))
            if args.output
            else sys.stdout
        )
        with GazetteerMatcher(gazetteer) as matcher:
            annotator = Annotator(matcher=matcher, dictionaries="tag", ne_types=ne_types)
            output = []
            for index, tokens in enumerate(read_sentences(input_stream)):
                for name in annotator.annotate(tokens):
                    item = {"sentence": index}
                    item.update(name.to_dict())
                    output.append(item)

        if args.pretty_print:
            json.dump(output, output_stream, indent=2)
            output_stream.write("\n")
        else:
            for item in output:
                output_stream.write(json.dumps(item))
                output_stream.write("\n")
        sys.stderr.write(f"Found {len(output)} names\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Named entity tagging with gazetteers and feature descriptor generation."
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    subparsers = parser.add_subparsers(dest="command", help="sub-command help")

    features = subparsers.add_parser(
        "features", help="Print the feature descriptor XML for a parameters file"
    )
    features.add_argument("params", help="Path to the training parameters file")

    tag = subparsers.add_parser("tag", help="Tag tokenized text with gazetteers")
    tag.add_argument(
        "--dict-path", required=True, help="Directory containing the dictionary files"
    )
    tag.add_argument(
        "-i",
        "--input",
        default=None,
        help="Tokenized input, one sentence per line. If omitted, input is read from stdin.",
    )
    tag.add_argument(
        "--ne-types",
        default=None,
        help="Comma separated entity types to keep; all types are kept if omitted",
    )
    tag.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write output to this file (UTF-8, LF line endings). If omitted, output goes to stdout.",
    )
    tag.add_argument(
        "--pretty-print",
        action="store_true",
        help="Emit all results in a single pretty-printed JSON array",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print("Version information:")
        print(f"  omega_match: {get_version()}")
        print(f"  pynerc: {__version__}")
        return 0

    if not args.command:
        parser.error("a sub-command is required: features or tag")

    logging.basicConfig(
        level=getattr(logging, args.log_level), format="[%(levelname)s] %(message)s"
    )
    logger = logging.getLogger("pynerc")

    try:
        if args.command == "features":
            return run_features(args)
        return run_tag(args, logger)
    except ConfigurationError as e:
        sys.stderr.write(f"Configuration error: {e}\n")
        return 1
    except FileNotFoundError as e:
        sys.stderr.write(f"{e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
