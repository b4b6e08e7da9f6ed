#!/usr/bin/env python3
"""
Command line entry point: train on a corpus file and print generated text.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from markov_config import Config, load_config
from markov_model import InvalidConfigurationError, MarkovModel

logger = logging.getLogger(__name__)


def load_corpus(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read the whole corpus file as one string."""
    text = Path(path).read_text(encoding=encoding)
    logger.debug("Read %d characters from %s", len(text), path)
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="char-markov",
        description="Generate text with a character-level Markov model")
    parser.add_argument("initial_text", help="Text to start generating from")
    parser.add_argument("corpus", help="Text file to train on")
    parser.add_argument("-w", "--window-length", type=int,
                        help="Characters of context per prediction (default: 3)")
    parser.add_argument("-n", "--length", type=int,
                        help="Maximum number of characters to add (default: 200)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--config", help="YAML file with default settings")
    parser.add_argument("--encoding", help="Corpus file encoding (default: utf-8)")
    parser.add_argument("--dump", action="store_true",
                        help="Print the trained model instead of generating")
    parser.add_argument("--stats", action="store_true", help="Log model statistics")
    parser.add_argument("--progress", action="store_true", default=None,
                        help="Show a progress bar while training")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else Config()
        config = config.merged(
            window_length=args.window_length,
            length=args.length,
            seed=args.seed,
            encoding=args.encoding,
            progress=args.progress,
            log_level="DEBUG" if args.verbose else None,
        )
    except (InvalidConfigurationError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(level=config.log_level.upper(), stream=sys.stderr,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        text = load_corpus(args.corpus, config.encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read corpus %s: %s", args.corpus, e)
        return 1

    model = MarkovModel(config.window_length, config.seed)
    model.train(text, progress=config.progress)

    if args.stats:
        for key, value in model.get_stats().items():
            logger.info("%s: %s", key, value)

    if args.dump:
        sys.stdout.write(str(model))
    else:
        print(model.generate(args.initial_text, config.length))
    return 0


if __name__ == "__main__":
    sys.exit(main())
