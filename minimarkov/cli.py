"""Command-line interface for training and generation."""

import argparse
import logging
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import List, Optional

from minimarkov.models.markov import MarkovConfig, TransitionModel
from minimarkov.utils.trainer import Trainer, Generator


logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO):
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_config(args) -> MarkovConfig:
    """Map parsed arguments onto a MarkovConfig."""
    config = MarkovConfig(log_every=args.log_every)
    if args.command == 'generate':
        config.max_length = args.max_length
        config.seed = args.seed
        config.separator = args.separator
    return config


def train(args, config: MarkovConfig) -> TransitionModel:
    """Train a new model on the data file."""
    model = TransitionModel(seed=config.seed)
    Trainer(model, log_every=config.log_every).train_file(args.data)
    return model


def open_output(path: Optional[Path]):
    if path is None:
        return nullcontext(sys.stdout)
    return open(path, 'w', encoding='utf-8')


def generate(model: TransitionModel, config: MarkovConfig, out) -> None:
    """Write generated text."""
    Generator(model, separator=config.separator).write(out, config.max_length)


def dot(model: TransitionModel, out) -> None:
    """Write the chain as a GraphViz digraph."""
    model.print_to_dot(out)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Train a word-level Markov chain and generate text from it'
    )
    parser.add_argument(
        '--data',
        type=Path,
        default=Path('data.txt'),
        help='Training data file'
    )
    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='File to write to (default: stdout)'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
    )
    parser.add_argument('--log-every', type=positive_int, default=MarkovConfig.log_every)

    subparsers = parser.add_subparsers(dest='command', required=True)

    # Generation arguments
    generate_parser = subparsers.add_parser('generate')
    generate_parser.add_argument('--max-length', type=non_negative_int, default=MarkovConfig.max_length)
    generate_parser.add_argument('--seed', type=int)
    generate_parser.add_argument('--separator', type=str, default=MarkovConfig.separator)

    subparsers.add_parser('dot')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))
    config = build_config(args)

    try:
        model = train(args, config)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read input file {args.data}: {e}")
        return 1

    if args.command == 'generate' and not len(model):
        logger.error(f"Cannot generate from an empty model: no words in {args.data}")
        return 1

    try:
        with open_output(args.output) as out:
            if args.command == 'generate':
                generate(model, config, out)
            else:
                dot(model, out)
    except OSError as e:
        logger.error(f"Could not write output file {args.output}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
