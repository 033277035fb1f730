import argparse
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Sequence

from testgen_utils.file import create_dir


class GeneratorClient(ABC):
    """Base class for a test vector generator client. Handles argument parsing,
    logger configuration and output directory setup before handing over to `run`.
    """

    program_name: str
    logger_prefix: str
    default_out_dir: str

    # Common State
    verbosity: int
    seed: float
    out_dir: Path | None

    argument_parser: argparse.ArgumentParser
    args: argparse.Namespace

    def __init__(self, program_name: str, logger_prefix: str, default_out_dir: str):
        self.program_name = program_name
        self.logger_prefix = logger_prefix
        self.default_out_dir = default_out_dir

        self.verbosity = 0
        self.seed = 0
        self.out_dir = None

        self.argument_parser = self.generate_parser()
        self.args = argparse.Namespace()

    def extract_out_dir(self) -> Path:
        out_dir = Path(self.args.out).absolute()
        if out_dir.is_file():
            self.argument_parser.error("--out requires to be a directory, found a file!")
        create_dir(out_dir)
        return out_dir

    def set_logger_config(self):
        logger = logging.getLogger("testgen")
        logger.propagate = False
        verbosity = min(max(0, self.verbosity), 2)
        logging_level = {0: logging.ERROR, 1: logging.INFO, 2: logging.DEBUG}.get(
            verbosity, logging.ERROR
        )
        logger.setLevel(logging.DEBUG)

        # start() may run more than once per process
        logger.handlers.clear()
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter(
            f"[{self.logger_prefix} %(asctime)s ~ %(levelname)s]: %(message)s"
        )
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging_level)
        logger.addHandler(console_handler)

    def add_shared_flags(self, parser: argparse.ArgumentParser):
        parser.add_argument("-v", "--verbosity", default=1, choices=[0, 1, 2], type=int)
        parser.add_argument(
            "-s", "--seed", metavar="SEED_NUM", type=float, help="seed for randomness"
        )
        parser.add_argument(
            "-o",
            "--out",
            metavar="OUTPUT_DIR",
            type=str,
            default=self.default_out_dir,
            help="output directory",
        )

    def generate_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.program_name,
            description=f"{self.program_name}: randomized machine code test vectors",
        )
        self.add_shared_flags(parser)
        self.add_arguments(parser)
        return parser

    def start(self, argv: Sequence[str] | None = None):
        self.args = self.argument_parser.parse_args(argv)
        self.verbosity = self.args.verbosity
        self.set_logger_config()
        self.setup_runtime_env()
        self.run()

    def setup_runtime_env(self):
        self.out_dir = self.extract_out_dir()
        self.seed = self.args.seed if self.args.seed is not None else datetime.now().timestamp()

    @abstractmethod
    def add_arguments(self, parser: argparse.ArgumentParser):
        """Register the generator specific flags"""
        raise NotImplementedError()

    @abstractmethod
    def run(self):
        """Generate and write the test vectors"""
        raise NotImplementedError()
