#!/usr/bin/env python3

import argparse
import logging
import sys
from typing import Iterator

from rv32i_core.generator import RV32IGenerator
from rv32i_core.oracle import RV32IOracle
from rv32i_core.sampler import pick_usable_registers
from rv32i_core.types import TestCaseProgram
from rv32i_testgen.settings import (
    DEFAULT_OUT_DIR,
    MAX_REGISTERS,
    MIN_INSTRUCTIONS,
    MIN_REGISTERS,
    MIN_TEST_CASES,
)
from rv32i_testgen.writer import TestCaseWriter
from testgen_utils.cli import GeneratorClient
from testgen_utils.common import bounded_int, prompt_int

logger = logging.getLogger("testgen")


class RV32ITestgenClient(GeneratorClient):
    def add_arguments(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "-n",
            "--instructions",
            type=bounded_int(MIN_INSTRUCTIONS),
            help="number of random instructions per test case (asked for if omitted)",
        )
        parser.add_argument(
            "-r",
            "--registers",
            type=bounded_int(MIN_REGISTERS, MAX_REGISTERS),
            help=f"number of usable registers, {MIN_REGISTERS} to {MAX_REGISTERS} (asked for if omitted)",
        )
        parser.add_argument(
            "-t",
            "--test-cases",
            type=bounded_int(MIN_TEST_CASES),
            help="number of test cases to produce (asked for if omitted)",
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            help="check every emitted word for decodability with the emulator",
        )

    def ask_test_cases(self) -> int:
        if self.args.test_cases is not None:
            return self.args.test_cases
        return prompt_int("Enter Number of test cases to produce: ", MIN_TEST_CASES)

    def ask_instructions(self) -> int:
        if self.args.instructions is not None:
            return self.args.instructions
        return prompt_int("Enter Number of Instructions to produce: ", MIN_INSTRUCTIONS)

    def ask_registers(self) -> int:
        if self.args.registers is not None:
            return self.args.registers
        return prompt_int(
            f"Enter Number of Registers to use({MIN_REGISTERS} to {MAX_REGISTERS}): ",
            MIN_REGISTERS,
            MAX_REGISTERS,
        )

    def iter_programs(
        self, generator: RV32IGenerator, test_cases: int
    ) -> Iterator[TestCaseProgram]:
        if self.args.instructions is not None and self.args.registers is not None:
            yield from generator.generate_test_cases(
                test_cases, self.args.instructions, self.args.registers
            )
            return

        for case_number in range(1, test_cases + 1):
            try:
                num_insts = self.ask_instructions()
                num_registers = self.ask_registers()
            except EOFError:
                logger.error(f"input closed while configuring test case {case_number}")
                sys.exit(1)

            registers = pick_usable_registers(generator.rng, num_registers)
            yield generator.generate_test_case(num_insts, registers)

    def run(self):
        assert self.out_dir, "no output directory"

        logger.info(f"=== Start {self.logger_prefix} Test Generation ===")
        logger.info(f" * seed: {self.seed}")
        logger.info(f" * output: {self.out_dir}")
        logger.info("===")

        try:
            test_cases = self.ask_test_cases()
        except EOFError:
            logger.error("input closed before the number of test cases was given")
            sys.exit(1)

        generator = RV32IGenerator(self.seed)
        writer = TestCaseWriter(self.out_dir)
        oracle = RV32IOracle() if self.args.verify else None
        failed_cases = []

        for case_number, program in enumerate(self.iter_programs(generator, test_cases), 1):
            writer.write(program, case_number)

            if oracle is not None:
                failures = oracle.verify(program)
                if failures:
                    logger.error(f"test case {case_number}: undecodable words at {failures}")
                    failed_cases.append(case_number)

            logger.info(f"FINISHED TEST CASE {case_number}")

        logger.info(f"=== End {self.logger_prefix} Test Generation ===")
        if failed_cases:
            sys.exit(1)


def app():
    cli = RV32ITestgenClient("rv32i-testgen", "RV32I", DEFAULT_OUT_DIR)
    cli.start()


if __name__ == "__main__":
    app()
