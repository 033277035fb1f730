import logging
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader

from rv32i_core.rv32i import GeneratedInstruction
from rv32i_core.types import TestCaseProgram
from rv32i_testgen.settings import (
    ASSEMBLY_FILE_NAME,
    BINARY_FILE_NAME,
    HEX_FILE_NAME,
    MEMORY_IMAGE_BASE_ADDRESS,
    MEMORY_IMAGE_ROW_WORDS,
)
from testgen_utils.file import create_file

logger = logging.getLogger("testgen")


def memory_image_rows(
    instructions: Sequence[GeneratedInstruction], row_words: int = MEMORY_IMAGE_ROW_WORDS
) -> list[str]:
    """Group words into rows, each word spelled out byte by byte in memory order."""
    rows = []
    for start in range(0, len(instructions), row_words):
        row = instructions[start : start + row_words]
        rows.append("".join(f"{byte} " for inst in row for byte in inst.le_bytes))
    return rows


class TestCaseWriter:
    """Writes the binary listing, the disassembly listing and the memory image of
    a test case into `root`.
    """

    __test__ = False  # not a pytest test class

    root: Path

    def __init__(self, root: Path):
        self.root = root
        self.template_env = Environment(
            loader=FileSystemLoader(Path(__file__).parent / "templates"),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_template(self, template_name: str, **kwargs) -> str:
        template = self.template_env.get_template(template_name)
        return template.render(**kwargs)

    def write(self, program: TestCaseProgram, case_number: int) -> list[Path]:
        instructions = program.instructions
        binary_path = self.root / BINARY_FILE_NAME.format(case_number=case_number)
        assembly_path = self.root / ASSEMBLY_FILE_NAME.format(case_number=case_number)
        hex_path = self.root / HEX_FILE_NAME.format(case_number=case_number)

        create_file(
            binary_path,
            self.render_template("binary.txt.j2", instructions=instructions),
        )
        create_file(
            assembly_path,
            self.render_template(
                "assembly.s.j2",
                instructions=instructions,
                case_number=case_number,
                base_address=MEMORY_IMAGE_BASE_ADDRESS,
            ),
        )
        create_file(
            hex_path,
            self.render_template(
                "hex.v.j2",
                rows=memory_image_rows(instructions),
                base_address=MEMORY_IMAGE_BASE_ADDRESS,
            ),
        )
        logger.debug(f"test case {case_number}: {len(instructions)} instructions written")
        return [binary_path, assembly_path, hex_path]
