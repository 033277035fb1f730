#
# Generation Parameter Bounds
#

MIN_INSTRUCTIONS = 1
MIN_REGISTERS = 1
MAX_REGISTERS = 32
MIN_TEST_CASES = 1

#
# Output Layout
#

DEFAULT_OUT_DIR = "out/rv32i-testgen"

# NOTE: test cases are numbered from 1
BINARY_FILE_NAME = "binary{case_number}.txt"
ASSEMBLY_FILE_NAME = "assembly{case_number}.s"
HEX_FILE_NAME = "hex{case_number}.v"

# instructions per row of the memory image (16 bytes)
MEMORY_IMAGE_ROW_WORDS = 4
MEMORY_IMAGE_BASE_ADDRESS = 0x0
