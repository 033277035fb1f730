# ---------------------------------------------------------------------------- #
#                              Bit-Field Primitives                            #
# ---------------------------------------------------------------------------- #


class BitFieldError(ValueError):
    pass


def render(value: int, width: int, *, truncate: bool = True) -> str:
    """Render `value` as a `width` character binary string, most significant bit
    first. Negative values are taken in two's complement. Values wider than the
    field are masked unless `truncate` is disabled, in which case they are rejected.
    """
    if width <= 0:
        raise BitFieldError(f"bit-field width must be positive, got {width}")
    mask = (1 << width) - 1
    if not truncate and not (-(1 << (width - 1)) <= value <= mask):
        raise BitFieldError(f"value {value} does not fit into {width} bits")
    return format(value & mask, f"0{width}b")


def concat(*parts: str) -> str:
    # callers order the fields high to low
    return "".join(parts)


def to_hex32(bits: str) -> str:
    if len(bits) != 32 or any(c not in "01" for c in bits):
        raise BitFieldError(f"expected a 32 character bit string, got '{bits}'")
    return f"{int(bits, 2):08x}"


def to_le_bytes(hex_word: str) -> list[str]:
    """Split an 8 digit hex word into its byte pairs in memory (little-endian) order."""
    if len(hex_word) != 8:
        raise BitFieldError(f"expected 8 hex digits, got '{hex_word}'")
    return [hex_word[i : i + 2] for i in range(6, -1, -2)]
