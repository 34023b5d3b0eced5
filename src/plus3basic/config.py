"""
plus3basic - Codec Configuration
================================

Tunable settings shared by the encoder and decoder. The defaults
reproduce the behavior of the classic bas2txt/txt2bas tools:

- Implicit line numbering starts at 10 and steps by 10
- Out-of-range line numbers are masked to 16 bits with a warning
- Byte $7F (the Spectrum copyright character) is listed as "©"

Configuration comes from default values or from command-line options;
there are no environment variables or configuration files.
"""

from dataclasses import dataclass

from plus3basic.errors import ConversionError


@dataclass
class CodecConfig:
    """
    Configuration for text <-> binary conversion.

    Attributes:
        first_line_number: Line number given to the first unnumbered line
            (default: 10)
        line_number_step: Increment applied after every line when deriving
            the next implicit line number (default: 10)
        strict_line_numbers: Raise LineNumberError for numbers above 65535
            instead of masking them (default: False)
        copyright_glyph: Text emitted for byte $7F when listing, and
            recognized as $7F when tokenizing (default: "©")
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # LINE NUMBERING
    # ═══════════════════════════════════════════════════════════════════════════

    first_line_number: int = 10
    line_number_step: int = 10
    strict_line_numbers: bool = False

    # ═══════════════════════════════════════════════════════════════════════════
    # CHARACTER SET
    # ═══════════════════════════════════════════════════════════════════════════

    copyright_glyph: str = "©"

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.first_line_number < 0:
            raise ConversionError(
                f"first line number must not be negative, got {self.first_line_number}"
            )
        if self.line_number_step < 1:
            raise ConversionError(
                f"line number step must be at least 1, got {self.line_number_step}"
            )
        if not self.copyright_glyph:
            raise ConversionError("copyright glyph must not be empty")


# Shared default instance (CodecConfig is never mutated by the codec)
DEFAULT_CONFIG = CodecConfig()
