"""
plus3basic - ZX Spectrum +3 BASIC Tokenizer and Lister
======================================================

This package converts ZX Spectrum BASIC programs between the tokenized
binary form saved by +3DOS and plain-text listings that can be edited and
kept under version control.

Sinclair BASIC stores each keyword as a single byte ($87-$FF) and keeps a
hidden binary copy of every numeric literal next to its digits. Programs
saved to disk carry a 128-byte +3DOS header with the program length and
the line to run after loading.

Main Components
---------------
- **tokens**: Keyword <-> token byte table (48K/128K/+3 and Next keywords)
- **numbers**: 5-byte hidden number packing
- **header**: +3DOS header building and reading
- **program**: Line record and program image structures
- **decoder**: Binary -> text (bas2txt)
- **encoder**: Text -> binary (txt2bas)

Quick Start
-----------
List a program:
    >>> from plus3basic import decode
    >>> from pathlib import Path
    >>> print(decode(Path("game.bas").read_bytes()))

Tokenize a listing:
    >>> from plus3basic import encode, build_header
    >>> data, autostart = encode(Path("game.txt").read_text())
    >>> Path("game.bas").write_bytes(build_header(len(data), autostart) + data)

Or use the command-line tools:
    $ bas2txt game.bas game.txt
    $ txt2bas game.txt game.bas

Version History
---------------
1.0.0 - Initial release with bas2txt and txt2bas
"""

__version__ = "1.0.0"
__author__ = "plus3basic contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from plus3basic.config import CodecConfig
from plus3basic.decoder import BasicDecoder, decode
from plus3basic.encoder import BasicEncoder, EncodedProgram, encode
from plus3basic.errors import (
    Plus3BasicError,
    HeaderError,
    ConversionError,
    LineNumberError,
    TruncatedLineError,
)
from plus3basic.header import (
    HEADER_SIZE,
    NO_AUTOSTART,
    FileType,
    Plus3DosHeader,
    build_header,
    read_header,
)
from plus3basic.numbers import pack_number, unpack_number
from plus3basic.program import ProgramImage, ProgramLine
from plus3basic.tokens import TOKEN_TABLE, TokenEntry, TokenTable

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Codec entry points
    "decode",
    "encode",
    "build_header",
    "read_header",
    "pack_number",
    "unpack_number",
    # Classes
    "BasicDecoder",
    "BasicEncoder",
    "EncodedProgram",
    "CodecConfig",
    "Plus3DosHeader",
    "FileType",
    "ProgramImage",
    "ProgramLine",
    "TokenEntry",
    "TokenTable",
    "TOKEN_TABLE",
    "HEADER_SIZE",
    "NO_AUTOSTART",
    # Exception hierarchy
    "Plus3BasicError",
    "HeaderError",
    "ConversionError",
    "LineNumberError",
    "TruncatedLineError",
]
