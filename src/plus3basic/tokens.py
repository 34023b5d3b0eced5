"""
Sinclair BASIC Token Table
==========================

Keywords in a tokenized Sinclair BASIC program are stored as single bytes
in the range $80-$FF. This module holds the keyword <-> code mapping used
by both the encoder (text -> binary) and the decoder (binary -> text).

Token Blocks
------------
- $A3-$FF: the 48K/128K/+3 keyword set (SPECTRUM, PLAY ... COPY)
- $87-$A2: ZX Spectrum Next extensions (PEEK$, REG ... RMDIR)
- $80-$86: unassigned, dropped when listing

Aliases
-------
The ROM lists $EC and $ED as "GO TO" and "GO SUB". Programs are commonly
typed as GOTO and GOSUB, so those spellings are accepted when tokenizing.
Listing always produces the two-word form.

Matching Order
--------------
The encoder tries keywords longest first. The word-boundary rule does not
separate "PEEK$" from "PEEK" or "VAL$" from "VAL", since "$" is not
alphanumeric; trying the longer spelling first does.

Reference
---------
- ZX Spectrum manual, Appendix A (character set)
- ZX Spectrum Next user guide, NextBASIC keyword table
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


# Token byte for REM; everything after it on the line is literal text
REM_TOKEN = 0xEA

# Lowest byte value that can be a token
FIRST_TOKEN_CODE = 0x80


# =============================================================================
# Token Entry
# =============================================================================

@dataclass(frozen=True)
class TokenEntry:
    """
    One keyword in the token table.

    Attributes:
        code: Token byte ($80-$FF)
        keyword: Canonical spelling, used when listing
        aliases: Extra spellings accepted when tokenizing
    """
    code: int
    keyword: str
    aliases: tuple[str, ...] = ()

    @property
    def spellings(self) -> tuple[str, ...]:
        """All accepted spellings, canonical first."""
        return (self.keyword,) + self.aliases


# =============================================================================
# Canonical Keyword List
# =============================================================================
# Single source of truth for both directions. Ordered by token code.
# =============================================================================

TOKEN_ENTRIES: tuple[TokenEntry, ...] = (
    # =========================================================================
    # ZX Spectrum Next Extensions ($87-$A2)
    # =========================================================================
    TokenEntry(0x87, "PEEK$"),
    TokenEntry(0x88, "REG"),
    TokenEntry(0x89, "DPOKE"),
    TokenEntry(0x8A, "DPEEK"),
    TokenEntry(0x8B, "MOD"),
    TokenEntry(0x8C, "<<"),
    TokenEntry(0x8D, ">>"),
    TokenEntry(0x8E, "UNTIL"),
    TokenEntry(0x8F, "ERROR"),
    TokenEntry(0x90, "ON"),
    TokenEntry(0x91, "DEFPROC"),
    TokenEntry(0x92, "ENDPROC"),
    TokenEntry(0x93, "PROC"),
    TokenEntry(0x94, "LOCAL"),
    TokenEntry(0x95, "DRIVER"),
    TokenEntry(0x96, "WHILE"),
    TokenEntry(0x97, "REPEAT"),
    TokenEntry(0x98, "ELSE"),
    TokenEntry(0x99, "REMOUNT"),
    TokenEntry(0x9A, "BANK"),
    TokenEntry(0x9B, "TILE"),
    TokenEntry(0x9C, "LAYER"),
    TokenEntry(0x9D, "PALETTE"),
    TokenEntry(0x9E, "SPRITE"),
    TokenEntry(0x9F, "PWD"),
    TokenEntry(0xA0, "CD"),
    TokenEntry(0xA1, "MKDIR"),
    TokenEntry(0xA2, "RMDIR"),

    # =========================================================================
    # 48K / 128K / +3 Keywords ($A3-$FF)
    # =========================================================================
    TokenEntry(0xA3, "SPECTRUM"),
    TokenEntry(0xA4, "PLAY"),
    TokenEntry(0xA5, "RND"),
    TokenEntry(0xA6, "INKEY$"),
    TokenEntry(0xA7, "PI"),
    TokenEntry(0xA8, "FN"),
    TokenEntry(0xA9, "POINT"),
    TokenEntry(0xAA, "SCREEN$"),
    TokenEntry(0xAB, "ATTR"),
    TokenEntry(0xAC, "AT"),
    TokenEntry(0xAD, "TAB"),
    TokenEntry(0xAE, "VAL$"),
    TokenEntry(0xAF, "CODE"),
    TokenEntry(0xB0, "VAL"),
    TokenEntry(0xB1, "LEN"),
    TokenEntry(0xB2, "SIN"),
    TokenEntry(0xB3, "COS"),
    TokenEntry(0xB4, "TAN"),
    TokenEntry(0xB5, "ASN"),
    TokenEntry(0xB6, "ACS"),
    TokenEntry(0xB7, "ATN"),
    TokenEntry(0xB8, "LN"),
    TokenEntry(0xB9, "EXP"),
    TokenEntry(0xBA, "INT"),
    TokenEntry(0xBB, "SQR"),
    TokenEntry(0xBC, "SGN"),
    TokenEntry(0xBD, "ABS"),
    TokenEntry(0xBE, "PEEK"),
    TokenEntry(0xBF, "IN"),
    TokenEntry(0xC0, "USR"),
    TokenEntry(0xC1, "STR$"),
    TokenEntry(0xC2, "CHR$"),
    TokenEntry(0xC3, "NOT"),
    TokenEntry(0xC4, "BIN"),
    TokenEntry(0xC5, "OR"),
    TokenEntry(0xC6, "AND"),
    TokenEntry(0xC7, "<="),
    TokenEntry(0xC8, ">="),
    TokenEntry(0xC9, "<>"),
    TokenEntry(0xCA, "LINE"),
    TokenEntry(0xCB, "THEN"),
    TokenEntry(0xCC, "TO"),
    TokenEntry(0xCD, "STEP"),
    TokenEntry(0xCE, "DEF FN"),
    TokenEntry(0xCF, "CAT"),
    TokenEntry(0xD0, "FORMAT"),
    TokenEntry(0xD1, "MOVE"),
    TokenEntry(0xD2, "ERASE"),
    TokenEntry(0xD3, "OPEN #"),
    TokenEntry(0xD4, "CLOSE #"),
    TokenEntry(0xD5, "MERGE"),
    TokenEntry(0xD6, "VERIFY"),
    TokenEntry(0xD7, "BEEP"),
    TokenEntry(0xD8, "CIRCLE"),
    TokenEntry(0xD9, "INK"),
    TokenEntry(0xDA, "PAPER"),
    TokenEntry(0xDB, "FLASH"),
    TokenEntry(0xDC, "BRIGHT"),
    TokenEntry(0xDD, "INVERSE"),
    TokenEntry(0xDE, "OVER"),
    TokenEntry(0xDF, "OUT"),
    TokenEntry(0xE0, "LPRINT"),
    TokenEntry(0xE1, "LLIST"),
    TokenEntry(0xE2, "STOP"),
    TokenEntry(0xE3, "READ"),
    TokenEntry(0xE4, "DATA"),
    TokenEntry(0xE5, "RESTORE"),
    TokenEntry(0xE6, "NEW"),
    TokenEntry(0xE7, "BORDER"),
    TokenEntry(0xE8, "CONTINUE"),
    TokenEntry(0xE9, "DIM"),
    TokenEntry(REM_TOKEN, "REM"),
    TokenEntry(0xEB, "FOR"),
    TokenEntry(0xEC, "GO TO", aliases=("GOTO",)),
    TokenEntry(0xED, "GO SUB", aliases=("GOSUB",)),
    TokenEntry(0xEE, "INPUT"),
    TokenEntry(0xEF, "LOAD"),
    TokenEntry(0xF0, "LIST"),
    TokenEntry(0xF1, "LET"),
    TokenEntry(0xF2, "PAUSE"),
    TokenEntry(0xF3, "NEXT"),
    TokenEntry(0xF4, "POKE"),
    TokenEntry(0xF5, "PRINT"),
    TokenEntry(0xF6, "PLOT"),
    TokenEntry(0xF7, "RUN"),
    TokenEntry(0xF8, "SAVE"),
    TokenEntry(0xF9, "RANDOMIZE"),
    TokenEntry(0xFA, "IF"),
    TokenEntry(0xFB, "CLS"),
    TokenEntry(0xFC, "DRAW"),
    TokenEntry(0xFD, "CLEAR"),
    TokenEntry(0xFE, "RETURN"),
    TokenEntry(0xFF, "COPY"),
)


# =============================================================================
# Token Table
# =============================================================================

class TokenTable:
    """
    Immutable bidirectional keyword <-> token code table.

    Built once from a list of TokenEntry values. Lookups by name are
    case-insensitive. The table holds no mutable state after construction
    and can be shared between encoders and decoders, including across
    threads.

    Example:
        >>> TOKEN_TABLE.lookup_by_code(0xF5)
        'PRINT'
        >>> TOKEN_TABLE.lookup_by_name("goto")
        236
    """

    __slots__ = ("_by_code", "_by_name", "_by_length")

    def __init__(self, entries: tuple[TokenEntry, ...]):
        by_code: dict[int, str] = {}
        by_name: dict[str, int] = {}

        for entry in entries:
            if not FIRST_TOKEN_CODE <= entry.code <= 0xFF:
                raise ValueError(f"Token code out of range: 0x{entry.code:02X}")
            if entry.code in by_code:
                raise ValueError(f"Duplicate token code: 0x{entry.code:02X}")
            by_code[entry.code] = entry.keyword

            for spelling in entry.spellings:
                key = spelling.upper()
                if key in by_name:
                    raise ValueError(f"Duplicate keyword spelling: {spelling!r}")
                by_name[key] = entry.code

        self._by_code: Mapping[int, str] = MappingProxyType(by_code)
        self._by_name: Mapping[str, int] = MappingProxyType(by_name)
        # Longest first; ties broken alphabetically so the order is stable
        self._by_length: tuple[str, ...] = tuple(
            sorted(by_name, key=lambda name: (-len(name), name))
        )

    def lookup_by_code(self, code: int) -> Optional[str]:
        """Return the canonical keyword for a token byte, or None."""
        return self._by_code.get(code)

    def lookup_by_name(self, name: str) -> Optional[int]:
        """Return the token byte for a keyword spelling (any case), or None."""
        return self._by_name.get(name.upper())

    def keywords_by_length(self) -> tuple[str, ...]:
        """
        All accepted spellings, longest first.

        This is the order the encoder must try keywords in so that a
        longer keyword is preferred over a shorter one sharing a prefix.
        """
        return self._by_length

    def is_token(self, code: int) -> bool:
        """Check whether a byte value is an assigned token."""
        return code in self._by_code

    def __len__(self) -> int:
        return len(self._by_code)

    def __iter__(self) -> Iterator[tuple[int, str]]:
        """Iterate (code, keyword) pairs in code order."""
        return iter(sorted(self._by_code.items()))


# Module-level table shared by the encoder and decoder
TOKEN_TABLE = TokenTable(TOKEN_ENTRIES)
