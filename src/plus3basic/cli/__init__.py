"""
plus3basic Command-Line Interface
=================================

This package provides the command-line tools:

- **bas2txt**: List a tokenized +3DOS BASIC file as text
- **txt2bas**: Tokenize a text listing into a +3DOS BASIC file

Each tool is implemented as a Click-based CLI application with
help text and consistent error reporting.
"""

__all__ = ["bas2txt", "txt2bas"]
