"""Puzzle collections: reading and writing the 9x9 and 16x16 file layouts."""

from .parser import load_puzzles, parse_9, parse_16, format_puzzles, save_puzzles

__all__ = ["load_puzzles", "parse_9", "parse_16", "format_puzzles", "save_puzzles"]
