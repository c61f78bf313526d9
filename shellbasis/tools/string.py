"""Tools for handling strings."""
# Copyright (C) TeNPy Developers, Apache license

from enum import Enum

__all__ = ['format_like_list', 'format_label', 'join_lines']


def format_like_list(it) -> str:
    """Format elements of an iterable as if it were a plain list.

    This means surrounding them with brackets and separating them by `', '`.
    """
    return f'[{", ".join(map(str, it))}]'


def format_label(label: tuple) -> str:
    """Format a label tuple like a list, showing enum members by their name."""
    return format_like_list(entry.name if isinstance(entry, Enum) else entry for entry in label)


def join_lines(lines) -> str:
    """Join lines with newlines, including a trailing one if there is any line at all."""
    return ''.join(f'{line}\n' for line in lines)
