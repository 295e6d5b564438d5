"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/namer.py
Collision-free file naming inside the output folder.
"""

import os
from typing import Container, Tuple


def split_name(filename: str) -> Tuple[str, str]:
    """
    Split a filename at its FIRST dot.

    Examples:
        "photo.jpg"      → ("photo", ".jpg")
        "archive.tar.gz" → ("archive", ".tar.gz")
        ".gitignore"     → ("", ".gitignore")
        "README"         → ("README", "")
    """
    dot = filename.find('.')
    if dot == -1:
        return filename, ""
    return filename[:dot], filename[dot:]


def unique_name(directory: str, desired_name: str, taken: Container[str] = ()) -> str:
    """
    Return a name that does not exist in `directory` and is not in `taken`.

    The desired name is returned unchanged when free, otherwise a counter is
    inserted before the extension: x.txt → x_1.txt → x_2.txt ...

    The check is not atomic. Callers resolving names for the same directory
    from several threads must hold a lock across this call and the move.
    """
    if _is_free(directory, desired_name, taken):
        return desired_name

    base, ext = split_name(desired_name)
    counter = 1
    while True:
        candidate = f"{base}_{counter}{ext}"
        if _is_free(directory, candidate, taken):
            return candidate
        counter += 1


def _is_free(directory: str, name: str, taken: Container[str]) -> bool:
    return name not in taken and not os.path.lexists(os.path.join(directory, name))
