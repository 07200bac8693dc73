"""Reading and writing gaze measurements on the book page."""

from __future__ import annotations

import os
from typing import Iterable, Union

from floaterlab.vecmath import Vec2

PathLike = Union[str, "os.PathLike[str]"]


def write_measurements(path: PathLike, positions: Iterable[Vec2]) -> None:
    """Write one ``x y`` line per position, with five decimals each."""
    with open(path, "w", encoding="ascii") as stream:
        for pos in positions:
            stream.write(f"{pos.x:.5f} {pos.y:.5f}\n")


def read_measurements(path: PathLike) -> list[Vec2]:
    """Read positions written as whitespace-separated ``x y`` pairs.

    Raises ValueError if the file holds something other than pairs of numbers.
    """
    with open(path, encoding="ascii") as stream:
        words = stream.read().split()
    try:
        numbers = [float(word) for word in words]
    except ValueError as exc:
        raise ValueError(f"{os.fspath(path)}: not a list of numbers") from exc
    if len(numbers) % 2:
        raise ValueError(f"{os.fspath(path)}: odd number of coordinates")
    pairs = iter(numbers)
    return [Vec2(x, y) for x, y in zip(pairs, pairs)]