"""
Text command language.

    # comment
    load images/koala.ppm koala
    brighten 10 koala koala-bright
    vertical-flip koala koala-vertical
    downsize 50 25 koala koala-small
    save out/koala-small.png koala-small
    run more-commands.txt
    q

Numbers are parsed here so the commands themselves only carry typed values.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..models.enums import FlipType, GreyscaleComponentType
from ..models.errors import InvalidArgumentError
from .commands import (
    Blur, Brighten, Command, Darken, Downsize, Flip, Greyscale,
    GreyscaleComponent, Load, Save, Sepia, Sharpen,
)

QUIT_WORDS = {"q", "quit"}


@dataclass(frozen=True)
class RunScript:
    """Execute another script file in place."""
    path: Union[str, Path]


@dataclass(frozen=True)
class Quit:
    """Stop reading further commands."""


Statement = Union[Command, RunScript, Quit]


def _parse_int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise InvalidArgumentError(f"{what} must be an integer, got '{token}'") from None


def _non_negative(token: str, what: str) -> int:
    value = _parse_int(token, what)
    if value < 0:
        raise InvalidArgumentError(f"{what} must be a non-negative integer, got {value}")
    return value


def _src_dest(factory: Callable[[str, str], Command]) -> Tuple[int, Callable[[List[str]], Command]]:
    return 2, lambda a: factory(a[0], a[1])


def _component(component: GreyscaleComponentType):
    return _src_dest(lambda s, d: GreyscaleComponent(component, s, d))


_BUILDERS: Dict[str, Tuple[int, Callable[[List[str]], Statement]]] = {
    "load": (2, lambda a: Load(a[0], a[1])),
    "save": (2, lambda a: Save(a[0], a[1])),
    "brighten": (3, lambda a: Brighten(_non_negative(a[0], "Brightness increment"), a[1], a[2])),
    "darken": (3, lambda a: Darken(_non_negative(a[0], "Darkening increment"), a[1], a[2])),
    "horizontal-flip": _src_dest(lambda s, d: Flip(FlipType.HORIZONTAL, s, d)),
    "vertical-flip": _src_dest(lambda s, d: Flip(FlipType.VERTICAL, s, d)),
    "red-component": _component(GreyscaleComponentType.RED),
    "green-component": _component(GreyscaleComponentType.GREEN),
    "blue-component": _component(GreyscaleComponentType.BLUE),
    "value-component": _component(GreyscaleComponentType.VALUE),
    "intensity-component": _component(GreyscaleComponentType.INTENSITY),
    "luma-component": _component(GreyscaleComponentType.LUMA),
    "blur": _src_dest(Blur),
    "sharpen": _src_dest(Sharpen),
    "greyscale": _src_dest(Greyscale),
    "sepia": _src_dest(Sepia),
    "downsize": (4, lambda a: Downsize(
        _parse_int(a[0], "Width percent"), _parse_int(a[1], "Height percent"), a[2], a[3])),
    "run": (1, lambda a: RunScript(a[0])),
}


def build(verb: str, args: List[str]) -> Statement:
    """Build a statement from a verb and its string arguments."""
    if verb in QUIT_WORDS:
        return Quit()
    try:
        arity, builder = _BUILDERS[verb]
    except KeyError:
        raise InvalidArgumentError(f"Unknown command '{verb}'") from None
    if len(args) != arity:
        raise InvalidArgumentError(f"'{verb}' expects {arity} argument(s), got {len(args)}")
    return builder(args)


def parse_line(line: str, line_no: Optional[int] = None) -> Optional[Statement]:
    """
    Parse one script line. Returns None for blank lines and comments.

    Raises:
        InvalidArgumentError: unknown verb, wrong arity or bad number; the
            message carries *line_no* when given.
    """
    text = line.split("#", 1)[0].strip()
    if not text:
        return None
    verb, *args = text.split()
    try:
        return build(verb.lower(), args)
    except InvalidArgumentError as err:
        if line_no is None:
            raise
        raise InvalidArgumentError(f"line {line_no}: {err}") from err
