"""
Editing commands as typed values.

Each command carries its own parameters; ``execute`` is the single place that
maps a command onto the ImageService call that performs it.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..models.enums import FlipType, GreyscaleComponentType
from ..models.errors import InvalidArgumentError
from ..services.image_service import ImageService


class Command:
    """Marker base for every command variant."""


@dataclass(frozen=True)
class Load(Command):
    path: Union[str, Path]
    name: str


@dataclass(frozen=True)
class Save(Command):
    path: Union[str, Path]
    name: str


@dataclass(frozen=True)
class Brighten(Command):
    amount: int
    src: str
    dest: str


@dataclass(frozen=True)
class Darken(Command):
    amount: int
    src: str
    dest: str


@dataclass(frozen=True)
class Flip(Command):
    axis: FlipType
    src: str
    dest: str


@dataclass(frozen=True)
class GreyscaleComponent(Command):
    component: GreyscaleComponentType
    src: str
    dest: str


@dataclass(frozen=True)
class Blur(Command):
    src: str
    dest: str


@dataclass(frozen=True)
class Sharpen(Command):
    src: str
    dest: str


@dataclass(frozen=True)
class Greyscale(Command):
    src: str
    dest: str


@dataclass(frozen=True)
class Sepia(Command):
    src: str
    dest: str


@dataclass(frozen=True)
class Downsize(Command):
    width_percent: int
    height_percent: int
    src: str
    dest: str


def execute(command: Command, service: ImageService) -> None:
    """Run *command* against *service*. Domain errors propagate unchanged."""
    if isinstance(command, Load):
        service.load(command.path, command.name)
    elif isinstance(command, Save):
        service.save(command.path, command.name)
    elif isinstance(command, Brighten):
        service.brighten(command.amount, command.src, command.dest)
    elif isinstance(command, Darken):
        service.darken(command.amount, command.src, command.dest)
    elif isinstance(command, Flip):
        service.flip(command.axis, command.src, command.dest)
    elif isinstance(command, GreyscaleComponent):
        service.greyscale_component(command.component, command.src, command.dest)
    elif isinstance(command, Blur):
        service.blur(command.src, command.dest)
    elif isinstance(command, Sharpen):
        service.sharpen(command.src, command.dest)
    elif isinstance(command, Greyscale):
        service.greyscale(command.src, command.dest)
    elif isinstance(command, Sepia):
        service.sepia(command.src, command.dest)
    elif isinstance(command, Downsize):
        service.downsize(command.width_percent, command.height_percent, command.src, command.dest)
    else:
        raise InvalidArgumentError(f"Unknown command: {command!r}")
