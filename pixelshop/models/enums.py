from enum import Enum


class FlipType(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class GreyscaleComponentType(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    VALUE = "value"
    INTENSITY = "intensity"
    LUMA = "luma"
