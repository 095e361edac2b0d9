"""
Drawing surface abstraction. Renderers issue primitive operations against
a surface and never depend on a concrete graphics API.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple


class DrawingSurface(ABC):
    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height

    @abstractmethod
    def clear(self):
        pass

    @abstractmethod
    def fill_circle(self, x: float, y: float, radius: float, color: str, opacity: float = 1.0):
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, color: str):
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float, color: str = '#333', font: str = '12px Arial'):
        pass


@dataclass(frozen=True)
class DrawCommand:
    op: str
    args: Tuple


class RecordingSurface(DrawingSurface):
    """
    Headless surface that keeps the commands of the current frame.

    clear() starts a new frame, so memory stays bounded while an
    animation runs.
    """

    def __init__(self, width: float, height: float):
        super().__init__(width, height)
        self.commands: List[DrawCommand] = []
        self.frames = 0

    def clear(self):
        self.commands = []
        self.frames += 1

    def fill_circle(self, x, y, radius, color, opacity=1.0):
        self.commands.append(DrawCommand('circle', (x, y, radius, color, opacity)))

    def fill_rect(self, x, y, width, height, color):
        self.commands.append(DrawCommand('rect', (x, y, width, height, color)))

    def fill_text(self, text, x, y, color='#333', font='12px Arial'):
        self.commands.append(DrawCommand('text', (text, x, y, color, font)))

    def ops(self, op: str) -> List[DrawCommand]:
        return [command for command in self.commands if command.op == op]
