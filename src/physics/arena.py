"""
Arena — геометрия квадратной арены на вертикальном холсте

Холст width × height (по умолчанию 1080 × 1920, вертикальное видео).
Сверху остаётся место под UI (дата, шкала времени), арена — квадрат:

    x: side_margin .. width - side_margin
    y: box_top     .. box_top + (width - 2·side_margin)

Стены: статические прямоугольники толщиной wall_thickness снаружи арены.
"""

from dataclasses import dataclass

from src.core.math.numerical_safeguards import validate_non_negative, validate_positive

Vertex = tuple[float, float]


@dataclass(frozen=True)
class ArenaBounds:
    """Внутренние границы арены (пиксели)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass(frozen=True)
class ArenaConfig:
    """Конфигурация арены."""

    width: float = 1080.0
    height: float = 1920.0
    side_margin: float = 60.0
    box_top: float = 400.0
    wall_thickness: float = 100.0

    # Зазор страховочного clamp'а: тело держится на radius + clamp_padding от стены
    clamp_padding: float = 5.0

    def __post_init__(self) -> None:
        validate_positive(self.width, "width")
        validate_positive(self.height, "height")
        validate_non_negative(self.side_margin, "side_margin")
        validate_non_negative(self.box_top, "box_top")
        validate_positive(self.wall_thickness, "wall_thickness")
        validate_non_negative(self.clamp_padding, "clamp_padding")

        if self.width - 2 * self.side_margin <= 0:
            raise ValueError(
                f"side_margin {self.side_margin} leaves no room in width {self.width}"
            )
        if self.box_top + self.inner_size > self.height:
            raise ValueError(
                f"square arena (top={self.box_top}, size={self.inner_size}) "
                f"does not fit into height {self.height}"
            )

    @property
    def inner_size(self) -> float:
        return self.width - 2 * self.side_margin

    @property
    def bounds(self) -> ArenaBounds:
        return ArenaBounds(
            min_x=self.side_margin,
            min_y=self.box_top,
            max_x=self.width - self.side_margin,
            max_y=self.box_top + self.inner_size,
        )

    def wall_polygons(self) -> list[list[Vertex]]:
        """
        Вершины четырёх стен (верх, низ, лево, право) в мировых координатах.

        Горизонтальные стены перекрывают углы, чтобы в стыках не было щелей.
        """
        b = self.bounds
        t = self.wall_thickness

        def rect(x0: float, y0: float, x1: float, y1: float) -> list[Vertex]:
            return [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]

        return [
            rect(b.min_x - t, b.min_y - t, b.max_x + t, b.min_y),
            rect(b.min_x - t, b.max_y, b.max_x + t, b.max_y + t),
            rect(b.min_x - t, b.min_y, b.min_x, b.max_y),
            rect(b.max_x, b.min_y, b.max_x + t, b.max_y),
        ]
