"""Small vector, matrix and quaternion types for 2D and 3D geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


class _Vector:
    """Arithmetic shared by the fixed-size vector types."""

    __slots__ = ()

    def __iter__(self) -> Iterator[float]:
        raise NotImplementedError

    def __getitem__(self, index: int) -> float:
        return tuple(self)[index]

    def __len__(self) -> int:
        return len(tuple(self))

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a - b for a, b in zip(self, other)))

    def __neg__(self):
        return type(self)(*(-a for a in self))

    def __mul__(self, scalar):
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return type(self)(*(a * scalar for a in self))

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return type(self)(*(a / scalar for a in self))

    def dot(self, other) -> float:
        """Dot product with a vector of the same size."""
        return sum(a * b for a, b in zip(self, other))

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self):
        """Unit vector in the same direction; raises ValueError for the zero vector."""
        n = self.length()
        if n == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / n

    def isclose(self, other, tol: float = 1e-9) -> bool:
        """Whether every component is within ``tol`` of ``other``."""
        return all(math.isclose(a, b, abs_tol=tol) for a, b in zip(self, other))


@dataclass(frozen=True)
class Vec2(_Vector):
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        return super().normalized()

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y


@dataclass(frozen=True)
class Vec3(_Vector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        return super().normalized()

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Right-handed cross product."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


@dataclass(frozen=True)
class Vec4(_Vector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def xyz(self) -> Vec3:
        """The first three components."""
        return Vec3(self.x, self.y, self.z)


@dataclass(frozen=True)
class Mat2:
    """A 2x2 matrix given row by row: [[a, b], [c, d]]."""

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def identity(cls) -> Mat2:
        return cls(1.0, 0.0, 0.0, 1.0)

    def apply(self, v: Vec2) -> Vec2:
        """Matrix-vector product."""
        return Vec2(self.a * v.x + self.b * v.y, self.c * v.x + self.d * v.y)

    def __matmul__(self, other):
        if isinstance(other, Vec2):
            return self.apply(other)
        if isinstance(other, Mat2):
            return Mat2(
                self.a * other.a + self.b * other.c,
                self.a * other.b + self.b * other.d,
                self.c * other.a + self.d * other.c,
                self.c * other.b + self.d * other.d,
            )
        return NotImplemented


@dataclass(frozen=True)
class Mat4:
    """A 4x4 matrix stored as 16 entries in row-major order."""

    entries: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.entries) != 16:
            raise ValueError("a 4x4 matrix needs exactly 16 entries")
        object.__setattr__(self, "entries", tuple(float(e) for e in self.entries))

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return self.entries[4 * row + col]

    def rows(self) -> list[tuple[float, ...]]:
        return [self.entries[4 * r: 4 * r + 4] for r in range(4)]

    @classmethod
    def identity(cls) -> Mat4:
        return cls.scale(1.0)

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> Mat4:
        return cls((1, 0, 0, x, 0, 1, 0, y, 0, 0, 1, z, 0, 0, 0, 1))

    @classmethod
    def scale(cls, s: float) -> Mat4:
        """Uniform scale in x, y and z."""
        return cls((s, 0, 0, 0, 0, s, 0, 0, 0, 0, s, 0, 0, 0, 0, 1))

    def transform(self, v: Vec4) -> Vec4:
        """Matrix-vector product."""
        return Vec4(*(sum(m * c for m, c in zip(row, v)) for row in self.rows()))

    def __matmul__(self, other):
        if isinstance(other, Vec4):
            return self.transform(other)
        if isinstance(other, Mat4):
            cols = [other.entries[c::4] for c in range(4)]
            return Mat4(tuple(
                sum(a * b for a, b in zip(row, col))
                for row in self.rows() for col in cols
            ))
        return NotImplemented

    def inverse(self) -> Mat4:
        """Inverse by Gauss-Jordan elimination; raises ValueError if singular."""
        work = [list(row) + [1.0 if r == c else 0.0 for c in range(4)]
                for r, row in enumerate(self.rows())]
        for col in range(4):
            pivot = max(range(col, 4), key=lambda r: abs(work[r][col]))
            if abs(work[pivot][col]) < 1e-12:
                raise ValueError("matrix is singular")
            work[col], work[pivot] = work[pivot], work[col]
            p = work[col][col]
            work[col] = [e / p for e in work[col]]
            for r in range(4):
                if r != col:
                    factor = work[r][col]
                    if factor:
                        work[r] = [a - factor * b for a, b in zip(work[r], work[col])]
        return Mat4(tuple(e for row in work for e in row[4:]))


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion w + xi + yj + zk."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_axis_angle(cls, axis: Vec3, angle: float | None = None) -> Quaternion:
        """Rotation by ``angle`` radians about ``axis``.

        Without an angle, ``axis`` is an axis-angle vector whose length is the angle.
        """
        if angle is None:
            angle = axis.length()
            if angle == 0.0:
                return cls()
        unit = axis.normalized()
        s = math.sin(angle / 2.0)
        return cls(math.cos(angle / 2.0), unit.x * s, unit.y * s, unit.z * s)

    def __mul__(self, other: Quaternion) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def norm(self) -> float:
        return math.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)

    def inverse(self) -> Quaternion:
        n2 = self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2
        if n2 == 0.0:
            raise ValueError("zero quaternion has no inverse")
        return Quaternion(self.w / n2, -self.x / n2, -self.y / n2, -self.z / n2)

    def rotate(self, v: Vec3) -> Vec3:
        """Apply this rotation to a vector."""
        p = self * Quaternion(0.0, v.x, v.y, v.z) * self.inverse()
        return Vec3(p.x, p.y, p.z)

    def matrix(self) -> Mat4:
        """The 4x4 rotation matrix of a unit quaternion."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return Mat4((
            1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y), 0,
            2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x), 0,
            2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y), 0,
            0, 0, 0, 1,
        ))