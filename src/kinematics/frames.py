"""
Frames Module
=============

Homogeneous transformations ("frames") and vectors for task-level robot
programming.

Mathematical Background:

    A frame is a 4x4 homogeneous transformation describing the pose of
    one coordinate system relative to another:

             ⎡ nx  ox  ax  px ⎤
        T = ⎢ ny  oy  ay  py ⎥
             ⎢ nz  oz  az  pz ⎥
             ⎣ 0   0   0   1  ⎦

    n, o, a are the normal, orientation and approach unit vectors and p is
    the position of the origin.

    Composition:
        T1 * T2 = [R1 R2 | R1 t2 + t1]

    Inverse (rigid transforms only):
        inv(T) = [R^T | -R^T t]

Pose Builders:
    trans(x, y, z), rotx(deg), roty(deg), rotz(deg), inv(T)

    A task is written as a chain of frames, e.g.

        >>> T5 = inv(Z) * object_grasp * object_approach * inv(E)

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Tuple, Union, overload
import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = NDArray[np.floating]


# =============================================================================
# Vector
# =============================================================================

@dataclass(frozen=True)
class Vector:
    """
    Point or direction in 3D space.

    Attributes:
        x: x component (mm)
        y: y component (mm)
        z: z component (mm)
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, values: FloatArray) -> "Vector":
        """Create vector from the first three elements of an array."""
        values = np.asarray(values, dtype=float).flatten()
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def to_array(self) -> FloatArray:
        """Get [x, y, z] as numpy array."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, scale: float) -> "Vector":
        return Vector(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def dot(self, other: "Vector") -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector") -> "Vector":
        """Vector product."""
        return Vector.from_array(np.cross(self.to_array(), other.to_array()))

    def norm(self) -> float:
        """Euclidean length."""
        return float(np.sqrt(self.dot(self)))

    def __str__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


# =============================================================================
# Frame
# =============================================================================

class Frame:
    """
    Rigid body transformation (SE(3)) held as a 4x4 homogeneous matrix.

    Frames compose with ``*`` (or ``@``) from left to right: the right
    operand is expressed in the frame produced by the left operand.
    Multiplying a frame by a Vector transforms the point.

    Example:
        >>> E = trans(0.0, 0.0, 100.0)
        >>> pose = trans(0.0, 187.0, 216.0) * rotz(90.0)
        >>> T5 = pose * inv(E)
        >>> print(T5.position)
    """

    __slots__ = ("_matrix",)

    def __init__(self, matrix: Union[FloatArray, None] = None) -> None:
        """
        Initialize frame.

        Args:
            matrix: 4x4 homogeneous matrix (identity if None)

        Raises:
            ValueError: If matrix is not 4x4
        """
        if matrix is None:
            self._matrix = np.eye(4)
            return

        matrix = np.array(matrix, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"Frame requires a 4x4 matrix, got shape {matrix.shape}")
        self._matrix = matrix

    @classmethod
    def from_position_rotation(
        cls,
        position: Union[Vector, FloatArray],
        rotation: FloatArray
    ) -> "Frame":
        """
        Create frame from position and rotation matrix.

        Args:
            position: Vector or [x, y, z]
            rotation: 3x3 rotation matrix

        Returns:
            Frame instance
        """
        if isinstance(position, Vector):
            position = position.to_array()
        matrix = np.eye(4)
        matrix[:3, :3] = rotation
        matrix[:3, 3] = position
        return cls(matrix)

    @property
    def matrix(self) -> FloatArray:
        """Copy of the 4x4 homogeneous matrix."""
        return self._matrix.copy()

    @property
    def rotation(self) -> FloatArray:
        """Get 3x3 rotation matrix."""
        return self._matrix[:3, :3].copy()

    @property
    def position(self) -> Vector:
        """Origin of the frame."""
        return Vector.from_array(self._matrix[:3, 3])

    @property
    def n(self) -> Vector:
        """Normal vector (x axis)."""
        return Vector.from_array(self._matrix[:3, 0])

    @property
    def o(self) -> Vector:
        """Orientation vector (y axis)."""
        return Vector.from_array(self._matrix[:3, 1])

    @property
    def a(self) -> Vector:
        """Approach vector (z axis)."""
        return Vector.from_array(self._matrix[:3, 2])

    def inverse(self) -> "Frame":
        """Compute closed-form rigid transform inverse."""
        R = self._matrix[:3, :3]
        p = self._matrix[:3, 3]

        R_inv = R.T
        p_inv = -R_inv @ p

        return Frame.from_position_rotation(p_inv, R_inv)

    @overload
    def __mul__(self, other: "Frame") -> "Frame": ...

    @overload
    def __mul__(self, other: Vector) -> Vector: ...

    def __mul__(self, other):
        """Compose frames, or transform a point."""
        if isinstance(other, Frame):
            return Frame(self._matrix @ other._matrix)
        if isinstance(other, Vector):
            homogeneous = np.array([other.x, other.y, other.z, 1.0])
            return Vector.from_array(self._matrix @ homogeneous)
        return NotImplemented

    __matmul__ = __mul__

    def is_close(self, other: "Frame", tolerance: float = 1e-6) -> bool:
        """Elementwise comparison within an absolute tolerance."""
        return bool(np.allclose(self._matrix, other._matrix, atol=tolerance, rtol=0.0))

    def is_rigid(self, tolerance: float = 1e-6) -> bool:
        """Check the rotation submatrix is orthonormal with unit determinant."""
        R = self._matrix[:3, :3]
        orthonormal = np.allclose(R.T @ R, np.eye(3), atol=tolerance)
        return bool(orthonormal and abs(np.linalg.det(R) - 1.0) < tolerance)

    def print_frame(self) -> str:
        """
        Render the frame as n, o, a, p columns.

        The rendering is also written to the debug log.

        Returns:
            Formatted string
        """
        rows = []
        for i in range(4):
            rows.append(" ".join(f"{value:9.3f}" for value in self._matrix[i]))
        text = "\n".join(rows)
        logger.debug(f"Frame:\n{text}")
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Frame(position={self.position})"


# =============================================================================
# Pose Builders
# =============================================================================

def trans(x: float, y: float, z: float) -> Frame:
    """Pure translation."""
    return Frame.from_position_rotation(np.array([x, y, z], dtype=float), np.eye(3))


def rotx(degrees: float) -> Frame:
    """Pure rotation about the x axis."""
    c, s = _cos_sin(degrees)
    return Frame.from_position_rotation(np.zeros(3), np.array([
        [1.0, 0.0, 0.0],
        [0.0, c,   -s ],
        [0.0, s,   c  ]
    ]))


def roty(degrees: float) -> Frame:
    """Pure rotation about the y axis."""
    c, s = _cos_sin(degrees)
    return Frame.from_position_rotation(np.zeros(3), np.array([
        [c,   0.0, s  ],
        [0.0, 1.0, 0.0],
        [-s,  0.0, c  ]
    ]))


def rotz(degrees: float) -> Frame:
    """Pure rotation about the z axis."""
    c, s = _cos_sin(degrees)
    return Frame.from_position_rotation(np.zeros(3), np.array([
        [c,   -s,  0.0],
        [s,   c,   0.0],
        [0.0, 0.0, 1.0]
    ]))


def inv(frame: Frame) -> Frame:
    """Closed-form inverse of a rigid transform."""
    return frame.inverse()


def _cos_sin(degrees: float) -> Tuple[float, float]:
    """Cosine and sine of an angle in degrees, snapped at quadrant angles."""
    radians = np.radians(degrees)
    c, s = np.cos(radians), np.sin(radians)
    # Keep rotx(90) etc. exact so that composed frames stay tidy
    if abs(c) < 1e-15:
        c = 0.0
    if abs(s) < 1e-15:
        s = 0.0
    return float(c), float(s)
