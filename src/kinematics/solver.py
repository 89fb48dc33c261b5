"""
Inverse Kinematics Module
=========================

Closed-form forward and inverse kinematics for a 5-DOF servo arm
(LynxMotion AL5D class) with the wrist roll folded into the wrist frame T5.

Arm Convention:

    Joint 1: Base yaw about the vertical axis (0 = arm along +y)
    Joint 2: Shoulder elevation of the upper arm from horizontal
    Joint 3: Elbow, relative to the upper arm (positive raises the forearm)
    Joint 4: Wrist pitch, relative to the forearm
    Joint 5: Wrist roll about the approach vector

    Home pose (0°, 90°, -90°, -90°, 0°): upper arm vertical, forearm
    horizontal, approach vector horizontal along +y.

Forward Kinematics:

    T5 = rotz(θ1) · trans(0, 0, h)
       · rotx(θ2) · trans(0, L1, 0)
       · rotx(θ3) · trans(0, L2, 0)
       · rotx(θ4 + 90) · rotz(90) · roty(90)
       · rotz(θ5) · trans(0, 0, w)

    h: base height, L1: upper arm, L2: forearm, w: wrist offset along the
    approach vector. The approach elevation is φ = θ2 + θ3 + θ4 + 90°.

Inverse Kinematics:

    1. Wrist pitch point   p_w = p - w·a
    2. Base yaw            θ1 = atan2(-x_w, y_w)
    3. Planar problem      r = reach in the arm plane, z = z_w - h
    4. Law of cosines      cos θ3 = (r² + z² - L1² - L2²) / (2·L1·L2)
       |cos θ3| > 1 means the target lies outside the reachable annulus
       [|L1 - L2|, L1 + L2] and the solve fails.
    5. Shoulder            θ2 = atan2(z, r) - atan2(L2·sin θ3, L1 + L2·cos θ3)
    6. Wrist pitch         θ4 = φ - 90° - θ2 - θ3
    7. Wrist roll          θ5 from the residual rotation about the approach

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple, List, Sequence
import numpy as np
from numpy.typing import NDArray

from .frames import Frame, rotx, roty, rotz, trans

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = NDArray[np.floating]

N_JOINTS = 5

JOINT_NAMES = ("base", "shoulder", "elbow", "wrist_pitch", "wrist_roll")

# Joint angles (rad) at which the servo home setpoints are calibrated
HOME_JOINT_ANGLES = np.radians([0.0, 90.0, -90.0, -90.0, 0.0])

# Mechanical range of each joint (deg): home ± 90°
DEFAULT_JOINT_LIMITS_DEG = (
    (-90.0, 90.0),
    (0.0, 180.0),
    (-180.0, 0.0),
    (-180.0, 0.0),
    (-90.0, 90.0),
)

# Maps the arm-plane frame onto the wrist frame: approach along the link,
# direction of gripper movement along the base x axis.
WRIST_ALIGNMENT = rotz(90.0) * roty(90.0)

_SINGULARITY_EPS = 1e-9
_LIMIT_TOLERANCE = 1e-9


# =============================================================================
# Errors
# =============================================================================

class KinematicsError(Exception):
    """Base class for inverse kinematics failures."""


class UnreachablePoseError(KinematicsError):
    """Target wrist point lies outside the reachable annulus."""


class JointLimitError(KinematicsError):
    """A computed joint value violates its mechanical range."""

    def __init__(self, message: str, joints: Optional[List[int]] = None) -> None:
        super().__init__(message)
        self.joints = joints or []


# =============================================================================
# Data Classes
# =============================================================================

class ElbowConfiguration(Enum):
    """Branch selection for the two law-of-cosines solutions."""
    UP = auto()         # Elbow above the shoulder-wrist line
    DOWN = auto()       # Elbow below the shoulder-wrist line
    NEAREST = auto()    # Branch closest to the seed pose


@dataclass
class JointLimits:
    """
    Mechanical range of a revolute joint.

    Attributes:
        lower: Lower position limit (rad)
        upper: Upper position limit (rad)
    """
    lower: float = -np.pi / 2
    upper: float = np.pi / 2

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.lower >= self.upper:
            raise ValueError(f"lower ({self.lower}) must be < upper ({self.upper})")

    @classmethod
    def from_degrees(cls, lower: float, upper: float) -> "JointLimits":
        """Create limits from degree values."""
        return cls(float(np.radians(lower)), float(np.radians(upper)))

    def clamp(self, value: float) -> float:
        """Clamp value to position limits."""
        return float(np.clip(value, self.lower, self.upper))

    def is_within(self, value: float, margin: float = 0.0) -> bool:
        """Check if value is within limits with optional margin."""
        return (self.lower + margin) <= value <= (self.upper - margin)


@dataclass
class ArmGeometry:
    """
    Link dimensions of the arm (mm).

    Attributes:
        base_height: Height of the shoulder pivot above the base frame
        upper_arm: Shoulder-to-elbow length (humerus)
        forearm: Elbow-to-wrist length (ulna)
        wrist_offset: Distance from the wrist pitch axis to the origin of
            T5 along the approach vector
    """
    base_height: float = 67.31
    upper_arm: float = 146.05
    forearm: float = 187.325
    wrist_offset: float = 0.0

    def __post_init__(self) -> None:
        """Validate link lengths."""
        if self.upper_arm <= 0 or self.forearm <= 0:
            raise ValueError("upper_arm and forearm must be positive")
        if self.wrist_offset < 0:
            raise ValueError("wrist_offset must be non-negative")

    @property
    def reach_limits(self) -> Tuple[float, float]:
        """Inner and outer radius of the reachable annulus about the shoulder."""
        return abs(self.upper_arm - self.forearm), self.upper_arm + self.forearm


@dataclass
class JointAngles:
    """
    Joint-space pose of the arm.

    Attributes:
        angles: Five joint angles (rad)
        gripper_distance: Gripper opening (m)
    """
    angles: FloatArray = field(default_factory=lambda: HOME_JOINT_ANGLES.copy())
    gripper_distance: float = 0.0

    def __post_init__(self) -> None:
        """Ensure angles are a float array of the right length."""
        self.angles = np.asarray(self.angles, dtype=float).flatten()
        if len(self.angles) != N_JOINTS:
            raise ValueError(f"Expected {N_JOINTS} joint angles, got {len(self.angles)}")

    @property
    def degrees(self) -> FloatArray:
        """Joint angles in degrees."""
        return np.degrees(self.angles)

    def copy(self) -> "JointAngles":
        return JointAngles(self.angles.copy(), self.gripper_distance)

    def __str__(self) -> str:
        values = ", ".join(f"{d:.1f}" for d in self.degrees)
        return f"[{values}] deg, gripper {self.gripper_distance * 1000.0:.1f} mm"


def wrap_angle(angle: float) -> float:
    """Wrap angle to [-pi, pi)."""
    return float((angle + np.pi) % (2 * np.pi) - np.pi)


# =============================================================================
# Arm Kinematics Class
# =============================================================================

class ArmKinematics:
    """
    Kinematic model of a 5-DOF arm with a closed-form inverse.

    The solver works on the wrist frame T5 expressed in the robot base
    frame. A task frame is reduced to T5 by the caller, e.g.
    ``T5 = inv(Z) * object_grasp * inv(E)``.

    Example:
        >>> arm = ArmKinematics()
        >>> T5 = arm.forward_kinematics(HOME_JOINT_ANGLES)
        >>> q = arm.inverse_kinematics(T5)
        >>> np.allclose(q, HOME_JOINT_ANGLES)
        True
    """

    def __init__(
        self,
        geometry: Optional[ArmGeometry] = None,
        joint_limits: Optional[Sequence[JointLimits]] = None,
        elbow: ElbowConfiguration = ElbowConfiguration.UP
    ) -> None:
        """
        Initialize arm kinematics.

        Args:
            geometry: Link dimensions (AL5D nominal if None)
            joint_limits: Limits for the five joints
            elbow: Default branch for the elbow solution
        """
        self.geometry = geometry or ArmGeometry()

        if joint_limits is None:
            self.joint_limits = [
                JointLimits.from_degrees(lo, hi) for lo, hi in DEFAULT_JOINT_LIMITS_DEG
            ]
        else:
            if len(joint_limits) != N_JOINTS:
                raise ValueError(f"joint_limits must have {N_JOINTS} entries")
            self.joint_limits = list(joint_limits)

        self.elbow = elbow

        logger.info(
            f"ArmKinematics initialized: L1={self.geometry.upper_arm}mm, "
            f"L2={self.geometry.forearm}mm, base={self.geometry.base_height}mm"
        )

    # =========================================================================
    # Forward Kinematics
    # =========================================================================

    def forward_kinematics(self, q: FloatArray) -> Frame:
        """
        Compute the wrist frame T5 for the given joint angles.

        Args:
            q: Joint angles (rad), shape (5,)

        Returns:
            T5 in base coordinates

        Raises:
            ValueError: If q has wrong length
        """
        q = np.asarray(q, dtype=float).flatten()
        if len(q) != N_JOINTS:
            raise ValueError(f"Expected {N_JOINTS} joints, got {len(q)}")

        g = self.geometry
        d = np.degrees(q)

        return (
            rotz(d[0]) * trans(0.0, 0.0, g.base_height)
            * rotx(d[1]) * trans(0.0, g.upper_arm, 0.0)
            * rotx(d[2]) * trans(0.0, g.forearm, 0.0)
            * rotx(d[3] + 90.0) * WRIST_ALIGNMENT
            * rotz(d[4]) * trans(0.0, 0.0, g.wrist_offset)
        )

    # =========================================================================
    # Inverse Kinematics
    # =========================================================================

    def inverse_kinematics(
        self,
        target: Frame,
        seed: Optional[FloatArray] = None,
        elbow: Optional[ElbowConfiguration] = None,
        check_limits: bool = True
    ) -> FloatArray:
        """
        Solve for the joint angles realizing a wrist frame.

        Args:
            target: Desired T5 in base coordinates
            seed: Previous joint angles, used where the solution is
                ambiguous (base above the wrist, nearest elbow branch)
            elbow: Elbow branch (defaults to the solver's setting)
            check_limits: Whether to reject angles outside the joint limits

        Returns:
            Joint angles (rad), shape (5,)

        Raises:
            UnreachablePoseError: If the wrist point is outside the annulus
            JointLimitError: If a joint angle is outside its range
        """
        g = self.geometry
        elbow = elbow or self.elbow
        seed = HOME_JOINT_ANGLES if seed is None else np.asarray(seed, dtype=float)

        approach = target.a.to_array()
        wrist = target.position.to_array() - g.wrist_offset * approach

        # Base yaw fixes the vertical plane of the planar sub-problem
        if np.hypot(wrist[0], wrist[1]) < _SINGULARITY_EPS:
            theta1 = float(seed[0])
            logger.debug("Wrist point on the base axis; base angle kept from seed")
        else:
            theta1 = float(np.arctan2(-wrist[0], wrist[1]))

        forward = np.array([-np.sin(theta1), np.cos(theta1), 0.0])
        reach = float(wrist @ forward)
        height = float(wrist[2] - g.base_height)

        theta2, theta3 = self._solve_planar(reach, height, elbow, seed)

        # Absolute approach elevation within the arm plane
        pitch = float(np.arctan2(approach[2], approach @ forward))
        theta4 = pitch - np.pi / 2 - theta2 - theta3

        theta5 = self._solve_roll(target, theta1, pitch)

        q = np.array([wrap_angle(a) for a in (theta1, theta2, theta3, theta4, theta5)])
        logger.debug(f"IK solution: {np.round(np.degrees(q), 2)} deg")

        if check_limits:
            self.validate(q)

        return q

    def _solve_planar(
        self,
        reach: float,
        height: float,
        elbow: ElbowConfiguration,
        seed: FloatArray
    ) -> Tuple[float, float]:
        """Two-link shoulder/elbow solution by the law of cosines."""
        L1, L2 = self.geometry.upper_arm, self.geometry.forearm
        distance_sq = reach * reach + height * height

        cos_elbow = (distance_sq - L1 * L1 - L2 * L2) / (2.0 * L1 * L2)
        if abs(cos_elbow) > 1.0 + _SINGULARITY_EPS:
            inner, outer = self.geometry.reach_limits
            raise UnreachablePoseError(
                f"Wrist distance {np.sqrt(distance_sq):.1f}mm from shoulder is outside "
                f"reachable annulus [{inner:.1f}, {outer:.1f}]mm"
            )
        elbow_angle = float(np.arccos(np.clip(cos_elbow, -1.0, 1.0)))

        if elbow == ElbowConfiguration.UP:
            candidates = [-elbow_angle]
        elif elbow == ElbowConfiguration.DOWN:
            candidates = [elbow_angle]
        else:
            candidates = [-elbow_angle, elbow_angle]

        solutions = []
        for theta3 in candidates:
            theta2 = float(
                np.arctan2(height, reach)
                - np.arctan2(L2 * np.sin(theta3), L1 + L2 * np.cos(theta3))
            )
            solutions.append((theta2, theta3))

        if len(solutions) == 1:
            return solutions[0]

        def distance_to_seed(solution: Tuple[float, float]) -> float:
            return (
                abs(wrap_angle(solution[0] - seed[1]))
                + abs(wrap_angle(solution[1] - seed[2]))
            )

        return min(solutions, key=distance_to_seed)

    def _solve_roll(self, target: Frame, theta1: float, pitch: float) -> float:
        """Wrist roll from the rotation left after base yaw and pitch."""
        unrolled = rotz(np.degrees(theta1)) * rotx(np.degrees(pitch)) * WRIST_ALIGNMENT
        residual = (unrolled.inverse() * target).rotation

        # A 5-DOF arm only realizes approach vectors in its vertical plane
        if residual[2, 2] < 1.0 - 1e-6:
            logger.warning(
                "Approach vector is not in the arm plane; orientation is projected"
            )

        return float(np.arctan2(residual[1, 0], residual[0, 0]))

    # =========================================================================
    # Joint Limits
    # =========================================================================

    def check_joint_limits(self, q: FloatArray) -> Tuple[bool, List[int]]:
        """
        Check if joint angles are within limits.

        Args:
            q: Joint angles

        Returns:
            Tuple of (all_within_limits, list_of_violated_joints)
        """
        q = np.asarray(q).flatten()
        violations = []

        for i, (qi, limit) in enumerate(zip(q, self.joint_limits)):
            if not limit.is_within(qi, margin=-_LIMIT_TOLERANCE):
                violations.append(i)

        return len(violations) == 0, violations

    def validate(self, q: FloatArray) -> None:
        """
        Raise if any joint angle is outside its limits.

        Raises:
            JointLimitError: Naming the violating joints
        """
        valid, violations = self.check_joint_limits(q)
        if valid:
            return

        details = ", ".join(
            f"{JOINT_NAMES[i]}={np.degrees(q[i]):.1f}deg "
            f"[{np.degrees(self.joint_limits[i].lower):.0f}, "
            f"{np.degrees(self.joint_limits[i].upper):.0f}]"
            for i in violations
        )
        raise JointLimitError(f"Joint limits violated: {details}", violations)

    def clamp_joints(self, q: FloatArray) -> FloatArray:
        """
        Clamp joint angles to limits.

        Args:
            q: Joint angles

        Returns:
            Clamped joint angles
        """
        q = np.asarray(q, dtype=float).flatten().copy()

        for i in range(N_JOINTS):
            q[i] = self.joint_limits[i].clamp(q[i])

        return q
