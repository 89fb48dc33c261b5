"""
Calibration Module
==================

Conversion between joint space and servo setpoints.

Each servo is calibrated about its home setpoint, the pulse width that
places the joint at its home angle (0°, 90°, -90°, -90°, 0°) with the
gripper fully open:

    setpoint_i = home_i + dir_i · (θ_i - θhome_i) · pulses_i       (θ in deg)

    setpoint_gripper = home_6 + (max_opening - opening) · pulses_6  (mm)

dir_i is fixed by how each servo is mounted, except for the wrist roll
whose direction is reversed on the heavy-duty wrist.

Setpoints are pulse widths in microseconds; 500us and 2500us are the two
extremes of a standard servo.

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
from typing import List, Sequence
import numpy as np
from numpy.typing import NDArray

from ..kinematics.solver import (
    HOME_JOINT_ANGLES,
    JOINT_NAMES,
    JointAngles,
    JointLimitError,
    N_JOINTS,
)
from .config import RobotConfig

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.floating]

# Servo mounting direction for base, shoulder, elbow, wrist pitch, wrist roll
JOINT_DIRECTIONS = (-1, 1, -1, 1, 1)

SERVO_NAMES = JOINT_NAMES + ("gripper",)


class Calibration:
    """
    Maps joint angles and gripper openings to servo setpoints.

    Example:
        >>> calibration = Calibration(RobotConfig.default())
        >>> calibration.joint_angles_to_setpoints(HOME_JOINT_ANGLES, 0.03)
        [1500, 1500, 1500, 1500, 1500, 1500]
    """

    def __init__(self, config: RobotConfig) -> None:
        self.config = config
        self._home = np.asarray(config.home, dtype=float)
        self._pulses = np.asarray(config.pulses, dtype=float)

        directions = np.array(JOINT_DIRECTIONS, dtype=float)
        directions[4] *= config.wrist.roll_direction
        self._directions = directions

        logger.debug(f"Calibration: directions={directions.tolist()}, wrist={config.wrist.value}")

    @property
    def directions(self) -> FloatArray:
        """Effective direction of each joint servo."""
        return self._directions.copy()

    @property
    def home_setpoints(self) -> List[int]:
        """Setpoints of the home pose with the gripper fully open."""
        return [int(h) for h in self.config.home]

    # =========================================================================
    # Joint Space -> Setpoints
    # =========================================================================

    def joint_angles_to_setpoints(
        self,
        angles: Sequence[float],
        gripper_distance: float
    ) -> List[int]:
        """
        Convert joint angles and gripper distance to servo setpoints.

        Args:
            angles: Five joint angles (rad)
            gripper_distance: Gripper opening (m)

        Returns:
            Six setpoints (us): joints 1-5, then gripper
        """
        joints = self.joint_setpoints(angles)
        return joints + [self.gripper_setpoint(gripper_distance * 1000.0)]

    def joint_setpoints(self, angles: Sequence[float]) -> List[int]:
        """Setpoints (us) for the five joints."""
        angles = np.asarray(angles, dtype=float).flatten()
        if len(angles) != N_JOINTS:
            raise ValueError(f"Expected {N_JOINTS} joint angles, got {len(angles)}")

        offset_deg = np.degrees(angles - HOME_JOINT_ANGLES)
        setpoints = self._home[:N_JOINTS] + self._directions * offset_deg * self._pulses[:N_JOINTS]

        return [int(round(s)) for s in setpoints]

    def gripper_setpoint(self, opening_mm: float) -> int:
        """
        Setpoint (us) for a gripper opening.

        The opening is not range checked here; see ``RobotSession.grasp``.
        """
        _, max_opening = self.config.gripper_range
        closure = max_opening - opening_mm
        return int(round(self._home[N_JOINTS] + closure * self._pulses[N_JOINTS]))

    # =========================================================================
    # Setpoints -> Joint Space
    # =========================================================================

    def setpoints_to_joint_angles(self, setpoints: Sequence[int]) -> JointAngles:
        """
        Recover joint angles and gripper distance from setpoints.

        Args:
            setpoints: Six setpoints (us)

        Returns:
            JointAngles (exact up to setpoint rounding)
        """
        setpoints = np.asarray(setpoints, dtype=float).flatten()
        if len(setpoints) != N_JOINTS + 1:
            raise ValueError(f"Expected {N_JOINTS + 1} setpoints, got {len(setpoints)}")

        delta = setpoints - self._home
        offset_deg = delta[:N_JOINTS] / (self._directions * self._pulses[:N_JOINTS])
        angles = HOME_JOINT_ANGLES + np.radians(offset_deg)

        _, max_opening = self.config.gripper_range
        opening_mm = max_opening - delta[N_JOINTS] / self._pulses[N_JOINTS]

        return JointAngles(angles, opening_mm / 1000.0)

    # =========================================================================
    # Feasibility
    # =========================================================================

    def check_setpoints(self, setpoints: Sequence[int]) -> None:
        """
        Raise if any setpoint is outside the servo pulse range.

        Raises:
            JointLimitError: Naming the servos out of range
        """
        low, high = self.config.pulse_range
        violations = [i for i, s in enumerate(setpoints) if not low <= s <= high]
        if not violations:
            return

        details = ", ".join(f"{SERVO_NAMES[i]}={setpoints[i]}us" for i in violations)
        raise JointLimitError(
            f"Setpoints outside pulse range [{low}, {high}]us: {details}", violations
        )
