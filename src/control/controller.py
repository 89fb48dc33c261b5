"""
Robot Session Module
====================

Task-level motion commands for the arm.

A session owns the robot configuration, the kinematic model, the
calibration and the transport, and tracks the current joint-space pose.

Motion Commands:
    - move(T5): inverse kinematics -> joint limits -> setpoints -> command
    - grasp(opening): gripper opening (mm) or GripperState.OPEN/CLOSED
    - go_home(): home setpoints with the gripper fully open
    - wait(seconds): explicit blocking pause

Each command returns a MotionResult. Kinematic failures (unreachable pose,
joint or pulse range violation) are reported in the result and nothing is
sent; transport failures raise TransportError.

Example:
    >>> config = RobotConfig.from_file("robot1.txt")
    >>> with RobotSession(config, SimulatedTransport()) as robot:
    ...     T5 = robot.wrist_pose(trans(0, 187, 20) * roty(180) * rotz(-90))
    ...     result = robot.move(T5)
    ...     if not result:
    ...         print(result.error)
    ...     robot.grasp(15)

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List, Dict, Any, Sequence, Union
import numpy as np
from numpy.typing import NDArray

from ..kinematics.frames import Frame, inv, trans
from ..kinematics.solver import (
    ArmKinematics,
    ElbowConfiguration,
    HOME_JOINT_ANGLES,
    JointAngles,
    KinematicsError,
)
from .calibration import Calibration
from .config import RobotConfig
from .transport import ServoCommand, ServoTransport, SimulatedTransport

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.floating]
Speed = Union[int, Sequence[int]]


class GraspError(Exception):
    """Invalid gripper request."""


class GripperState(Enum):
    """Symbolic gripper openings."""
    OPEN = auto()       # Maximum opening
    CLOSED = auto()     # Full mechanical closure


@dataclass
class MotionResult:
    """
    Outcome of a motion command.

    Attributes:
        success: True if the command was issued
        error: Reason for failure
        joint_angles: Commanded joint-space pose
        setpoints: Commanded setpoints (us)
        travel_time: Expected duration of the motion (s)
    """
    success: bool
    error: Optional[Exception] = None
    joint_angles: Optional[JointAngles] = None
    setpoints: Optional[List[int]] = None
    travel_time: float = 0.0

    def __bool__(self) -> bool:
        return self.success


def interpolate_setpoints(
    start: List[int],
    end: List[int],
    steps: int
) -> List[List[int]]:
    """
    Intermediate setpoint vectors from start to end.

    Each channel moves monotonically; the last vector equals ``end``.

    Args:
        start: Current setpoints
        end: Target setpoints
        steps: Number of vectors to produce (>= 1)

    Returns:
        List of ``steps`` setpoint vectors
    """
    if steps < 1:
        raise ValueError("steps must be at least 1")

    path = np.linspace(np.asarray(start, dtype=float), np.asarray(end, dtype=float), steps + 1)
    return [[int(round(s)) for s in row] for row in path[1:]]


class RobotSession:
    """
    Motion dispatcher and gripper control for one robot.

    Integrates:
    - Inverse kinematics
    - Calibration
    - Servo transport
    - Current pose state
    """

    def __init__(
        self,
        config: RobotConfig,
        transport: Optional[ServoTransport] = None,
        kinematics: Optional[ArmKinematics] = None,
        elbow: ElbowConfiguration = ElbowConfiguration.UP
    ) -> None:
        """
        Initialize session.

        Args:
            config: Robot configuration and calibration data
            transport: Command channel (simulation if None)
            kinematics: Kinematic model (built from config if None)
            elbow: Default elbow branch
        """
        self.config = config

        if kinematics is not None:
            self.kinematics = kinematics
        else:
            self.kinematics = ArmKinematics(config.geometry, config.joint_limits(), elbow)

        self.calibration = Calibration(config)
        self.transport = transport if transport is not None else SimulatedTransport()

        # Frames of the task: robot base in the world, gripper tip in T5
        self.base_frame = trans(0.0, 0.0, 0.0)
        self.effector_frame = trans(0.0, 0.0, config.effector_length)

        # Assumed until the first command
        self._pose = config.default_pose()
        self._setpoints = self.calibration.joint_angles_to_setpoints(
            self._pose.angles, self._pose.gripper_distance
        )

        logger.info(
            f"RobotSession initialized: {type(self.transport).__name__}, "
            f"wrist={config.wrist.value}"
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self) -> None:
        """Open the transport."""
        self.transport.open()

    def close(self) -> None:
        """Close the transport."""
        self.transport.close()

    def __enter__(self) -> "RobotSession":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # =========================================================================
    # Task Frames
    # =========================================================================

    def wrist_pose(self, tool_pose: Frame) -> Frame:
        """
        Wrist frame T5 placing the gripper tip at a task frame.

        T5 = inv(Z) * tool_pose * inv(E)

        Args:
            tool_pose: Desired gripper pose in world coordinates

        Returns:
            T5 in base coordinates
        """
        return inv(self.base_frame) * tool_pose * inv(self.effector_frame)

    # =========================================================================
    # Commands
    # =========================================================================

    def move(
        self,
        target: Frame,
        speed: Optional[Speed] = None,
        steps: int = 1,
        elbow: Optional[ElbowConfiguration] = None,
        block: bool = False
    ) -> MotionResult:
        """
        Move the wrist to a frame.

        Args:
            target: T5 in base coordinates
            speed: Servo speed (us/s), single or per servo; configured
                default if None
            steps: Number of interpolated commands
            elbow: Elbow branch (session default if None)
            block: Wait for the travel time before returning

        Returns:
            MotionResult; on failure nothing is sent

        Raises:
            TransportError: If the command cannot be issued
        """
        gripper = self._pose.gripper_distance
        try:
            q = self.kinematics.inverse_kinematics(
                target, seed=self._pose.angles, elbow=elbow
            )
            setpoints = self.calibration.joint_angles_to_setpoints(q, gripper)
            self.calibration.check_setpoints(setpoints)
        except KinematicsError as exc:
            logger.warning(f"Move to {target.position} rejected: {exc}")
            return MotionResult(success=False, error=exc)

        pose = JointAngles(q, gripper)
        travel_time = self._dispatch(setpoints, pose, speed, steps)
        logger.debug(f"Moved to {pose}")

        if block:
            self.wait(travel_time)

        return MotionResult(
            success=True,
            joint_angles=pose.copy(),
            setpoints=list(setpoints),
            travel_time=travel_time,
        )

    def grasp(
        self,
        opening: Union[float, GripperState],
        speed: Optional[Speed] = None,
        block: bool = False
    ) -> MotionResult:
        """
        Set the gripper opening.

        Numeric openings are clamped to the configured gripper range, so
        full closure is only commanded by ``GripperState.CLOSED``. Values
        that are not numbers, negative or not finite fail with GraspError.

        Args:
            opening: Opening (mm) or symbolic state
            speed: Servo speed (us/s), single or per servo
            block: Wait for the travel time before returning

        Returns:
            MotionResult
        """
        min_opening, max_opening = self.config.gripper_range

        if isinstance(opening, GripperState):
            opening_mm = max_opening if opening == GripperState.OPEN else 0.0
        else:
            try:
                opening_mm = float(opening)
            except (TypeError, ValueError):
                opening_mm = float("nan")

            if not np.isfinite(opening_mm) or opening_mm < 0:
                error = GraspError(f"Invalid gripper opening {opening!r}")
                logger.warning(str(error))
                return MotionResult(success=False, error=error)

            clamped = float(np.clip(opening_mm, min_opening, max_opening))
            if clamped != opening_mm:
                logger.warning(
                    f"Gripper opening {opening_mm:.1f}mm clamped to {clamped:.1f}mm"
                )
            opening_mm = clamped

        setpoints = self._setpoints[:-1] + [self.calibration.gripper_setpoint(opening_mm)]
        try:
            self.calibration.check_setpoints(setpoints)
        except KinematicsError as exc:
            logger.warning(f"Grasp rejected: {exc}")
            return MotionResult(success=False, error=exc)

        pose = JointAngles(self._pose.angles, opening_mm / 1000.0)
        travel_time = self._dispatch(setpoints, pose, speed, steps=1)

        if block:
            self.wait(travel_time)

        return MotionResult(
            success=True,
            joint_angles=pose.copy(),
            setpoints=list(setpoints),
            travel_time=travel_time,
        )

    def go_home(self, speed: Optional[Speed] = None, block: bool = False) -> MotionResult:
        """
        Return to the home pose with the gripper fully open.

        The home pose is close to the servo controller's power-up state,
        so the arm should be sent there before it is switched off.
        """
        _, max_opening = self.config.gripper_range
        pose = JointAngles(HOME_JOINT_ANGLES.copy(), max_opening / 1000.0)
        setpoints = self.calibration.home_setpoints

        travel_time = self._dispatch(setpoints, pose, speed, steps=1)
        logger.info("Robot at home pose")

        if block:
            self.wait(travel_time)

        return MotionResult(
            success=True,
            joint_angles=pose.copy(),
            setpoints=list(setpoints),
            travel_time=travel_time,
        )

    def wait(self, seconds: float) -> None:
        """Block for a fixed duration."""
        if seconds > 0:
            time.sleep(seconds)

    def _dispatch(
        self,
        setpoints: List[int],
        pose: JointAngles,
        speed: Optional[Speed],
        steps: int
    ) -> float:
        """
        Issue setpoints and record the pose of each command sent.

        Intermediate commands carry the joint angles and gripper distance
        interpolated on the same schedule as their setpoints. If the
        transport fails partway, the session keeps the last command that
        went out.

        Returns:
            Travel time (s)
        """
        speed = self.config.speed if speed is None else speed
        travel_time = self.travel_time(self._setpoints, setpoints, speed)
        channels = list(self.config.channels)

        if steps <= 1:
            commands = [ServoCommand(
                setpoints=list(setpoints),
                channels=channels,
                speed=speed,
                joint_angles=pose.angles,
                gripper_distance=pose.gripper_distance,
            )]
        else:
            path = interpolate_setpoints(self._setpoints, setpoints, steps)
            angles = np.linspace(self._pose.angles, pose.angles, steps + 1)[1:]
            grippers = np.linspace(
                self._pose.gripper_distance, pose.gripper_distance, steps + 1
            )[1:]
            commands = [
                ServoCommand(
                    setpoints=step,
                    channels=channels,
                    travel_time=travel_time / steps,
                    joint_angles=q,
                    gripper_distance=float(gripper),
                )
                for step, q, gripper in zip(path, angles, grippers)
            ]

        for command in commands:
            self.transport.send(command)
            self._setpoints = list(command.setpoints)
            self._pose = JointAngles(command.joint_angles.copy(), command.gripper_distance)

        return travel_time

    @staticmethod
    def travel_time(start: List[int], end: List[int], speed: Speed) -> float:
        """
        Time for the slowest servo to complete its setpoint change.

        1000us of travel is about 90° of rotation; at 500us/s that takes
        two seconds.
        """
        change = np.abs(np.asarray(end, dtype=float) - np.asarray(start, dtype=float))
        speeds = np.broadcast_to(np.asarray(speed, dtype=float), change.shape)
        return float(np.max(change / speeds))

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def current_pose(self) -> JointAngles:
        """Last commanded joint angles and gripper distance."""
        return self._pose.copy()

    @property
    def current_setpoints(self) -> List[int]:
        """Last commanded setpoints."""
        return list(self._setpoints)

    @property
    def current_frame(self) -> Frame:
        """Wrist frame of the last commanded pose."""
        return self.kinematics.forward_kinematics(self._pose.angles)

    def get_status(self) -> Dict[str, Any]:
        """Get session status for monitoring."""
        return {
            "transport": type(self.transport).__name__,
            "transport_open": self.transport.is_open,
            "joint_angles_deg": np.round(self._pose.degrees, 2).tolist(),
            "gripper_distance_m": self._pose.gripper_distance,
            "setpoints": list(self._setpoints),
            "wrist_position": list(self.current_frame.position),
        }
