"""
Kinematics Module
=================

Frame algebra and the closed-form kinematic model of a 5-DOF servo arm.

Key Components:
    - Frames: Homogeneous transformations, vectors and pose builders
    - Solver: Forward and inverse kinematics with joint limits

Arm Configuration:
    LynxMotion AL5D class arm with:
    - Base: 1 DOF (yaw)
    - Shoulder: 1 DOF (pitch)
    - Elbow: 1 DOF (pitch)
    - Wrist: 2 DOF (pitch, roll)

    Plus a parallel gripper.

Author: Robot Programming Project Team
License: MIT
"""

from .frames import (
    Vector,
    Frame,
    trans,
    rotx,
    roty,
    rotz,
    inv,
)

from .solver import (
    ArmGeometry,
    ArmKinematics,
    ElbowConfiguration,
    JointAngles,
    JointLimits,
    JointLimitError,
    KinematicsError,
    UnreachablePoseError,
    HOME_JOINT_ANGLES,
    JOINT_NAMES,
)

__version__ = "0.1.0"

__all__ = [
    # Frames
    "Vector",
    "Frame",
    "trans",
    "rotx",
    "roty",
    "rotz",
    "inv",
    # Solver
    "ArmGeometry",
    "ArmKinematics",
    "ElbowConfiguration",
    "JointAngles",
    "JointLimits",
    "JointLimitError",
    "KinematicsError",
    "UnreachablePoseError",
    "HOME_JOINT_ANGLES",
    "JOINT_NAMES",
]
