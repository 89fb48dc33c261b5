"""
Control Module
==============

Servo control for the arm: configuration, calibration, command transports
and the task-level motion session.

Key Components:
    - Config: Robot-specific configuration and calibration data
    - Calibration: Joint angles to servo setpoints
    - Transport: SSC-32U serial, message bus and simulated command channels
    - Controller: move / grasp / go_home session

Author: Robot Programming Project Team
License: MIT
"""

from .config import (
    ConfigurationError,
    RobotConfig,
    WristType,
)

from .calibration import Calibration

from .transport import (
    MessageBusTransport,
    SerialTransport,
    ServoCommand,
    ServoTransport,
    SimulatedTransport,
    TransportError,
    TransportKind,
    create_transport,
)

from .controller import (
    GraspError,
    GripperState,
    MotionResult,
    RobotSession,
    interpolate_setpoints,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "ConfigurationError",
    "RobotConfig",
    "WristType",
    # Calibration
    "Calibration",
    # Transport
    "MessageBusTransport",
    "SerialTransport",
    "ServoCommand",
    "ServoTransport",
    "SimulatedTransport",
    "TransportError",
    "TransportKind",
    "create_transport",
    # Controller
    "GraspError",
    "GripperState",
    "MotionResult",
    "RobotSession",
    "interpolate_setpoints",
]
