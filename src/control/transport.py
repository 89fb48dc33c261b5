"""
Servo Transport Module
======================

Hardware abstraction for issuing servo commands.

Transports:
    - SERIAL: SSC-32U servo controller over a USB serial port
    - MESSAGE_BUS: joint positions published for a simulator
      (e.g. the /lynxmotion_al5d/joints_positions/command topic)
    - SIMULATED: in-process transport recording every command

SSC-32U Command Protocol:

    #<ch>P<pw>S<spd> ... #<ch>P<pw>S<spd> T<time> <cr>

    ch:   servo-controller pin
    pw:   pulse width (us), 500-2500
    spd:  speed (us/s) for that servo
    time: duration of the whole move (ms), optional

    All servos in one command start and finish together.

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, List, Dict, Any, Callable, Protocol, Sequence, Union
import numpy as np
import serial
from numpy.typing import NDArray

from ..kinematics.solver import JOINT_NAMES
from .config import RobotConfig

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.floating]

DEFAULT_TOPIC = "/lynxmotion_al5d/joints_positions/command"


class TransportError(RuntimeError):
    """Writing a command to the actuator channel failed."""


class TransportKind(Enum):
    """Available command transports."""
    SERIAL = auto()
    MESSAGE_BUS = auto()
    SIMULATED = auto()


@dataclass
class ServoCommand:
    """
    Command for all six servos.

    Attributes:
        setpoints: Pulse widths (us), joints 1-5 then gripper
        channels: Servo-controller pin for each setpoint
        speed: Servo speed (us/s), one value for all servos or one per
            servo; None for full speed
        travel_time: Duration of the move (s), None to let speed govern
        joint_angles: Joint angles (rad) the setpoints realize
        gripper_distance: Gripper opening (m)
        timestamp: Command timestamp
    """
    setpoints: List[int]
    channels: List[int]
    speed: Optional[Union[int, Sequence[int]]] = None
    travel_time: Optional[float] = None
    joint_angles: FloatArray = field(default_factory=lambda: np.zeros(len(JOINT_NAMES)))
    gripper_distance: float = 0.0
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        """Check lengths and record timestamp."""
        if len(self.setpoints) != len(self.channels):
            raise ValueError("setpoints and channels must have the same length")
        if self.speed is not None and not np.isscalar(self.speed):
            self.speed = [int(s) for s in self.speed]
            if len(self.speed) != len(self.channels):
                raise ValueError("speed requires one value per channel")
        self.joint_angles = np.asarray(self.joint_angles, dtype=float)
        if self.timestamp == 0.0:
            self.timestamp = time.time()

    @property
    def speeds(self) -> List[Optional[int]]:
        """Speed of each servo (None for full speed)."""
        if self.speed is None or np.isscalar(self.speed):
            return [self.speed] * len(self.channels)
        return list(self.speed)

    def to_ssc32(self) -> str:
        """Format as an SSC-32U command line."""
        parts = []
        for channel, setpoint, speed in zip(self.channels, self.setpoints, self.speeds):
            part = f"#{channel}P{setpoint}"
            if speed is not None:
                part += f"S{speed}"
            parts.append(part)

        line = "".join(parts)
        if self.travel_time is not None:
            line += f"T{int(round(self.travel_time * 1000.0))}"
        return line + "\r"

    def to_message(self) -> Dict[str, Any]:
        """Joint-position message for the message bus."""
        return {
            "joint_names": list(JOINT_NAMES) + ["gripper"],
            "positions": [float(a) for a in self.joint_angles] + [float(self.gripper_distance)],
        }


# =============================================================================
# Transport Protocol
# =============================================================================

class ServoTransport(Protocol):
    """Protocol for servo command channels."""

    @property
    def is_open(self) -> bool:
        """Whether commands can be sent."""
        ...

    def open(self) -> None:
        """Acquire the channel."""
        ...

    def close(self) -> None:
        """Release the channel."""
        ...

    def send(self, command: ServoCommand) -> None:
        """Issue a command; raises TransportError on failure."""
        ...


# =============================================================================
# Serial Transport
# =============================================================================

class SerialTransport:
    """SSC-32U servo controller on a serial port."""

    def __init__(self, port: str, baud: int = 9600, timeout: float = 1.0) -> None:
        self.port = port
        self.baud = baud
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        if self.is_open:
            return
        try:
            self._serial = serial.Serial(self.port, self.baud, timeout=self.timeout)
        except serial.SerialException as exc:
            raise TransportError(f"Cannot open serial port {self.port}: {exc}") from exc
        logger.info(f"Serial port {self.port} opened at {self.baud} baud")

    def close(self) -> None:
        if self.is_open:
            self._serial.close()
            logger.info(f"Serial port {self.port} closed")
        self._serial = None

    def send(self, command: ServoCommand) -> None:
        if not self.is_open:
            raise TransportError(f"Serial port {self.port} not open")

        line = command.to_ssc32()
        logger.debug(f"SSC-32U: {line.strip()}")
        try:
            self._serial.write(line.encode("ascii"))
        except serial.SerialException as exc:
            raise TransportError(f"Write to {self.port} failed: {exc}") from exc


# =============================================================================
# Message Bus Transport
# =============================================================================

class MessageBusTransport:
    """
    Publishes joint angles and gripper distance on a topic.

    The publisher is any callable taking the message dictionary, e.g. a
    thin wrapper around a ROS publisher.
    """

    def __init__(
        self,
        publish: Callable[[Dict[str, Any]], None],
        topic: str = DEFAULT_TOPIC
    ) -> None:
        self._publish = publish
        self.topic = topic
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True
        logger.info(f"Publishing joint positions on {self.topic}")

    def close(self) -> None:
        self._open = False

    def send(self, command: ServoCommand) -> None:
        if not self._open:
            raise TransportError(f"Message bus transport for {self.topic} not open")

        message = command.to_message()
        message["topic"] = self.topic
        try:
            self._publish(message)
        except Exception as exc:
            raise TransportError(f"Publishing on {self.topic} failed: {exc}") from exc


# =============================================================================
# Simulated Transport
# =============================================================================

class SimulatedTransport:
    """
    Simulated servo controller for testing and dry runs.

    Every command is kept in ``commands``; ``setpoints`` holds the pulse
    widths last commanded on each channel.
    """

    def __init__(self) -> None:
        self.commands: List[ServoCommand] = []
        self.setpoints: Dict[int, int] = {}
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def send(self, command: ServoCommand) -> None:
        if not self._open:
            raise TransportError("Simulated transport not open")

        self.commands.append(command)
        self.setpoints.update(zip(command.channels, command.setpoints))
        logger.debug(f"Simulated: {command.to_ssc32().strip()}")


def create_transport(
    config: RobotConfig,
    kind: TransportKind = TransportKind.SERIAL,
    publish: Optional[Callable[[Dict[str, Any]], None]] = None
) -> ServoTransport:
    """
    Create the transport selected for this run.

    Args:
        config: Robot configuration (serial port and baud rate)
        kind: Transport to create
        publish: Publisher callable, required for MESSAGE_BUS

    Returns:
        Unopened transport
    """
    if kind == TransportKind.SERIAL:
        return SerialTransport(config.port, config.baud)
    if kind == TransportKind.MESSAGE_BUS:
        if publish is None:
            raise ValueError("MESSAGE_BUS transport requires a publish callable")
        return MessageBusTransport(publish)
    return SimulatedTransport()
