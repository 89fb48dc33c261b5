"""
Robot Configuration Module
==========================

Robot-specific configuration and calibration data, read once at startup.

Different arms of the same model differ in servo-controller wiring and
servo calibration, so each robot has its own configuration file of
key-value lines:

    COM      <serial port name>
    BAUD     <rate>
    SPEED    <default servo speed, us/s>
    CHANNEL  <6 servo-controller pins>
    HOME     <6 setpoints (us) at the home pose, gripper fully open>
    DEGREE   <6 pulse widths: us/degree for joints, us/mm for the gripper>
    WRIST    lightweight | heavyduty
    DEFAULT  <5 joint angles (rad)> <gripper distance (m)>

Optional keys (AL5D nominal values otherwise):

    LINKS    <base height> <upper arm> <forearm> <wrist offset>   (mm)
    EFFECTOR <gripper length from T5 to the fingertips>          (mm)
    LIMITS   <lower upper> x 5                                  (deg)
    PULSE    <min setpoint> <max setpoint>                       (us)
    GRIPPER  <min opening> <max opening>                         (mm)

The same data can be kept in YAML with ``to_yaml``/``from_yaml``.

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Tuple, List, Dict, Any, Union
import numpy as np
import yaml

from ..kinematics.solver import (
    ArmGeometry,
    DEFAULT_JOINT_LIMITS_DEG,
    HOME_JOINT_ANGLES,
    JointAngles,
    JointLimits,
    N_JOINTS,
)

logger = logging.getLogger(__name__)

N_SERVOS = N_JOINTS + 1

PathLike = Union[str, Path]


class ConfigurationError(ValueError):
    """Malformed or incomplete robot configuration."""


class WristType(Enum):
    """Wrist hardware; the heavy-duty wrist reverses the roll servo."""
    LIGHTWEIGHT = "lightweight"
    HEAVYDUTY = "heavyduty"

    @property
    def roll_direction(self) -> int:
        return 1 if self is WristType.LIGHTWEIGHT else -1


@dataclass
class RobotConfig:
    """
    Configuration and calibration data for one robot.

    Attributes:
        port: Serial port name (e.g. COM6, /dev/ttyUSB0)
        baud: Baud rate
        speed: Default servo speed (us/s); 1000us of travel is about 90°
        channels: Servo-controller pin for each servo
        home: Setpoints (us) at the home pose with the gripper open
        pulses: us/degree for joints 1-5, us/mm of closure for the gripper
        wrist: Wrist hardware type
        default_angles: Initial joint angles (rad)
        default_gripper: Initial gripper distance (m)
        geometry: Arm link dimensions (mm)
        effector_length: Distance from T5 to the gripper tip (mm)
        joint_limits_deg: (lower, upper) per joint (deg)
        pulse_range: Admissible setpoint range (us)
        gripper_range: (min, max) opening (mm); min is the smallest opening
            commanded for a numeric grasp request
    """
    port: str = "/dev/ttyUSB0"
    baud: int = 9600
    speed: int = 500
    channels: List[int] = field(default_factory=lambda: [0, 1, 2, 3, 4, 5])
    home: List[int] = field(default_factory=lambda: [1500] * N_SERVOS)
    pulses: List[float] = field(
        default_factory=lambda: [11.1, 11.1, 11.1, 11.1, 11.1, 20.0]
    )
    wrist: WristType = WristType.LIGHTWEIGHT
    default_angles: List[float] = field(
        default_factory=lambda: HOME_JOINT_ANGLES.tolist()
    )
    default_gripper: float = 0.03
    geometry: ArmGeometry = field(default_factory=ArmGeometry)
    effector_length: float = 100.0
    joint_limits_deg: List[Tuple[float, float]] = field(
        default_factory=lambda: [tuple(lim) for lim in DEFAULT_JOINT_LIMITS_DEG]
    )
    pulse_range: Tuple[int, int] = (500, 2500)
    gripper_range: Tuple[float, float] = (2.0, 30.0)

    def __post_init__(self) -> None:
        """Validate array lengths and ranges."""
        if isinstance(self.wrist, str):
            self.wrist = _parse_wrist(self.wrist)
        if isinstance(self.geometry, dict):
            self.geometry = ArmGeometry(**self.geometry)

        for name, expected in (
            ("channels", N_SERVOS),
            ("home", N_SERVOS),
            ("pulses", N_SERVOS),
            ("default_angles", N_JOINTS),
            ("joint_limits_deg", N_JOINTS),
        ):
            values = getattr(self, name)
            if len(values) != expected:
                raise ConfigurationError(
                    f"{name} requires {expected} values, got {len(values)}"
                )

        if len(set(self.channels)) != N_SERVOS:
            raise ConfigurationError(f"channels must be distinct: {self.channels}")
        if self.speed <= 0:
            raise ConfigurationError("speed must be positive")
        if any(p <= 0 for p in self.pulses):
            raise ConfigurationError("pulses per unit must be positive")

        low, high = self.pulse_range
        if low >= high:
            raise ConfigurationError(f"invalid pulse range {self.pulse_range}")
        if not all(low <= h <= high for h in self.home):
            raise ConfigurationError(f"home setpoints {self.home} outside {self.pulse_range}")

        g_min, g_max = self.gripper_range
        if not 0 < g_min < g_max:
            raise ConfigurationError(
                f"gripper range must satisfy 0 < min < max, got {self.gripper_range}"
            )

        self.joint_limits_deg = [tuple(lim) for lim in self.joint_limits_deg]
        self.pulse_range = (int(low), int(high))
        self.gripper_range = (float(g_min), float(g_max))

    # =========================================================================
    # Derived Values
    # =========================================================================

    @classmethod
    def default(cls) -> "RobotConfig":
        """Nominal AL5D configuration."""
        return cls()

    def joint_limits(self) -> List[JointLimits]:
        """Joint limits in radians."""
        return [JointLimits.from_degrees(lo, hi) for lo, hi in self.joint_limits_deg]

    def default_pose(self) -> JointAngles:
        """Initial joint-space pose."""
        return JointAngles(np.array(self.default_angles), self.default_gripper)

    # =========================================================================
    # Key-Value Format
    # =========================================================================

    @classmethod
    def from_file(cls, path: PathLike) -> "RobotConfig":
        """
        Load configuration from a key-value text file.

        Args:
            path: Path to configuration file

        Returns:
            RobotConfig instance

        Raises:
            ConfigurationError: If the file is missing, malformed or
                incomplete
        """
        path = Path(path)
        try:
            text = path.read_text()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc

        config = cls.from_text(text)
        logger.info(f"Robot configuration loaded from {path}")
        return config

    @classmethod
    def from_text(cls, text: str) -> "RobotConfig":
        """Parse the key-value configuration format."""
        entries: Dict[str, List[str]] = {}
        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            key, *values = line.split()
            key = key.upper()
            if key not in _KEYS:
                logger.warning(f"Ignoring unknown configuration key {key} (line {line_number})")
                continue
            entries[key] = values

        missing = [key for key in _REQUIRED_KEYS if key not in entries]
        if missing:
            raise ConfigurationError(f"Missing configuration keys: {', '.join(missing)}")

        kwargs: Dict[str, Any] = {
            "port": _single(entries, "COM"),
            "baud": int(_numbers(entries, "BAUD", 1)[0]),
            "speed": int(_numbers(entries, "SPEED", 1)[0]),
            "channels": [int(v) for v in _numbers(entries, "CHANNEL", N_SERVOS)],
            "home": [int(v) for v in _numbers(entries, "HOME", N_SERVOS)],
            "pulses": _numbers(entries, "DEGREE", N_SERVOS),
            "wrist": _parse_wrist(_single(entries, "WRIST")),
        }

        default = _numbers(entries, "DEFAULT", N_SERVOS)
        kwargs["default_angles"] = default[:N_JOINTS]
        kwargs["default_gripper"] = default[N_JOINTS]

        if "LINKS" in entries:
            kwargs["geometry"] = dict(zip(
                ("base_height", "upper_arm", "forearm", "wrist_offset"),
                _numbers(entries, "LINKS", 4),
            ))
        if "EFFECTOR" in entries:
            kwargs["effector_length"] = _numbers(entries, "EFFECTOR", 1)[0]
        if "LIMITS" in entries:
            limits = _numbers(entries, "LIMITS", 2 * N_JOINTS)
            kwargs["joint_limits_deg"] = list(zip(limits[0::2], limits[1::2]))
        if "PULSE" in entries:
            low, high = _numbers(entries, "PULSE", 2)
            kwargs["pulse_range"] = (int(low), int(high))
        if "GRIPPER" in entries:
            kwargs["gripper_range"] = tuple(_numbers(entries, "GRIPPER", 2))

        try:
            return cls(**kwargs)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    # =========================================================================
    # YAML Format
    # =========================================================================

    @classmethod
    def from_yaml(cls, path: PathLike) -> "RobotConfig":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            RobotConfig instance

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} does not contain a mapping")

        data = dict(data)
        for key in ("pulse_range", "gripper_range"):
            if key in data:
                data[key] = tuple(data[key])

        try:
            config = cls(**data)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc

        logger.info(f"Robot configuration loaded from {path}")
        return config

    def to_yaml(self, path: PathLike) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        data = asdict(self)
        data["wrist"] = self.wrist.value
        data["joint_limits_deg"] = [list(lim) for lim in self.joint_limits_deg]
        data["pulse_range"] = list(self.pulse_range)
        data["gripper_range"] = list(self.gripper_range)
        data["default_angles"] = [float(a) for a in self.default_angles]

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


# =============================================================================
# Parsing Helpers
# =============================================================================

_REQUIRED_KEYS = ("COM", "BAUD", "SPEED", "CHANNEL", "HOME", "DEGREE", "WRIST", "DEFAULT")
_KEYS = _REQUIRED_KEYS + ("LINKS", "EFFECTOR", "LIMITS", "PULSE", "GRIPPER")


def _single(entries: Dict[str, List[str]], key: str) -> str:
    values = entries[key]
    if len(values) != 1:
        raise ConfigurationError(f"{key} requires a single value, got {values}")
    return values[0]


def _numbers(entries: Dict[str, List[str]], key: str, count: int) -> List[float]:
    values = entries[key]
    if len(values) != count:
        raise ConfigurationError(f"{key} requires {count} values, got {len(values)}")
    try:
        return [float(v) for v in values]
    except ValueError as exc:
        raise ConfigurationError(f"{key} values must be numeric: {values}") from exc


def _parse_wrist(value: str) -> WristType:
    try:
        return WristType(value.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"WRIST must be 'lightweight' or 'heavyduty', got {value!r}"
        ) from exc
