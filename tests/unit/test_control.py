"""
Unit Tests for Control Module
==============================

Tests for robot configuration, servo calibration, command transports
and the motion session.

Author: Robot Programming Project Team
License: MIT
"""

from unittest.mock import Mock, patch

import numpy as np
import pytest
import serial

from src.control.calibration import Calibration, JOINT_DIRECTIONS
from src.control.config import ConfigurationError, RobotConfig, WristType
from src.control.controller import (
    GraspError,
    GripperState,
    MotionResult,
    RobotSession,
    interpolate_setpoints,
)
from src.control.transport import (
    DEFAULT_TOPIC,
    MessageBusTransport,
    SerialTransport,
    ServoCommand,
    SimulatedTransport,
    TransportError,
    TransportKind,
    create_transport,
)
from src.kinematics.frames import roty, rotz, trans
from src.kinematics.solver import (
    ArmGeometry,
    ArmKinematics,
    HOME_JOINT_ANGLES,
    JointLimitError,
    UnreachablePoseError,
)

CONFIG_TEXT = """
# Test robot
COM      COM6
BAUD     9600
SPEED    500
CHANNEL  0 1 6 3 4 5
HOME     1450 1520 1535 1480 1500 1500
DEGREE   10.9 11.3 11.0 11.1 10.8 20.0
WRIST    heavyduty
DEFAULT  0.0 1.5708 -1.5708 -1.5708 0.0 0.030
"""

# Reachable pose: 20° base, 80° shoulder, -100° elbow, -120° pitch, 30° roll
TARGET_ANGLES = np.radians([20.0, 80.0, -100.0, -120.0, 30.0])
TARGET_SETPOINTS = [1278, 1389, 1611, 1167, 1833, 1500]

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def target_frame():
    """Wrist frame of TARGET_ANGLES on the nominal arm."""
    return ArmKinematics().forward_kinematics(TARGET_ANGLES)


@pytest.fixture
def calibration(robot_config):
    """Calibration of the nominal configuration."""
    return Calibration(robot_config)


@pytest.fixture
def command():
    """Two-servo command."""
    return ServoCommand(setpoints=[1500, 1600], channels=[0, 1], speed=500)


def replace_line(text, key, line):
    """Replace the configuration line for a key."""
    lines = [line if row.startswith(key) else row for row in text.splitlines()]
    return "\n".join(lines)


# =============================================================================
# Configuration Tests
# =============================================================================


class TestRobotConfig:
    """Tests for RobotConfig."""

    def test_default_config(self, robot_config):
        """Test nominal configuration."""
        assert robot_config.home == [1500] * 6
        assert robot_config.wrist == WristType.LIGHTWEIGHT
        assert len(robot_config.joint_limits()) == 5

    def test_from_text(self):
        """Test parsing the key-value format."""
        config = RobotConfig.from_text(CONFIG_TEXT)

        assert config.port == "COM6"
        assert config.baud == 9600
        assert config.channels == [0, 1, 6, 3, 4, 5]
        assert config.home == [1450, 1520, 1535, 1480, 1500, 1500]
        assert config.pulses[1] == pytest.approx(11.3)
        assert config.wrist == WristType.HEAVYDUTY
        assert config.default_gripper == pytest.approx(0.03)
        assert np.allclose(config.default_angles, HOME_JOINT_ANGLES, atol=1e-4)

    def test_optional_keys(self):
        """Test geometry and range overrides."""
        text = CONFIG_TEXT + "LINKS 70 150 190 10\nEFFECTOR 90\nGRIPPER 1 25\n"
        config = RobotConfig.from_text(text)

        assert config.geometry == ArmGeometry(70.0, 150.0, 190.0, 10.0)
        assert config.effector_length == 90.0
        assert config.gripper_range == (1.0, 25.0)

    def test_unknown_key_ignored(self):
        """Test unknown keys do not stop parsing."""
        config = RobotConfig.from_text(CONFIG_TEXT + "COLOUR blue\n")
        assert config.port == "COM6"

    def test_missing_key(self):
        """Test missing required key."""
        text = replace_line(CONFIG_TEXT, "WRIST", "")
        with pytest.raises(ConfigurationError, match="WRIST"):
            RobotConfig.from_text(text)

    def test_wrong_value_count(self):
        """Test a key with too few values."""
        text = replace_line(CONFIG_TEXT, "HOME", "HOME 1500 1500 1500")
        with pytest.raises(ConfigurationError):
            RobotConfig.from_text(text)

    def test_non_numeric_value(self):
        """Test a non-numeric value."""
        text = replace_line(CONFIG_TEXT, "SPEED", "SPEED fast")
        with pytest.raises(ConfigurationError):
            RobotConfig.from_text(text)

    def test_invalid_wrist(self):
        """Test an unknown wrist type."""
        text = replace_line(CONFIG_TEXT, "WRIST", "WRIST titanium")
        with pytest.raises(ConfigurationError):
            RobotConfig.from_text(text)

    def test_duplicate_channels(self):
        """Test channels must be distinct."""
        with pytest.raises(ConfigurationError):
            RobotConfig(channels=[0, 1, 1, 3, 4, 5])

    def test_configuration_error_is_value_error(self):
        """Test callers catching ValueError see configuration errors."""
        with pytest.raises(ValueError):
            RobotConfig(speed=0)

    def test_from_file(self, project_root_path):
        """Test loading the sample robot file."""
        config = RobotConfig.from_file(project_root_path / "data" / "robot1.txt")

        assert config.channels == [0, 1, 6, 3, 4, 5]
        assert config.home[0] == 1450
        assert config.geometry.upper_arm == pytest.approx(146.05)
        assert config.effector_length == pytest.approx(100.0)

    def test_from_file_missing(self, tmp_path):
        """Test a missing file."""
        with pytest.raises(ConfigurationError):
            RobotConfig.from_file(tmp_path / "robot9.txt")

    def test_from_yaml_missing(self, tmp_path):
        """Test a missing YAML file."""
        with pytest.raises(ConfigurationError):
            RobotConfig.from_yaml(tmp_path / "robot9.yaml")

    def test_yaml_round_trip(self, tmp_path):
        """Test saving and reloading YAML."""
        config = RobotConfig.from_text(CONFIG_TEXT + "LINKS 70 150 190 10\n")
        path = tmp_path / "robot.yaml"

        config.to_yaml(path)
        loaded = RobotConfig.from_yaml(path)

        assert loaded == config

    def test_yaml_invalid_field(self, tmp_path):
        """Test unknown YAML fields are rejected."""
        path = tmp_path / "robot.yaml"
        path.write_text("port: COM6\ncolour: blue\n")

        with pytest.raises(ConfigurationError):
            RobotConfig.from_yaml(path)

    def test_wrist_roll_direction(self):
        """Test roll direction of each wrist type."""
        assert WristType.LIGHTWEIGHT.roll_direction == 1
        assert WristType.HEAVYDUTY.roll_direction == -1


# =============================================================================
# Calibration Tests
# =============================================================================


class TestCalibration:
    """Tests for Calibration."""

    def test_home_pose(self):
        """Test the home pose maps to the home setpoints."""
        config = RobotConfig.from_text(CONFIG_TEXT)
        calibration = Calibration(config)

        setpoints = calibration.joint_angles_to_setpoints(HOME_JOINT_ANGLES, 0.03)

        assert setpoints == config.home
        assert calibration.home_setpoints == config.home

    def test_known_setpoints(self, calibration):
        """Test setpoints of a known pose."""
        setpoints = calibration.joint_angles_to_setpoints(TARGET_ANGLES, 0.03)
        assert setpoints == TARGET_SETPOINTS

    def test_monotonic_per_joint(self, calibration):
        """Test each setpoint moves monotonically with its joint."""
        for joint in range(5):
            column = []
            for offset in np.radians(np.arange(-60.0, 61.0, 10.0)):
                q = HOME_JOINT_ANGLES.copy()
                q[joint] += offset
                column.append(calibration.joint_angles_to_setpoints(q, 0.03)[joint])

            steps = np.diff(column) * JOINT_DIRECTIONS[joint]
            assert np.all(steps > 0)

    def test_wrist_type_flips_roll_only(self):
        """Test the heavy-duty wrist reverses only the roll setpoint."""
        light = Calibration(RobotConfig(wrist=WristType.LIGHTWEIGHT))
        heavy = Calibration(RobotConfig(wrist=WristType.HEAVYDUTY))

        a = light.joint_angles_to_setpoints(TARGET_ANGLES, 0.02)
        b = heavy.joint_angles_to_setpoints(TARGET_ANGLES, 0.02)

        assert a[:4] == b[:4]
        assert a[5] == b[5]
        assert a[4] - 1500 == -(b[4] - 1500)
        assert a[4] != b[4]

    def test_gripper_setpoint(self, calibration):
        """Test gripper setpoints grow with closure."""
        assert calibration.gripper_setpoint(30.0) == 1500
        assert calibration.gripper_setpoint(15.0) == 1800
        assert calibration.gripper_setpoint(0.0) == 2100

    def test_inverse_mapping(self, calibration):
        """Test setpoints map back to joint angles up to rounding."""
        setpoints = calibration.joint_angles_to_setpoints(TARGET_ANGLES, 0.015)
        pose = calibration.setpoints_to_joint_angles(setpoints)

        assert np.allclose(pose.angles, TARGET_ANGLES, atol=np.radians(0.05))
        assert pose.gripper_distance == pytest.approx(0.015)

    def test_wrong_joint_count(self, calibration):
        """Test five joint angles are required."""
        with pytest.raises(ValueError):
            calibration.joint_angles_to_setpoints(np.zeros(4), 0.03)

    def test_check_setpoints(self, calibration):
        """Test pulse range checking."""
        calibration.check_setpoints([500, 2500, 1500, 1500, 1500, 1500])

        with pytest.raises(JointLimitError) as excinfo:
            calibration.check_setpoints([1500, 1500, 1500, 1500, 1500, 2600])
        assert excinfo.value.joints == [5]


# =============================================================================
# Transport Tests
# =============================================================================


class TestServoCommand:
    """Tests for ServoCommand."""

    def test_ssc32_with_speed(self, command):
        """Test SSC-32U line with per-servo speed."""
        assert command.to_ssc32() == "#0P1500S500#1P1600S500\r"

    def test_ssc32_with_time(self):
        """Test SSC-32U line with a group move time."""
        cmd = ServoCommand(setpoints=[1500, 1600], channels=[0, 1], travel_time=1.5)
        assert cmd.to_ssc32() == "#0P1500#1P1600T1500\r"

    def test_length_mismatch(self):
        """Test setpoints and channels must pair up."""
        with pytest.raises(ValueError):
            ServoCommand(setpoints=[1500], channels=[0, 1])

    def test_ssc32_per_servo_speed(self):
        """Test SSC-32U line with one speed per servo."""
        cmd = ServoCommand(setpoints=[1500, 1600], channels=[0, 1], speed=[300, 600])
        assert cmd.to_ssc32() == "#0P1500S300#1P1600S600\r"

    def test_speed_length_mismatch(self):
        """Test per-servo speeds must match the channels."""
        with pytest.raises(ValueError):
            ServoCommand(setpoints=[1500, 1600], channels=[0, 1], speed=[300])

    def test_message(self):
        """Test message bus payload."""
        cmd = ServoCommand(
            setpoints=[1500] * 6,
            channels=list(range(6)),
            joint_angles=HOME_JOINT_ANGLES,
            gripper_distance=0.02,
        )
        message = cmd.to_message()

        assert message["joint_names"][-1] == "gripper"
        assert len(message["positions"]) == 6
        assert message["positions"][1] == pytest.approx(np.pi / 2)
        assert message["positions"][-1] == pytest.approx(0.02)


class TestTransports:
    """Tests for the transport implementations."""

    def test_simulated_records_commands(self, simulated_transport, command):
        """Test simulated transport keeps commands and setpoints."""
        simulated_transport.open()
        simulated_transport.send(command)

        assert simulated_transport.commands == [command]
        assert simulated_transport.setpoints == {0: 1500, 1: 1600}

    def test_simulated_not_open(self, simulated_transport, command):
        """Test sending on a closed transport."""
        with pytest.raises(TransportError):
            simulated_transport.send(command)

    def test_serial_send(self, command):
        """Test serial transport writes the SSC-32U line."""
        with patch("src.control.transport.serial.Serial") as serial_cls:
            port = serial_cls.return_value
            port.is_open = True

            transport = SerialTransport("/dev/ttyUSB0", 9600)
            transport.open()
            transport.send(command)
            transport.close()

        serial_cls.assert_called_once_with("/dev/ttyUSB0", 9600, timeout=1.0)
        port.write.assert_called_once_with(b"#0P1500S500#1P1600S500\r")
        port.close.assert_called_once()

    def test_serial_open_failure(self):
        """Test port errors become transport errors."""
        with patch("src.control.transport.serial.Serial") as serial_cls:
            serial_cls.side_effect = serial.SerialException("no such port")

            transport = SerialTransport("COM6")
            with pytest.raises(TransportError):
                transport.open()
            assert not transport.is_open

    def test_serial_write_failure(self, command):
        """Test write errors become transport errors."""
        with patch("src.control.transport.serial.Serial") as serial_cls:
            port = serial_cls.return_value
            port.is_open = True
            port.write.side_effect = serial.SerialException("unplugged")

            transport = SerialTransport("COM6")
            transport.open()
            with pytest.raises(TransportError):
                transport.send(command)

    def test_serial_not_open(self, command):
        """Test sending before opening the port."""
        with pytest.raises(TransportError):
            SerialTransport("COM6").send(command)

    def test_message_bus_publish(self, command):
        """Test joint positions are published on the topic."""
        published = []
        transport = MessageBusTransport(published.append)
        transport.open()
        transport.send(command)

        assert len(published) == 1
        assert published[0]["topic"] == DEFAULT_TOPIC

    def test_message_bus_failure(self, command):
        """Test publisher errors become transport errors."""
        publish = Mock(side_effect=RuntimeError("bus down"))
        transport = MessageBusTransport(publish)
        transport.open()

        with pytest.raises(TransportError):
            transport.send(command)

    def test_create_transport(self, robot_config):
        """Test transport factory."""
        serial_transport = create_transport(robot_config, TransportKind.SERIAL)
        assert isinstance(serial_transport, SerialTransport)
        assert serial_transport.port == robot_config.port

        assert isinstance(
            create_transport(robot_config, TransportKind.SIMULATED), SimulatedTransport
        )
        assert isinstance(
            create_transport(robot_config, TransportKind.MESSAGE_BUS, publish=print),
            MessageBusTransport,
        )

        with pytest.raises(ValueError):
            create_transport(robot_config, TransportKind.MESSAGE_BUS)


# =============================================================================
# Session Tests
# =============================================================================


class TestInterpolation:
    """Tests for setpoint interpolation."""

    def test_interpolate(self):
        """Test evenly spaced intermediate setpoints."""
        path = interpolate_setpoints([1500, 1500], [1600, 1400], 4)
        assert path == [[1525, 1475], [1550, 1450], [1575, 1425], [1600, 1400]]

    def test_single_step(self):
        """Test one step is the target itself."""
        assert interpolate_setpoints([1500], [1700], 1) == [[1700]]

    def test_invalid_steps(self):
        """Test at least one step is required."""
        with pytest.raises(ValueError):
            interpolate_setpoints([1500], [1700], 0)


class TestRobotSession:
    """Tests for RobotSession."""

    def test_initial_state(self, robot):
        """Test session starts at the configured default pose."""
        assert robot.current_setpoints == [1500] * 6
        assert np.allclose(robot.current_pose.angles, HOME_JOINT_ANGLES)

    def test_context_manager(self, robot_config):
        """Test transport is opened and closed."""
        transport = SimulatedTransport()
        with RobotSession(robot_config, transport):
            assert transport.is_open
        assert not transport.is_open

    def test_wrist_pose(self, robot):
        """Test gripper tip frame reduced to the wrist frame."""
        T5 = robot.wrist_pose(trans(0.0, 187.0, 20.0) * roty(180.0) * rotz(-90.0))
        assert np.allclose(T5.position.to_array(), [0.0, 187.0, 120.0])

    def test_move(self, robot, simulated_transport, target_frame):
        """Test a successful move issues one command."""
        result = robot.move(target_frame)

        assert result
        assert result.setpoints == TARGET_SETPOINTS
        assert np.allclose(result.joint_angles.angles, TARGET_ANGLES, atol=1e-6)
        assert result.travel_time == pytest.approx(333 / 500)

        assert len(simulated_transport.commands) == 1
        assert simulated_transport.commands[0].to_ssc32().startswith("#0P1278S500")
        assert robot.current_setpoints == TARGET_SETPOINTS
        assert robot.current_frame.is_close(target_frame, tolerance=1e-6)

    def test_move_speed(self, robot, simulated_transport, target_frame):
        """Test speed override."""
        result = robot.move(target_frame, speed=1000)

        assert result.travel_time == pytest.approx(333 / 1000)
        assert simulated_transport.commands[0].speed == 1000

    def test_move_speed_per_servo(self, robot, simulated_transport, target_frame):
        """Test one speed per servo."""
        speeds = [1000, 1000, 1000, 1000, 111, 1000]
        result = robot.move(target_frame, speed=speeds)

        assert result.travel_time == pytest.approx(3.0)
        line = simulated_transport.commands[0].to_ssc32()
        assert "#4P1833S111" in line
        assert "#0P1278S1000" in line

    def test_move_interpolated_message_bus(self, robot_config, target_frame):
        """Test published joint positions progress towards the target."""
        messages = []
        robot = RobotSession(robot_config, MessageBusTransport(messages.append))
        robot.open()

        robot.move(target_frame, steps=4)

        assert len(messages) == 4
        start = list(HOME_JOINT_ANGLES) + [robot_config.default_gripper]
        path = np.array([start] + [m["positions"] for m in messages])

        assert np.allclose(path[-1, :5], TARGET_ANGLES, atol=1e-6)
        assert not np.allclose(path[1, :5], path[-1, :5])
        for joint in path.T:
            steps = np.diff(joint)
            assert np.all(steps >= 0) or np.all(steps <= 0)

    def test_move_heavyduty_wrist(self, simulated_transport, target_frame):
        """Test roll setpoint on the heavy-duty wrist."""
        robot = RobotSession(RobotConfig(wrist=WristType.HEAVYDUTY), simulated_transport)
        robot.open()

        result = robot.move(target_frame)

        assert result.setpoints[4] == 1167
        assert result.setpoints[:4] == TARGET_SETPOINTS[:4]

    def test_move_channel_mapping(self, project_root_path, target_frame):
        """Test setpoints are sent on the configured pins."""
        config = RobotConfig.from_file(project_root_path / "data" / "robot1.txt")
        transport = SimulatedTransport()

        with RobotSession(config, transport) as robot:
            assert robot.move(target_frame)

        assert set(transport.setpoints) == {0, 1, 6, 3, 4, 5}

    def test_move_unreachable(self, robot, simulated_transport):
        """Test an unreachable pose is reported and nothing is sent."""
        result = robot.move(trans(0.0, 600.0, 100.0))

        assert not result
        assert isinstance(result.error, UnreachablePoseError)
        assert simulated_transport.commands == []
        assert robot.current_setpoints == [1500] * 6

    def test_move_joint_limits(self, robot, simulated_transport):
        """Test a pose behind the base is rejected."""
        result = robot.move(trans(0.0, -187.0, 216.0) * rotz(90.0))

        assert not result
        assert isinstance(result.error, JointLimitError)
        assert simulated_transport.commands == []

    def test_move_pulse_range(self, simulated_transport, target_frame):
        """Test setpoints outside the pulse range are rejected."""
        robot = RobotSession(RobotConfig(pulse_range=(1400, 1600)), simulated_transport)
        robot.open()

        result = robot.move(target_frame)

        assert not result
        assert isinstance(result.error, JointLimitError)
        assert 0 in result.error.joints
        assert simulated_transport.commands == []

    def test_move_interpolated(self, robot, simulated_transport, target_frame):
        """Test intermediate commands move each servo monotonically."""
        start = robot.current_setpoints
        result = robot.move(target_frame, steps=4)

        commands = simulated_transport.commands
        assert len(commands) == 4
        assert commands[-1].setpoints == result.setpoints
        assert all(c.travel_time == pytest.approx(result.travel_time / 4) for c in commands)

        path = np.array([start] + [c.setpoints for c in commands])
        for channel in path.T:
            steps = np.diff(channel)
            assert np.all(steps >= 0) or np.all(steps <= 0)

    def test_move_block_waits(self, robot, target_frame):
        """Test blocking moves wait for the travel time."""
        with patch("src.control.controller.time.sleep") as sleep:
            result = robot.move(target_frame, block=True)

        sleep.assert_called_once()
        assert sleep.call_args[0][0] == pytest.approx(result.travel_time)

    def test_move_non_blocking(self, robot, target_frame):
        """Test non-blocking moves return immediately."""
        with patch("src.control.controller.time.sleep") as sleep:
            robot.move(target_frame)

        sleep.assert_not_called()

    def test_transport_closed(self, robot_config, target_frame):
        """Test sending on a closed transport raises."""
        robot = RobotSession(robot_config, SimulatedTransport())

        with pytest.raises(TransportError):
            robot.move(target_frame)
        assert robot.current_setpoints == [1500] * 6

    def test_transport_failure(self, robot_config, target_frame):
        """Test transport errors propagate and leave the pose unchanged."""
        transport = Mock()
        transport.send.side_effect = TransportError("link down")
        robot = RobotSession(robot_config, transport)

        with pytest.raises(TransportError):
            robot.move(target_frame)
        assert np.allclose(robot.current_pose.angles, HOME_JOINT_ANGLES)

    def test_transport_failure_midway(self, robot_config, target_frame):
        """Test the session keeps the last command sent before a failure."""
        transport = Mock()
        transport.send.side_effect = [None, None, TransportError("link down")]
        robot = RobotSession(robot_config, transport)

        with pytest.raises(TransportError):
            robot.move(target_frame, steps=4)

        sent = interpolate_setpoints([1500] * 6, TARGET_SETPOINTS, 4)[1]
        assert robot.current_setpoints == sent
        assert np.allclose(
            robot.current_pose.angles,
            HOME_JOINT_ANGLES + (TARGET_ANGLES - HOME_JOINT_ANGLES) / 2,
            atol=1e-6,
        )

        # Next move starts from what the servos were last told
        transport.send.side_effect = None
        result = robot.go_home()
        assert result.travel_time == pytest.approx(
            RobotSession.travel_time(sent, [1500] * 6, robot_config.speed)
        )

    def test_grasp(self, robot, target_frame):
        """Test gripper opening keeps the joint setpoints."""
        robot.move(target_frame)
        result = robot.grasp(15.0)

        assert result
        assert result.setpoints == TARGET_SETPOINTS[:5] + [1800]
        assert robot.current_pose.gripper_distance == pytest.approx(0.015)

    def test_grasp_clamped(self, robot):
        """Test numeric openings are clamped to the gripper range."""
        assert robot.grasp(0.0).setpoints[5] == 2060
        assert robot.grasp(100.0).setpoints[5] == 1500

    def test_grasp_states(self, robot):
        """Test symbolic gripper states."""
        assert robot.grasp(GripperState.CLOSED).setpoints[5] == 2100
        assert robot.grasp(GripperState.OPEN).setpoints[5] == 1500

    @pytest.mark.parametrize("opening", [-5.0, float("nan"), "open", None])
    def test_grasp_invalid(self, robot, simulated_transport, opening):
        """Test invalid openings are reported and nothing is sent."""
        result = robot.grasp(opening)

        assert not result
        assert isinstance(result.error, GraspError)
        assert simulated_transport.commands == []

    def test_go_home(self, robot, target_frame):
        """Test return to home with the gripper open."""
        robot.move(target_frame)
        robot.grasp(GripperState.CLOSED)

        result = robot.go_home()

        assert result.setpoints == [1500] * 6
        assert np.allclose(robot.current_pose.angles, HOME_JOINT_ANGLES)
        assert robot.current_pose.gripper_distance == pytest.approx(0.03)

    def test_travel_time(self):
        """Test travel time of the largest setpoint change."""
        start = [1500] * 6
        end = [2500] + [1500] * 5
        assert RobotSession.travel_time(start, end, 500) == pytest.approx(2.0)

    def test_travel_time_per_servo(self):
        """Test the slowest servo governs the travel time."""
        start = [1500] * 6
        end = [2500, 1500, 1500, 1500, 1600, 1500]
        speeds = [1000, 500, 500, 500, 50, 500]
        assert RobotSession.travel_time(start, end, speeds) == pytest.approx(2.0)

    def test_motion_result_truthiness(self):
        """Test results evaluate to their success flag."""
        assert MotionResult(success=True)
        assert not MotionResult(success=False, error=GraspError("bad"))

    def test_get_status(self, robot):
        """Test status reporting."""
        status = robot.get_status()

        assert status["transport"] == "SimulatedTransport"
        assert status["transport_open"]
        assert status["setpoints"] == [1500] * 6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
