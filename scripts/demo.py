#!/usr/bin/env python3
"""
Task-Level Robot Programming Demo
=================================

Demonstrates robot programming with frames on an AL5D arm:
1. Gripper aligned with the base frame, then rotated 90 degrees
2. The home pose reached by two different rotation sequences
3. Pick and place: approach, grasp, lift, carry to a tray, release
4. Return to the home pose

Every pose is written as a task frame for the gripper tip and reduced to
the wrist frame with T5 = inv(Z) * pose * inv(E).

Usage:
    python scripts/demo.py
    python scripts/demo.py --config data/robot1.txt --serial --block
    python scripts/demo.py --verbose

Author: Robot Programming Project Team
License: MIT
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.control import (
    GripperState,
    RobotConfig,
    RobotSession,
    TransportKind,
    create_transport,
)
from src.kinematics import Frame, rotx, roty, rotz, trans

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Object and tray positions (mm), object orientation (deg, anticlockwise
# w.r.t. horizontal)
OBJECT = (0.0, 187.0, 0.0)
OBJECT_THETA = -90.0
TRAY = (150.0, 100.0, 100.0)
EXAMPLE = (0.0, 187.0, 216.0)
CARRY_HEIGHT = 80.0
SIDE_X = 100.0
APPROACH_DISTANCE = 100.0
BLOCK_WIDTH = 15.0


def build_program(effector_length: float) -> List[Tuple[str, object]]:
    """
    Sequence of (label, step); a step is a gripper tip frame or a grasp
    request.
    """
    x, y, z = EXAMPLE
    object_grasp = trans(*OBJECT) * roty(180.0) * rotz(OBJECT_THETA)
    object_approach = trans(0.0, 0.0, -APPROACH_DISTANCE)
    down = roty(180.0) * rotz(-90.0)

    return [
        ("align gripper with base frame",
         trans(x, y, z + effector_length)),
        ("rotate wrist 90 degrees",
         trans(x, y, z + effector_length) * rotz(90.0)),
        ("home pose",
         trans(x, y + effector_length, z) * rotz(90.0) * roty(90.0)),
        ("home pose, version 2",
         trans(x, y + effector_length, z) * roty(90.0) * rotx(-90.0)),
        ("home pose 20 mm above the work surface",
         trans(x, y + effector_length, 20.0) * rotz(90.0) * roty(90.0)),
        ("initial approach pose", object_grasp * object_approach),
        ("open gripper", GripperState.OPEN),
        ("grasp pose", object_grasp),
        ("close on block", BLOCK_WIDTH),
        ("approach pose", object_grasp * object_approach),
        ("carry pose", trans(x, y, CARRY_HEIGHT) * down),
        ("horizontally right pose", trans(x + SIDE_X, y, CARRY_HEIGHT) * down),
        ("above the tray pose", trans(*TRAY) * down),
        ("release", GripperState.OPEN),
        ("carry pose", trans(x, y, CARRY_HEIGHT) * down),
    ]


def run_program(robot: RobotSession, block: bool) -> int:
    """
    Execute the demo program.

    Returns:
        Number of rejected steps
    """
    failures = 0
    for label, step in build_program(robot.config.effector_length):
        print(f"\n▶ {label}")

        if isinstance(step, Frame):
            result = robot.move(robot.wrist_pose(step), block=block)
        else:
            result = robot.grasp(step, block=block)

        if not result:
            # The caller decides: skip the step and carry on
            print(f"   ❌ {result.error}")
            failures += 1
            continue

        print(f"   joints:    {result.joint_angles}")
        print(f"   setpoints: {result.setpoints}")
        print(f"   travel:    {result.travel_time:.2f}s")

    return failures


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Task-Level Robot Programming Demo")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Robot configuration file (.txt key-value or .yaml)",
    )
    parser.add_argument(
        "--serial", action="store_true", help="Drive the SSC-32U on the configured port"
    )
    parser.add_argument(
        "--block", action="store_true", help="Wait for each motion to complete"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.config is None:
        config = RobotConfig.default()
    elif args.config.suffix in (".yaml", ".yml"):
        config = RobotConfig.from_yaml(args.config)
    else:
        config = RobotConfig.from_file(args.config)

    kind = TransportKind.SERIAL if args.serial else TransportKind.SIMULATED
    transport = create_transport(config, kind)

    with RobotSession(config, transport) as robot:
        robot.go_home(block=args.block)
        failures = run_program(robot, args.block)
        robot.go_home(block=args.block)

    if failures:
        logger.warning(f"{failures} step(s) rejected")
        sys.exit(1)


if __name__ == "__main__":
    main()
