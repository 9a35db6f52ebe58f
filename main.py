import argparse
import sys

import web_remote
from app import FlowerWall
from config import Settings
from errors import FlowerwallError
from logutil import create_logger


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sensor-driven flower wall.")
    parser.add_argument("--port", dest="serial_port", type=str,
                        help="Serial device of the sensor Arduino (implies live input).")
    parser.add_argument("--baudrate", dest="serial_baudrate", type=int,
                        help="Serial baudrate.")
    parser.add_argument("--mock", action="store_true",
                        help="Use generated sensor data instead of the serial port.")
    parser.add_argument("--windowed", action="store_true",
                        help="Run in a resizable window instead of fullscreen.")
    parser.add_argument("--single", action="store_true",
                        help="Single display: no bezel split.")
    parser.add_argument("--bezel", dest="bezel_width", type=int,
                        help="Initial bezel compensation in pixels.")
    parser.add_argument("--mode", choices=("debounce", "cascade"),
                        help="Channel behaviour.")
    parser.add_argument("--layout", dest="layout_mode", choices=("slots", "fullcanvas"),
                        help="Image placement.")
    parser.add_argument("--web", action="store_true",
                        help="Start the web remote.")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logging.")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = dict(
        serial_port=args.serial_port,
        serial_baudrate=args.serial_baudrate,
        bezel_width=args.bezel_width,
        mode=args.mode,
        layout_mode=args.layout_mode,
    )
    if args.mock:
        overrides["use_mock_data"] = True
    elif args.serial_port:
        overrides["use_mock_data"] = False
    if args.windowed:
        overrides["fullscreen"] = False
    if args.single:
        overrides["dual_screens"] = False
        overrides["right_width"] = 0
    if args.web:
        overrides["web_remote"] = True
    return Settings.from_config(**overrides)


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = create_logger("flowerwall", debug=args.debug)
    try:
        settings = settings_from_args(args)
        wall = FlowerWall(settings)
    except FlowerwallError as e:
        logger.error("%s", e)
        return 1
    if settings.web_remote:
        web_remote.start(wall, settings.web_port)
    wall.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
