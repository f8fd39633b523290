"""
Face Check-In
=============
Command line entry point for the face-matching attendance check-in.

    python face_check_in.py run                      # open the camera and check employees in
    python face_check_in.py register "Jane Doe" jane.jpg
    python face_check_in.py attendance --date 2026-10-19
    python face_check_in.py settings set MIN_FACE_SIZE=100
"""

import argparse
import sys
from datetime import date

import cv2
from environs import Env
from tabulate import tabulate

from di.repository import Repository
from di.service import Service
from domain.exceptions import SessionInitializationError
from domain.factory.pipeline_factory import PipelineFactory
from domain.use_case.add import RegisterEmployee
from domain.use_case.fetch import GetAllEmployees, GetDailyAttendance, GetDetectionSettings
from domain.use_case.update import UpdateDetectionSettings
from utils import get_logger

logger = get_logger(__name__)

WINDOW_NAME = "Face Check-In"


def parse_assignments(pairs: list[str]) -> dict:
    """Turn ``KEY=VALUE`` arguments into a dict; values are validated later."""
    changes = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{pair}'")
        changes[key.strip()] = value.strip()
    return changes


def run(args, service: Service, repository: Repository, is_debugging: bool) -> int:
    factory = PipelineFactory(is_debugging=is_debugging, service=service, repository=repository)
    try:
        settings = factory.get_settings(parse_assignments(args.set))
    except (argparse.ArgumentTypeError, ValueError) as e:
        print(f"\n❌ Invalid settings override: {e}")
        return 1
    camera = args.camera
    if camera is not None and camera.isdigit():
        camera = int(camera)

    pipeline = factory.get_pipeline(settings=settings, camera_device=camera)

    if not args.headless:
        def show(overlay):
            cv2.imshow(WINDOW_NAME, overlay)
            if cv2.waitKey(1) & 0xFF == ord("q"):
                logger.info("Quit requested")
                pipeline.stop()

        pipeline.on_frame = show

    try:
        session = pipeline.process(max_ticks=args.max_ticks)
    except SessionInitializationError as e:
        print(f"\n❌ Could not start check-in: {e}")
        return 1
    except KeyboardInterrupt:
        pipeline.stop()
        print("\nInterrupted.")
        return 0
    finally:
        if not args.headless:
            cv2.destroyAllWindows()

    print(f"\nSession {session.status.value}: {session.frame_count} frames, "
          f"{session.total_detections} check-in(s), {session.dropped_ticks} dropped tick(s)")
    if session.recognized:
        rows = [
            (event.name or event.employee_id, f"{event.confidence * 100:.1f}%", event.timestamp.strftime("%H:%M:%S"))
            for event in session.recognized
        ]
        print(tabulate(rows, headers=["Name", "Confidence", "Time"], tablefmt="grid"))
    for error in session.errors:
        print(f"⚠️  {error}")
    return 0


def register(args, service: Service, repository: Repository) -> int:
    settings = GetDetectionSettings(settings_repository=repository.settings_repository).invoke()
    result = RegisterEmployee(
        human_face_detection=service.human_face_detection,
        employee_repository=repository.employee_repository,
        settings=settings,
    ).invoke(args.name, args.image, employee_id=args.id)

    if not result.get("success"):
        print(f"\n❌ {result.get('message')}")
        return 1
    print(f"\n✅ Registered {args.name} ({result['employee_id']})")
    return 0


def attendance(args, repository: Repository) -> int:
    day = date.fromisoformat(args.date) if args.date else date.today()
    records = GetDailyAttendance(attendance_repository=repository.attendance_repository).invoke(day)
    names = {
        employee.employee_id: employee.name
        for employee in GetAllEmployees(employee_repository=repository.employee_repository).invoke()
    }

    if not records:
        print(f"\nNo attendance records found for {day}.")
        return 0

    rows = [
        (
            names.get(record.employee_id, record.employee_id),
            record.check_date.strftime("%H:%M:%S"),
            record.status.value,
            record.lateness or "-",
            f"{record.confidence * 100:.1f}%" if record.confidence is not None else "-",
        )
        for record in records
    ]
    print(f"\n📅 Attendance ({day}):\n")
    print(tabulate(rows, headers=["Name", "Time", "Status", "Lateness", "Confidence"], tablefmt="grid"))
    return 0


def settings(args, repository: Repository) -> int:
    settings_repository = repository.settings_repository
    if args.action == "set":
        try:
            changes = parse_assignments(args.values)
        except argparse.ArgumentTypeError as e:
            print(f"\n❌ {e}")
            return 1
        result = UpdateDetectionSettings(settings_repository=settings_repository).invoke(changes)
        if not result["success"]:
            print(f"\n❌ {result['message']}")
            return 1
        current = result["settings"]
    elif args.action == "reset":
        current = UpdateDetectionSettings(settings_repository=settings_repository).reset().to_json()
    else:
        current = GetDetectionSettings(settings_repository=settings_repository).invoke().to_json()

    print(tabulate(current.items(), headers=["Setting", "Value"], tablefmt="grid"))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Face-matching attendance check-in")
    parser.add_argument("--debug", action="store_true", help="Verbose pipeline output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Open the camera and check employees in")
    run_parser.add_argument("--camera", type=str, default=None, help="Camera index or stream URL")
    run_parser.add_argument("--headless", action="store_true", help="Do not open a preview window")
    run_parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many detection ticks")
    run_parser.add_argument(
        "--set",
        nargs="*",
        metavar="KEY=VALUE",
        help="Override detection settings for this run only",
    )

    register_parser = subparsers.add_parser("register", help="Enroll an employee from a photo")
    register_parser.add_argument("name", help="Employee name")
    register_parser.add_argument("image", help="Path to a photo with one clearly visible face")
    register_parser.add_argument("--id", type=str, default=None, help="Employee id (generated when omitted)")

    attendance_parser = subparsers.add_parser("attendance", help="Show a day's attendance")
    attendance_parser.add_argument("--date", type=str, default=None, help="Day as YYYY-MM-DD (default: today)")

    settings_parser = subparsers.add_parser("settings", help="Show or change detection settings")
    settings_parser.add_argument("action", choices=["show", "set", "reset"], nargs="?", default="show")
    settings_parser.add_argument("values", nargs="*", metavar="KEY=VALUE")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    env = Env()
    env.read_env()
    is_debugging = args.debug or env.bool("DEBUG", False)
    service = Service(env)
    repository = Repository(env)

    if args.command == "run":
        if args.camera is None:
            args.camera = env.str("CAMERA_INDEX", None)
        return run(args, service, repository, is_debugging)
    if args.command == "register":
        return register(args, service, repository)
    if args.command == "attendance":
        return attendance(args, repository)
    return settings(args, repository)


if __name__ == "__main__":
    sys.exit(main())
