import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt5 import QtWidgets

from .controller import PlaybackController, format_key_help
from .model import FlowTrackerModel, SourceOpenError, get_settings_path
from .view import FlowTrackerWindow

_log = logging.getLogger(__name__)


class UsageParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: {message}\n")
        sys.stderr.write(format_key_help(self.prog) + "\n")
        self.exit(1)


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = UsageParser(
        prog=prog,
        description="Demonstrate Lucas-Kanade optical flow tracking.",
        epilog="Example: %(prog)s - # use a camera\nExample: %(prog)s ../resources/Megamind.avi",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("video", help="a video file, or '-' to use a camera instead")
    parser.add_argument("--camera-index", type=int, default=-1, help="camera device used for '-' (default: -1)")
    parser.add_argument("--settings", type=Path, default=None, help="JSON settings file (default: ./settings.json)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: INFO)",
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    settings_path = args.settings or get_settings_path(Path.cwd())
    model = FlowTrackerModel(settings_path)
    try:
        metadata = model.open_source(args.video, camera_index=args.camera_index)
    except SourceOpenError as exc:
        _log.error("%s", exc)
        parser.print_usage(sys.stderr)
        sys.stderr.write(format_key_help(parser.prog) + "\n")
        return 1

    print(format_key_help(parser.prog))
    print(metadata.describe())

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
    controller = PlaybackController.from_model(model)
    window = FlowTrackerWindow(controller, model.source.title)
    window.show()
    window.start()
    try:
        return app.exec_()
    finally:
        model.close()


# Runs the GUI
def main() -> None:
    sys.exit(run())
