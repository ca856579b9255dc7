"""Command-line entry point: render a map export profile to a file."""

import argparse
import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtGui import QGuiApplication

from domain.models import ExportProfile
from domain.profiles import load_profile
from render.decorations import CenterCrossDecoration, CopyrightLabelDecoration, MapDecoration
from render.errors import TaskOutcome
from render.surfaces import FileOutput
from render.task import RenderTask
from render.worker import RenderTaskWorker
from shared.constants import LOCAL_BASE, LOG_FILE_NAME
from shared.diagnostics import log_memory_usage

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELED = 2


def setup_logging(log_dir: Path | None = None) -> Path:
    """Configure application logging to LOCALAPPDATA.

    Returns:
        Path of the log file.
    """
    log_dir = log_dir or LOCAL_BASE / 'log'
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(str(log_file), encoding='utf-8'),
        ],
    )
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Map render task - отрисовка карты в файл по профилю'
    )
    parser.add_argument('profile', help='Имя профиля или путь к TOML файлу')
    parser.add_argument(
        '--cancel-after',
        type=float,
        default=None,
        help='Запросить отмену через указанное число секунд',
    )
    parser.add_argument('--log-dir', type=Path, default=None, help='Каталог журнала')
    return parser


def build_decorations(profile: ExportProfile) -> list[MapDecoration]:
    decorations: list[MapDecoration] = []
    if profile.copyright_text:
        decorations.append(CopyrightLabelDecoration(profile.copyright_text))
    if profile.center_cross:
        decorations.append(CenterCrossDecoration())
    return decorations


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_dir)
    logger.info('Starting map render task')

    try:
        profile = load_profile(args.profile)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f'Failed to load profile: {e}')
        return EXIT_ERROR

    if not os.getenv('DISPLAY') and sys.platform.startswith('linux'):
        os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

    app = QGuiApplication.instance() or QGuiApplication(sys.argv[:1])

    decorations = build_decorations(profile)
    task = RenderTask(profile.settings, FileOutput(profile.destination))
    task.set_decorations(decorations)

    worker = RenderTaskWorker(task)
    worker.finished.connect(app.quit)
    if args.cancel_after is not None:
        QTimer.singleShot(int(args.cancel_after * 1000), worker.request_cancel)

    log_memory_usage('before render')
    worker.start()
    app.exec()
    worker.wait()
    log_memory_usage('after render')

    if task.outcome is TaskOutcome.SUCCESS:
        logger.info('Map written: %s', profile.destination.path)
        return EXIT_OK
    if task.outcome is TaskOutcome.CANCELED:
        logger.info('Rendering canceled')
        return EXIT_CANCELED
    logger.error('Rendering failed: %s', task.error.message or 'unexpected error')
    return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
