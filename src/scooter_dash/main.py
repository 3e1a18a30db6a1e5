import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from scooter_dash.config.settings import DEFAULT_TOTAL_METERS_SEED
from scooter_dash.services.persistence import (
    STORE_FILENAME,
    AsyncRepositoryWriter,
    DashboardRepository,
    get_data_dir,
)
from scooter_dash.ui.app import MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Scooter speedometer, odometer and battery range")
    p.add_argument("--fullscreen", action="store_true", help="Run fullscreen (in-vehicle)")
    p.add_argument("--mock", action="store_true", help="Use mock GPS generator")
    p.add_argument("--data-dir", type=Path, default=None, help="Directory holding the store")
    p.add_argument(
        "--total-seed-km",
        type=float,
        default=DEFAULT_TOTAL_METERS_SEED / 1000.0,
        help="Lifetime distance shown when none is stored",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_dir = args.data_dir or get_data_dir()
    repository = DashboardRepository(
        data_dir / STORE_FILENAME,
        total_meters_seed=args.total_seed_km * 1000.0,
    )
    logger.info("Using store %s", repository.path)
    store = AsyncRepositoryWriter(repository)

    app = QApplication(sys.argv)
    w = MainWindow(store, mock=args.mock)
    if args.fullscreen:
        w.showFullScreen()
    else:
        w.show()
    try:
        return app.exec()
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
