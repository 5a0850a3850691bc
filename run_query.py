#!/usr/bin/env python3
"""Run a dashboard query from the command line.

    python run_query.py "q=engineer&sort=salaryDesc&f=location:Berlin"
    python run_query.py --mock --applications
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobhub.config import ensure_dirs, load_settings
from jobhub.controller import DashboardController
from jobhub.errors import StorageError
from jobhub.log import get_logger
from jobhub.models import format_salary
from jobhub.query import use_system_collation
from jobhub.sources import MockSource, get_source
from jobhub.storage import LocalStore

log = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Load jobs and print the view for a shareable query string.")
    p.add_argument("query", nargs="?", default="", help="URL query string, e.g. 'q=python&sort=dateDesc'.")
    p.add_argument("--mock", action="store_true", help="Use the offline sample jobs instead of the remote API.")
    p.add_argument("--applications", action="store_true", help="Also list tracked applications.")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    use_system_collation()
    settings = load_settings()
    ensure_dirs(settings)
    source = MockSource() if args.mock else get_source(settings)
    ctrl = DashboardController(LocalStore(settings.data_dir), source)

    try:
        ctrl.load()
    except StorageError as exc:
        log.error("Local store unreadable: %s", exc)
        return 1

    view = ctrl.hydrate(args.query)
    log.info("%d of %d jobs match ?%s", len(view), len(ctrl.jobs), ctrl.query_string())
    for job in view:
        log.info(
            "  %-12s  %-32s  %-18s  %-13s  %-10s  %s",
            job.id, job.title[:32], job.company[:18], job.location,
            job.employment_type, format_salary(job.salary_min, job.salary_max),
        )

    if args.applications:
        apps = ctrl.applications()
        log.info("%d application(s)", len(apps))
        for a in apps:
            log.info("  %s  %s @ %s", a.applied_at, a.job.title, a.job.company)
    return 0


if __name__ == "__main__":
    sys.exit(main())
