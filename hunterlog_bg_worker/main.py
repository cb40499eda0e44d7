from __future__ import annotations

from hunterlog_bg_worker.celery_app import celery_app
from hunterlog_bg_worker import hunts_worker  # noqa: F401  registers tasks


def main() -> None:
    # solo pool keeps the worker usable on Windows; -B embeds the beat scheduler.
    argv = ["worker", "--loglevel=info", "-P", "solo", "-B"]
    celery_app.worker_main(argv)


if __name__ == "__main__":
    main()
