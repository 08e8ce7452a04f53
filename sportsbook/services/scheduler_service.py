"""
Round lock scheduler for the Jungle Sportsbook

Requests always check the live phase themselves. This background job does
the one-time bookkeeping once a round locks: publish the final lines from
the complete prediction snapshot, stamp the picks locked and move the round
to "locked".
"""

import atexit
import logging
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError

from sportsbook import db
from sportsbook.models import Round
from sportsbook.utils.phase import Phase

logger = logging.getLogger(__name__)

LOCK_JOB_ID = "lock_due_rounds"


class SchedulerService:
    """Owns the APScheduler instance and the lock job's run history"""

    def __init__(self, app=None):
        self.app = None
        self.scheduler = None
        self.history = {
            "last_run": None,
            "total_runs": 0,
            "failed_runs": 0,
            "rounds_locked": 0,
            "last_error": None,
        }
        if app is not None:
            self.init_app(app)

    @property
    def running(self):
        return bool(self.scheduler and self.scheduler.running)

    def init_app(self, app):
        self.app = app
        self.scheduler = BackgroundScheduler(daemon=True, timezone="UTC")
        atexit.register(self.stop)

        if app.config.get("SCHEDULER_ENABLED", True):
            self.start()

    def start(self):
        if self.running:
            return

        interval = self.app.config.get("LOCK_CHECK_INTERVAL", 60)
        self.scheduler.add_job(
            func=self._run_in_app_context,
            trigger=IntervalTrigger(seconds=interval),
            id=LOCK_JOB_ID,
            name="Lock rounds past their lock time",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=interval,
        )
        self.scheduler.start()
        logger.info(f"Lock scheduler started, checking every {interval}s")

    def stop(self):
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        logger.info("Lock scheduler stopped")

    def _run_in_app_context(self):
        with self.app.app_context():
            self.lock_due_rounds()

    def lock_due_rounds(self, now=None):
        """
        Finalize every upcoming round whose phase has become LOCKED.

        Needs an application context. Rolls back and records the error on a
        database failure instead of raising into the scheduler thread.

        Returns:
            list: numbers of the rounds locked in this run
        """
        now = now or datetime.now(timezone.utc)
        self.history["last_run"] = now
        self.history["total_runs"] += 1

        try:
            due = [
                game_round
                for game_round in Round.query.filter_by(status="upcoming").order_by(Round.number)
                if game_round.phase(now) == Phase.LOCKED
            ]

            for game_round in due:
                published = game_round.regenerate_lines()
                stamped = game_round.lock_picks()
                game_round.status = "locked"
                logger.info(
                    f"Round {game_round.number} locked: {published} lines, "
                    f"{stamped} picks stamped"
                )

            if due:
                db.session.commit()

        except SQLAlchemyError as e:
            db.session.rollback()
            self.history["failed_runs"] += 1
            self.history["last_error"] = str(e)
            logger.error(f"Lock job failed: {e}", exc_info=True)
            return []

        self.history["rounds_locked"] += len(due)
        return [game_round.number for game_round in due]

    def get_status(self):
        job = self.scheduler.get_job(LOCK_JOB_ID) if self.running else None
        return {
            "running": self.running,
            "next_run": job.next_run_time.isoformat() if job and job.next_run_time else None,
            "history": dict(self.history),
        }


scheduler_service = SchedulerService()
