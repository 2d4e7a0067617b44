"""Coach scheduler — weekly planning, mid-week checks and daily detailing.

Usage:
    python -m scheduler.jobs --job weekly --once   # single run (for cron)
    python -m scheduler.jobs --daemon              # APScheduler loop, all jobs
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, timedelta
from typing import Callable

from coach_engine.coach import Coach, week_start
from coach_engine.config import POLICY_GENERATIVE
from coach_engine.errors import CoachError, ConfigurationError
from coach_engine.policy.factory import make_policy
from garmin_client import GarminCalendar, GarminClient, GarminFitnessProvider
from workout_ai import WorkoutAIClient

from scheduler.config import SchedulerSettings, load_settings

logger = logging.getLogger(__name__)


def build_coach(settings: SchedulerSettings) -> Coach:
    """Wire Garmin, the policy and the engine together for one athlete."""
    config = settings.coach
    client = GarminClient(
        email=settings.garmin_email,
        password=settings.garmin_password,
        token_dir=settings.token_dir,
    )
    collaborator = None
    if config.policy_mode == POLICY_GENERATIVE:
        collaborator = WorkoutAIClient(api_key=config.ai_api_key, model=config.ai_model)
    return Coach(
        config,
        provider=GarminFitnessProvider(client),
        calendar=GarminCalendar(client, config.ftp_watts, config.threshold_pace_s_per_km),
        policy=make_policy(config, collaborator),
    )


def weekly_job(coach: Coach) -> None:
    """Plan next week and write it to the calendar."""
    logger.info("Starting weekly planning job")
    result = coach.plan_week()
    logger.info(
        "Week of %s planned (%s, %d sessions, %.0f TSS): %s",
        result.plan.start_date,
        result.context.phase_name.name,
        result.plan.session_count,
        result.plan.total_tss,
        result.report.summary(),
    )
    for day, reason in result.report.failures:
        logger.error("Calendar write failed on %s: %s", day, reason)


def review_job(coach: Coach) -> None:
    """Report how the last completed week went."""
    start = week_start(date.today()) - timedelta(days=7)
    summary = coach.review_week(start, start + timedelta(days=6))
    adherence = summary.adherence
    if adherence.has_data:
        logger.info(
            "Week of %s: adherence %.0f, %d/%d sessions, %.0f/%.0f TSS",
            start,
            adherence.score,
            adherence.completed_sessions,
            adherence.planned_sessions,
            adherence.actual_tss,
            adherence.planned_tss,
        )
    else:
        logger.info("Week of %s: nothing planned, %.0f TSS done", start, adherence.actual_tss)


def midweek_job(coach: Coach) -> None:
    """Check the week in progress and adapt what is left."""
    outcome = coach.check_mid_week()
    if not outcome.trigger.fired:
        logger.info("Mid-week check: on track")
        return
    logger.info(
        "Mid-week check fired (%s): %s",
        outcome.trigger.priority.name if outcome.trigger.priority else "-",
        "; ".join(outcome.trigger.reasons),
    )
    if outcome.report is not None:
        logger.info("Remaining days re-planned: %s", outcome.report.summary())


def daily_job(coach: Coach) -> None:
    """Detail today's deferred session, if any."""
    designed = coach.daily_workout()
    if designed is not None:
        logger.info("Today's session: %s", designed.workout.workout_title)


JOBS: dict[str, Callable[[Coach], None]] = {
    "weekly": weekly_job,
    "review": review_job,
    "midweek": midweek_job,
    "daily": daily_job,
}


def run_job(name: str, settings: SchedulerSettings) -> bool:
    """Run one job; a CoachError is logged and reported as failure."""
    try:
        coach = build_coach(settings)
        JOBS[name](coach)
    except CoachError as exc:
        logger.error("%s job failed: %s", name, exc)
        return False
    logger.info("%s job complete", name)
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Adaptive training coach scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run one job and exit")
    group.add_argument("--daemon", action="store_true", help="Run all jobs on an APScheduler loop")
    parser.add_argument("--job", choices=sorted(JOBS), default="weekly", help="Job for --once")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    if args.once:
        return 0 if run_job(args.job, settings) else 1

    from apscheduler.schedulers.blocking import BlockingScheduler

    scheduler = BlockingScheduler()
    scheduler.add_job(
        run_job, "cron", args=["weekly", settings], id="weekly_job",
        day_of_week=settings.weekly_day, hour=settings.weekly_hour, minute=settings.minute,
    )
    scheduler.add_job(
        run_job, "cron", args=["review", settings], id="review_job",
        day_of_week="mon", hour=settings.daily_hour, minute=settings.minute,
    )
    scheduler.add_job(
        run_job, "cron", args=["midweek", settings], id="midweek_job",
        day_of_week=settings.midweek_day, hour=settings.midweek_hour, minute=settings.minute,
    )
    scheduler.add_job(
        run_job, "cron", args=["daily", settings], id="daily_job",
        hour=settings.daily_hour, minute=settings.minute,
    )
    logger.info(
        "Scheduler started: weekly %s %02d:%02d, mid-week %s %02d:%02d, daily %02d:%02d",
        settings.weekly_day,
        settings.weekly_hour,
        settings.minute,
        settings.midweek_day,
        settings.midweek_hour,
        settings.minute,
        settings.daily_hour,
        settings.minute,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
