import logging

from flask_apscheduler import APScheduler
from sqlalchemy import update, or_

logger = logging.getLogger(__name__)

# Create global scheduler instance
scheduler = APScheduler()


def init_scheduler(app):
    """Initialize the scheduler with Flask app"""
    scheduler.init_app(app)
    scheduler.start()

    scheduler.add_job(
        id='roll_daily_counters',
        func=lambda: roll_daily_counters_with_context(app),
        trigger='cron',
        hour=0,
        minute=0,
        replace_existing=True
    )

    scheduler.add_job(
        id='purge_revoked_tokens',
        func=lambda: purge_revoked_tokens_with_context(app),
        trigger='cron',
        hour=0,
        minute=30,
        replace_existing=True
    )

    logger.info("Flask-APScheduler started successfully")


def roll_daily_counters_with_context(app):
    """Roll daily counters with proper app context"""
    with app.app_context():
        roll_daily_counters()


def roll_daily_counters():
    """
    Reset every cached ``ads_watched_today`` and break the streaks of accounts
    that did not earn yesterday. Runs at midnight UTC.
    """
    from earnrupee import db
    from earnrupee.models import Account
    from earnrupee.utils.clock import yesterday

    try:
        reset = db.session.execute(
            update(Account)
            .where(Account.ads_watched_today != 0)
            .values(ads_watched_today=0)
            .execution_options(synchronize_session=False)
        ).rowcount
        broken = db.session.execute(
            update(Account)
            .where(
                Account.current_streak != 0,
                or_(Account.last_earned_on.is_(None), Account.last_earned_on < yesterday())
            )
            .values(current_streak=0)
            .execution_options(synchronize_session=False)
        ).rowcount
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Error in roll_daily_counters")
        raise

    logger.info("Daily rollover: reset %s counters, broke %s streaks", reset, broken)
    return {'counters_reset': reset, 'streaks_broken': broken}


def purge_revoked_tokens_with_context(app):
    with app.app_context():
        purge_revoked_tokens()


def purge_revoked_tokens():
    """Drop logout blocklist entries for tokens that have already expired"""
    from earnrupee import db
    from earnrupee.services.tokens import purge_expired_tokens

    try:
        return purge_expired_tokens()
    except Exception:
        db.session.rollback()
        logger.exception("Error in purge_revoked_tokens")
        raise
