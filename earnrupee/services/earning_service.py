import logging

from flask import current_app
from sqlalchemy import update, case
from sqlalchemy.exc import SQLAlchemyError

from earnrupee import db
from earnrupee.errors import NotFound, Unauthorized, Forbidden, AlreadyCompleted, ViewTooEarly
from earnrupee.models import Account, Ad, AdView
from earnrupee.utils.clock import utcnow, today, yesterday

logger = logging.getLogger(__name__)


class EarningService:
    """Ad view lifecycle: start a view, then complete it and credit the account"""

    def __init__(self, enforce_duration=None, grace_seconds=None):
        if enforce_duration is None:
            enforce_duration = current_app.config.get('ENFORCE_VIEW_DURATION', True)
        if grace_seconds is None:
            grace_seconds = current_app.config.get('VIEW_DURATION_GRACE_SECONDS', 0)
        self.enforce_duration = enforce_duration
        self.grace_seconds = grace_seconds

    def start_view(self, account_id, ad_id):
        """Create a pending view with the ad's current reward and duration snapshotted"""
        account = db.session.get(Account, account_id) if account_id else None
        if account is None or not account.is_active:
            raise Unauthorized()

        ad = db.session.get(Ad, ad_id) if ad_id else None
        if ad is None:
            raise NotFound('Ad not found')

        view = AdView(
            account_id=account.id,
            ad_id=ad.id,
            reward=ad.reward,
            required_seconds=ad.duration
        )
        try:
            db.session.add(view)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to start view of ad %s for account %s", ad_id, account_id)
            raise

        logger.info("Account %s started view %s of ad %s (reward %s)", account.id, view.id, ad.id, view.reward)
        return view

    def complete_view(self, view_id, account_id):
        """
        Mark a view completed and credit its snapshotted reward.

        The completed flag is flipped with a conditional UPDATE and the credit
        is applied in the same transaction, so a view can credit its account
        at most once even when completions race.
        """
        view = db.session.get(AdView, view_id) if view_id else None
        if view is None:
            raise NotFound('Ad view not found')

        if view.account_id != account_id:
            logger.warning("Account %s tried to complete view %s owned by %s", account_id, view.id, view.account_id)
            raise Forbidden()

        if view.completed:
            logger.warning("View %s completed again by account %s", view.id, account_id)
            raise AlreadyCompleted()

        now = utcnow()
        self._check_elapsed(view, now)

        reward = view.reward
        current_day = today()
        previous_day = yesterday()
        try:
            claimed = db.session.execute(
                update(AdView)
                .where(AdView.id == view.id, AdView.completed.is_(False))
                .values(completed=True, completed_at=now)
                .execution_options(synchronize_session=False)
            ).rowcount
            if claimed != 1:
                db.session.rollback()
                raise AlreadyCompleted()

            db.session.execute(
                update(Account)
                .where(Account.id == view.account_id)
                .values(
                    total_earnings=Account.total_earnings + reward,
                    available_balance=Account.available_balance + reward,
                    ads_watched_today=case(
                        (Account.last_earned_on == current_day, Account.ads_watched_today + 1),
                        else_=1
                    ),
                    current_streak=case(
                        (Account.last_earned_on == current_day, Account.current_streak),
                        (Account.last_earned_on == previous_day, Account.current_streak + 1),
                        else_=1
                    ),
                    last_earned_on=current_day
                )
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to complete view %s", view_id)
            raise

        db.session.refresh(view)
        logger.info("Credited %s to account %s for view %s", reward, view.account_id, view.id)
        return view

    def _check_elapsed(self, view, now):
        if not self.enforce_duration or not view.required_seconds:
            return
        elapsed = (now - view.viewed_at).total_seconds()
        if elapsed + self.grace_seconds < view.required_seconds:
            remaining = int(view.required_seconds - elapsed - self.grace_seconds) + 1
            logger.warning("View %s completed after %.1fs, %ss required", view.id, elapsed, view.required_seconds)
            raise ViewTooEarly(f'Keep watching for {remaining} more seconds')
