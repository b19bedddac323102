from datetime import timedelta
from decimal import Decimal

import pytest

from earnrupee import db
from earnrupee.errors import NotFound
from earnrupee.models import AdView, Withdrawal, WithdrawalStatus, PaymentMethod
from earnrupee.services import (
    EarningService, get_todays_stats, get_recent_earnings, get_transaction_history, get_platform_stats
)
from earnrupee.utils.clock import start_of_day, utcnow, yesterday


def _completed_view(account, ad, reward='4.00', viewed_at=None):
    view = AdView(account_id=account.id, ad_id=ad.id, reward=Decimal(reward), required_seconds=ad.duration)
    view.completed = True
    view.viewed_at = viewed_at or utcnow()
    view.completed_at = view.viewed_at
    db.session.add(view)
    db.session.commit()
    return view


def test_todays_stats_are_recomputed_from_views(app, account, ad):
    _completed_view(account, ad, '4.00')
    _completed_view(account, ad, '2.50')
    _completed_view(account, ad, '6.00', viewed_at=start_of_day() - timedelta(hours=1))
    pending = AdView(account_id=account.id, ad_id=ad.id, reward=Decimal('9.00'))
    db.session.add(pending)
    # Stale cached counter must not leak into the response
    account.ads_watched_today = 42
    account.total_earnings = Decimal('12.50')
    account.available_balance = Decimal('12.50')
    db.session.commit()

    stats = get_todays_stats(account.id)

    assert stats == {
        'total_earnings': '12.50',
        'available_balance': '12.50',
        'ads_watched_today': 2,
        'today_earnings': '6.50',
        'current_streak': 0,
    }


def test_todays_stats_after_earning(app, account, ad):
    service = EarningService()
    service.complete_view(service.start_view(account.id, ad.id).id, account.id)

    stats = get_todays_stats(account.id)

    assert stats['ads_watched_today'] == 1
    assert stats['today_earnings'] == '4.00'
    assert stats['available_balance'] == '4.00'
    assert stats['current_streak'] == 1


def test_broken_streak_reads_as_zero(app, account):
    account.current_streak = 6
    account.last_earned_on = yesterday() - timedelta(days=1)
    db.session.commit()

    assert get_todays_stats(account.id)['current_streak'] == 0


def test_stats_for_unknown_account(app):
    with pytest.raises(NotFound):
        get_todays_stats('missing')


def test_recent_earnings_newest_first_and_limited(app, account, ad):
    now = utcnow()
    oldest = _completed_view(account, ad, viewed_at=now - timedelta(minutes=3))
    middle = _completed_view(account, ad, viewed_at=now - timedelta(minutes=2))
    newest = _completed_view(account, ad, viewed_at=now - timedelta(minutes=1))
    db.session.add(AdView(account_id=account.id, ad_id=ad.id, reward=Decimal('4.00')))
    db.session.commit()

    earnings = get_recent_earnings(account.id, limit=2)

    assert [item['id'] for item in earnings] == [newest.id, middle.id]
    assert oldest.id in [item['id'] for item in get_recent_earnings(account.id)]
    assert all(item['completed'] for item in get_recent_earnings(account.id))


def test_recent_earnings_only_for_owner(app, account, make_account, ad):
    _completed_view(make_account(), ad)

    assert get_recent_earnings(account.id) == []


def test_transaction_history_merges_and_signs(app, make_account, ad):
    account = make_account(balance='5000.00')
    now = utcnow()
    earned = _completed_view(account, ad, viewed_at=now - timedelta(hours=2))
    withdrawal = Withdrawal(account.id, Decimal('4500.00'), PaymentMethod.UPI, 'user@okaxis')
    withdrawal.requested_at = now - timedelta(hours=1)
    db.session.add(withdrawal)
    db.session.commit()

    history = get_transaction_history(account.id)

    assert [item['id'] for item in history] == [withdrawal.id, earned.id]
    assert history[0]['kind'] == 'withdrawal'
    assert history[0]['amount'] == '-4500.00'
    assert history[0]['status'] == 'pending'
    assert history[1]['kind'] == 'earning'
    assert history[1]['amount'] == '4.00'
    assert history[1]['description'] == 'Ad reward: Video Ad - 30 seconds'


def test_platform_stats(app, make_account, ad):
    first = make_account(balance='5000.00')
    make_account(balance='10.00')
    make_account(is_active=False)
    _completed_view(first, ad)
    db.session.add(Withdrawal(first.id, Decimal('4500.00'), PaymentMethod.BANK, 'A|123456|SBIN0001234|StateBank'))
    done = Withdrawal(first.id, Decimal('100.00'), PaymentMethod.UPI, 'user@okaxis')
    done.status = WithdrawalStatus.COMPLETED
    db.session.add(done)
    db.session.commit()

    stats = get_platform_stats()

    assert stats['total_users'] == 3
    assert stats['active_users'] == 2
    assert stats['total_earnings'] == '5010.00'
    assert stats['pending_withdrawals'] == 1
    assert stats['total_withdrawals'] == '4600.00'
    assert stats['total_ad_views'] == 1


def test_platform_stats_on_empty_ledger(app):
    stats = get_platform_stats()

    assert stats['total_users'] == 0
    assert stats['total_earnings'] == '0.00'
    assert stats['total_withdrawals'] == '0.00'
