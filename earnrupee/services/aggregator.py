"""Read-only account and platform views composed from ledger rows"""
from earnrupee import db
from earnrupee.errors import NotFound
from earnrupee.models import Account, AdView, Withdrawal, WithdrawalStatus
from earnrupee.utils.clock import start_of_day
from earnrupee.utils.money import to_money, money_str


def _get_account(account_id):
    account = db.session.get(Account, account_id) if account_id else None
    if account is None:
        raise NotFound('Account not found')
    return account


def get_todays_stats(account_id):
    """
    Balances plus today's figures, recomputed from completed ad views created
    since midnight rather than read from the cached ``ads_watched_today``.
    """
    account = _get_account(account_id)
    views = AdView.query.filter(
        AdView.account_id == account.id,
        AdView.completed.is_(True),
        AdView.viewed_at >= start_of_day()
    ).all()
    today_earnings = sum((to_money(view.reward) for view in views), to_money(0))

    return {
        'total_earnings': money_str(account.total_earnings),
        'available_balance': money_str(account.available_balance),
        'ads_watched_today': len(views),
        'today_earnings': money_str(today_earnings),
        'current_streak': account.effective_streak()
    }


def get_recent_earnings(account_id, limit=10):
    """Completed views for the account, newest first"""
    account = _get_account(account_id)
    views = AdView.query.filter_by(account_id=account.id, completed=True)\
        .order_by(AdView.viewed_at.desc())\
        .limit(limit)\
        .all()
    return [view.to_dict() for view in views]


def get_transaction_history(account_id):
    """Earnings (positive) and withdrawals (negative) merged, newest first"""
    account = _get_account(account_id)

    items = []
    for view in AdView.query.filter_by(account_id=account.id, completed=True).all():
        items.append({
            'id': view.id,
            'kind': 'earning',
            'amount': money_str(view.reward),
            'status': 'completed',
            'description': f'Ad reward: {view.ad.title}' if view.ad else 'Ad reward',
            'date': view.viewed_at
        })
    for withdrawal in account.withdrawals.all():
        items.append({
            'id': withdrawal.id,
            'kind': 'withdrawal',
            'amount': money_str(-to_money(withdrawal.amount)),
            'status': withdrawal.status.value,
            'description': f'Withdrawal via {withdrawal.payment_method.value}',
            'date': withdrawal.requested_at
        })

    items.sort(key=lambda item: item['date'], reverse=True)
    for item in items:
        item['date'] = item['date'].isoformat()
    return items


def get_platform_stats():
    """Operator dashboard totals"""
    total_users = Account.query.count()
    active_users = Account.query.filter_by(is_active=True).count()
    total_earnings = db.session.query(db.func.sum(Account.total_earnings)).scalar()
    pending_withdrawals = Withdrawal.query.filter_by(status=WithdrawalStatus.PENDING).count()
    total_withdrawals = db.session.query(db.func.sum(Withdrawal.amount)).scalar()
    total_ad_views = AdView.query.filter_by(completed=True).count()

    return {
        'total_users': total_users,
        'active_users': active_users,
        'total_earnings': money_str(total_earnings),
        'pending_withdrawals': pending_withdrawals,
        'total_withdrawals': money_str(total_withdrawals),
        'total_ad_views': total_ad_views
    }
