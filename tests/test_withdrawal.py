import threading
from decimal import Decimal

import pytest

from earnrupee import db
from earnrupee.errors import (
    NotFound, BelowMinimum, InsufficientBalance, InvalidAmount, InvalidPaymentDetails, InvalidStatus
)
from earnrupee.models import Account, Withdrawal, WithdrawalStatus, PaymentMethod
from earnrupee.services import EarningService, WithdrawalService, validate_payment_details
from tests.conftest import reload


@pytest.mark.parametrize('details', [
    'A|123456|SBIN0001234|StateBank',
    ' A | 123456 | SBIN0001234 | StateBank ',
    'Ravi Kumar|00112233445566|HDFC0ABC123|HDFC Bank',
])
def test_valid_bank_details(details):
    method, normalised = validate_payment_details('bank', details)
    assert method == PaymentMethod.BANK
    assert normalised.count('|') == 3


@pytest.mark.parametrize('details', [
    'A|123456|BADCODE|StateBank',
    'A|123456',
    'A|123456|SBIN0001234|',
    'A|123456|SBIN0001234|StateBank|extra',
    'A|123456|sbin0001234|StateBank',
    'A|123456|SBIN1001234|StateBank',
    '',
])
def test_invalid_bank_details(details):
    with pytest.raises(InvalidPaymentDetails):
        validate_payment_details('bank', details)


def test_other_methods_need_non_empty_details():
    assert validate_payment_details('upi', 'user@okaxis') == (PaymentMethod.UPI, 'user@okaxis')
    assert validate_payment_details('paypal', 'me@mail.com')[0] == PaymentMethod.PAYPAL
    with pytest.raises(InvalidPaymentDetails):
        validate_payment_details('paytm', '   ')


def test_unknown_method_is_rejected():
    with pytest.raises(InvalidPaymentDetails):
        validate_payment_details('bitcoin', 'wallet')


def test_request_withdrawal_debits_balance(app, make_account):
    account = make_account(balance='5000.00')

    withdrawal = WithdrawalService().request_withdrawal(account.id, Decimal('4500'), 'upi', 'user@okaxis')

    assert withdrawal.status == WithdrawalStatus.PENDING
    assert withdrawal.amount == Decimal('4500.00')
    account = reload(account)
    assert account.available_balance == Decimal('500.00')
    assert account.total_earnings == Decimal('5000.00')


def test_exact_minimum_is_accepted(app, make_account):
    account = make_account(balance='4500.00')

    WithdrawalService().request_withdrawal(account.id, '4500.00', 'paytm', '9876543210')

    assert reload(account).available_balance == Decimal('0.00')


def test_just_below_minimum_is_rejected(app, make_account):
    account = make_account(balance='5000.00')

    with pytest.raises(BelowMinimum):
        WithdrawalService().request_withdrawal(account.id, '4499.99', 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('5000.00')
    assert Withdrawal.query.count() == 0


def test_sub_paise_amount_below_minimum_is_not_rounded_up(app, make_account):
    account = make_account(balance='5000.00')

    with pytest.raises(BelowMinimum):
        WithdrawalService().request_withdrawal(account.id, Decimal('4499.995'), 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('5000.00')
    assert Withdrawal.query.count() == 0


def test_sub_paise_amount_is_rejected(app, make_account):
    account = make_account(balance='5000.00')

    with pytest.raises(InvalidAmount):
        WithdrawalService().request_withdrawal(account.id, Decimal('4500.005'), 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('5000.00')


def test_insufficient_balance(app, make_account):
    account = make_account(balance='4499.00', total='4600.00')

    with pytest.raises(InsufficientBalance):
        WithdrawalService().request_withdrawal(account.id, '4500', 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('4499.00')
    assert Withdrawal.query.count() == 0


def test_invalid_details_leave_balance_untouched(app, make_account):
    account = make_account(balance='5000.00')

    with pytest.raises(InvalidPaymentDetails):
        WithdrawalService().request_withdrawal(account.id, '4500', 'bank', 'A|123456|BADCODE|StateBank')

    assert reload(account).available_balance == Decimal('5000.00')


def test_unknown_account(app):
    with pytest.raises(NotFound):
        WithdrawalService().request_withdrawal('missing', '4500', 'upi', 'user@okaxis')


def test_minimum_comes_from_config(app, make_account):
    account = make_account(balance='100.00')
    app.config['MIN_WITHDRAWAL_AMOUNT'] = Decimal('50')

    WithdrawalService().request_withdrawal(account.id, '50', 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('50.00')


def test_earn_then_withdraw_scenario(app, account, ad):
    earning = EarningService()
    earning.complete_view(earning.start_view(account.id, ad.id).id, account.id)
    account = reload(account)
    assert account.total_earnings == Decimal('4.00')
    assert account.ads_watched_today == 1

    with pytest.raises(InsufficientBalance):
        WithdrawalService().request_withdrawal(account.id, '4500', 'upi', 'user@okaxis')

    assert reload(account).available_balance == Decimal('4.00')


def test_concurrent_requests_never_overdraw(app, make_account):
    account = make_account(balance='5000.00')
    account_id = account.id
    db.session.close()

    barrier = threading.Barrier(2)
    outcomes = []

    def withdraw():
        with app.app_context():
            service = WithdrawalService()
            barrier.wait()
            try:
                service.request_withdrawal(account_id, '4500', 'upi', 'user@okaxis')
                outcomes.append('ok')
            except InsufficientBalance:
                outcomes.append('insufficient_balance')
            finally:
                db.session.remove()

    threads = [threading.Thread(target=withdraw) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ['insufficient_balance', 'ok']
    assert db.session.get(Account, account_id).available_balance == Decimal('500.00')
    assert Withdrawal.query.filter_by(account_id=account_id).count() == 1


def _pending_withdrawal(make_account, balance='5000.00'):
    account = make_account(balance=balance)
    withdrawal = WithdrawalService().request_withdrawal(account.id, '4500', 'upi', 'user@okaxis')
    return account, withdrawal


def test_completing_does_not_touch_balance(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)

    updated = WithdrawalService().update_withdrawal_status(withdrawal.id, 'completed')

    assert updated.status == WithdrawalStatus.COMPLETED
    assert updated.processed_at is not None
    assert reload(account).available_balance == Decimal('500.00')


def test_full_state_machine_and_reset(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)
    service = WithdrawalService()

    assert service.update_withdrawal_status(withdrawal.id, 'processing').status == WithdrawalStatus.PROCESSING
    assert service.update_withdrawal_status(withdrawal.id, 'failed').status == WithdrawalStatus.FAILED
    reset = service.update_withdrawal_status(withdrawal.id, 'pending')

    assert reset.status == WithdrawalStatus.PENDING
    assert reset.processed_at is None
    assert reload(account).available_balance == Decimal('500.00')


def test_failed_withdrawal_is_not_refunded_by_default(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)

    WithdrawalService().update_withdrawal_status(withdrawal.id, 'failed')

    assert reload(account).available_balance == Decimal('500.00')


def test_failed_withdrawal_refund_policy(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)
    service = WithdrawalService(refund_failed=True)

    service.update_withdrawal_status(withdrawal.id, 'failed')
    assert reload(account).available_balance == Decimal('5000.00')

    # failing twice must not refund twice
    service.update_withdrawal_status(withdrawal.id, 'failed')
    assert reload(account).available_balance == Decimal('5000.00')

    service.update_withdrawal_status(withdrawal.id, 'pending')
    assert reload(account).available_balance == Decimal('500.00')


def test_reopening_refunded_withdrawal_needs_balance(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)
    service = WithdrawalService(refund_failed=True)
    service.update_withdrawal_status(withdrawal.id, 'failed')
    service.request_withdrawal(account.id, '4600', 'upi', 'user@okaxis')

    with pytest.raises(InsufficientBalance):
        service.update_withdrawal_status(withdrawal.id, 'processing')

    assert reload(withdrawal).status == WithdrawalStatus.FAILED
    assert reload(account).available_balance == Decimal('400.00')


def test_invalid_status(app, make_account):
    _, withdrawal = _pending_withdrawal(make_account)

    with pytest.raises(InvalidStatus):
        WithdrawalService().update_withdrawal_status(withdrawal.id, 'approved')

    assert reload(withdrawal).status == WithdrawalStatus.PENDING


def test_status_update_unknown_withdrawal(app):
    with pytest.raises(NotFound):
        WithdrawalService().update_withdrawal_status('missing', 'completed')


def test_reset_after_unrefunded_failure_does_not_debit_again(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)

    WithdrawalService(refund_failed=False).update_withdrawal_status(withdrawal.id, 'failed')
    assert reload(withdrawal).refunded_at is None

    reset = WithdrawalService(refund_failed=True).update_withdrawal_status(withdrawal.id, 'pending')

    assert reset.status == WithdrawalStatus.PENDING
    assert reload(account).available_balance == Decimal('500.00')


def test_reset_after_refund_debits_even_with_refunds_disabled(app, make_account):
    account, withdrawal = _pending_withdrawal(make_account)

    WithdrawalService(refund_failed=True).update_withdrawal_status(withdrawal.id, 'failed')
    assert reload(withdrawal).refunded_at is not None
    assert reload(account).available_balance == Decimal('5000.00')

    WithdrawalService(refund_failed=False).update_withdrawal_status(withdrawal.id, 'processing')

    assert reload(withdrawal).refunded_at is None
    assert reload(account).available_balance == Decimal('500.00')
