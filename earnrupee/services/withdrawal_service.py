import logging
import re

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from earnrupee import db
from earnrupee.errors import (
    NotFound, BelowMinimum, InsufficientBalance, InvalidAmount, InvalidPaymentDetails, InvalidStatus
)
from earnrupee.models import Account, Withdrawal, WithdrawalStatus, PaymentMethod
from earnrupee.utils.clock import utcnow
from earnrupee.utils.money import to_decimal, to_money, is_whole_paise

logger = logging.getLogger(__name__)

IFSC_PATTERN = re.compile(r'^[A-Z]{4}0[A-Z0-9]{6}$')
BANK_DETAIL_FIELDS = ('account holder name', 'account number', 'IFSC code', 'bank name')


def parse_payment_method(method):
    if isinstance(method, PaymentMethod):
        return method
    try:
        return PaymentMethod(str(method).strip().lower())
    except ValueError:
        raise InvalidPaymentDetails(f'Unsupported payment method: {method}')


def validate_payment_details(method, details):
    """
    Validate method-specific payment details and return them normalised.

    Bank details are pipe-delimited: holder name, account number, IFSC code and
    bank name, all non-empty, with the IFSC code matching ``AAAA0XXXXXX``.
    Other methods only require a non-empty value.
    """
    method = parse_payment_method(method)
    details = (details or '').strip()
    if not details:
        raise InvalidPaymentDetails('Payment details are required')

    if method == PaymentMethod.BANK:
        parts = [part.strip() for part in details.split('|')]
        if len(parts) != len(BANK_DETAIL_FIELDS) or not all(parts):
            raise InvalidPaymentDetails(
                'Bank details must include account holder name, account number, IFSC code and bank name'
            )
        if not IFSC_PATTERN.match(parts[2]):
            raise InvalidPaymentDetails('Invalid IFSC code (e.g. SBIN0001234)')
        details = '|'.join(parts)

    return method, details


def parse_status(status):
    if isinstance(status, WithdrawalStatus):
        return status
    try:
        return WithdrawalStatus(status)
    except ValueError:
        raise InvalidStatus(f'Invalid status: {status}')


class WithdrawalService:
    """Withdrawal requests: balance reserved at request time, status moved by operators"""

    def __init__(self, minimum_amount=None, refund_failed=None):
        if minimum_amount is None:
            minimum_amount = current_app.config.get('MIN_WITHDRAWAL_AMOUNT', 4500)
        if refund_failed is None:
            refund_failed = current_app.config.get('REFUND_FAILED_WITHDRAWALS', False)
        self.minimum_amount = to_money(minimum_amount)
        self.refund_failed = refund_failed

    def request_withdrawal(self, account_id, amount, method, details):
        """Create a pending withdrawal and debit its amount from the available balance"""
        account = db.session.get(Account, account_id) if account_id else None
        if account is None:
            raise NotFound('Account not found')

        amount = to_decimal(amount)
        if amount < self.minimum_amount:
            logger.warning("Account %s requested %s below the minimum %s", account.id, amount, self.minimum_amount)
            raise BelowMinimum(f'Minimum withdrawal amount is ₹{self.minimum_amount}')
        if not is_whole_paise(amount):
            raise InvalidAmount('Amount cannot have more than two decimal places')
        amount = to_money(amount)

        method, details = validate_payment_details(method, details)

        if amount > to_money(account.available_balance):
            logger.warning("Account %s requested %s with balance %s", account.id, amount, account.available_balance)
            raise InsufficientBalance()

        try:
            if not self._debit(account.id, amount):
                db.session.rollback()
                logger.warning("Account %s balance changed before debit of %s", account.id, amount)
                raise InsufficientBalance()

            withdrawal = Withdrawal(
                account_id=account.id,
                amount=amount,
                payment_method=method,
                payment_details=details
            )
            db.session.add(withdrawal)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create withdrawal for account %s", account_id)
            raise

        logger.info("Withdrawal %s of %s requested by account %s via %s",
                    withdrawal.id, amount, account.id, method.value)
        return withdrawal

    def update_withdrawal_status(self, withdrawal_id, new_status):
        """
        Operator status change.

        Balance only moves when a refund is involved: entering ``failed`` with
        refunds enabled credits the amount back and stamps ``refunded_at``;
        leaving ``failed`` debits it again only if that withdrawal was refunded.
        """
        new_status = parse_status(new_status)

        withdrawal = db.session.get(Withdrawal, withdrawal_id) if withdrawal_id else None
        if withdrawal is None:
            raise NotFound('Withdrawal not found')

        old_status = withdrawal.status
        if old_status == new_status:
            return withdrawal

        now = utcnow()
        values = {'status': new_status, 'updated_at': now}
        if new_status in (WithdrawalStatus.COMPLETED, WithdrawalStatus.FAILED):
            values['processed_at'] = now
        elif new_status == WithdrawalStatus.PENDING:
            values['processed_at'] = None

        refund = new_status == WithdrawalStatus.FAILED and self.refund_failed
        redebit = old_status == WithdrawalStatus.FAILED and withdrawal.refunded_at is not None
        if refund:
            values['refunded_at'] = now
        elif redebit:
            values['refunded_at'] = None

        try:
            # Compare-and-set on the old status so a refund or re-debit is applied once
            moved = db.session.execute(
                update(Withdrawal)
                .where(Withdrawal.id == withdrawal.id, Withdrawal.status == old_status)
                .values(**values)
                .execution_options(synchronize_session=False)
            ).rowcount
            if moved != 1:
                db.session.rollback()
                raise InvalidStatus('Withdrawal status changed concurrently, reload and retry')

            if refund:
                self._credit_back(withdrawal.account_id, withdrawal.amount)
            elif redebit and not self._debit(withdrawal.account_id, withdrawal.amount):
                db.session.rollback()
                raise InsufficientBalance('Balance no longer covers this withdrawal')

            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to update withdrawal %s", withdrawal_id)
            raise

        logger.info("Withdrawal %s moved %s -> %s%s", withdrawal.id, old_status.value, new_status.value,
                    ' (refunded)' if refund else ' (debited again)' if redebit else '')
        return withdrawal

    def _debit(self, account_id, amount):
        """Conditional debit; False when the balance does not cover ``amount``"""
        result = db.session.execute(
            update(Account)
            .where(Account.id == account_id, Account.available_balance >= amount)
            .values(available_balance=Account.available_balance - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _credit_back(self, account_id, amount):
        db.session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(available_balance=Account.available_balance + amount)
            .execution_options(synchronize_session=False)
        )
