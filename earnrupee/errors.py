"""
Ledger error taxonomy.

Every rejected ledger operation raises one of these before any mutation is
attempted. ``code`` is stable and meant for clients, ``status_code`` is the
HTTP status the API answers with.
"""


class LedgerError(Exception):
    code = 'ledger_error'
    status_code = 400
    default_message = 'Ledger operation rejected'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFound(LedgerError):
    code = 'not_found'
    status_code = 404
    default_message = 'Not found'


class Unauthorized(LedgerError):
    code = 'unauthorized'
    status_code = 401
    default_message = 'Unauthorized'


class Forbidden(LedgerError):
    code = 'forbidden'
    status_code = 403
    default_message = 'Forbidden'


class AlreadyCompleted(LedgerError):
    code = 'already_completed'
    status_code = 409
    default_message = 'Ad view already completed'


class ViewTooEarly(LedgerError):
    code = 'view_too_early'
    status_code = 425
    default_message = 'Ad has not been watched for its full duration'


class BelowMinimum(LedgerError):
    code = 'below_minimum'
    default_message = 'Amount is below the minimum withdrawal amount'


class InsufficientBalance(LedgerError):
    code = 'insufficient_balance'
    default_message = 'Insufficient balance'


class InvalidPaymentDetails(LedgerError):
    code = 'invalid_payment_details'
    default_message = 'Invalid payment details'


class InvalidStatus(LedgerError):
    code = 'invalid_status'
    default_message = 'Invalid status'


class InvalidAccountUpdate(LedgerError):
    code = 'invalid_account_update'
    default_message = 'Invalid account update'


class InvalidAmount(LedgerError):
    code = 'invalid_amount'
    default_message = 'Amount must be a positive value in whole paise'
