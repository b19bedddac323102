import uuid

from earnrupee import db
from earnrupee.utils.clock import utcnow


class RevokedToken(db.Model):
    """Access token ended by logout; kept until it would have expired anyway"""
    __tablename__ = 'revoked_tokens'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    jti = db.Column(db.String(36), nullable=False, unique=True, index=True)
    account_id = db.Column(db.String(36), db.ForeignKey('accounts.id'), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=True)
    revoked_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f'<RevokedToken {self.jti}>'
