import logging
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from earnrupee import db
from earnrupee.models import RevokedToken
from earnrupee.utils.clock import utcnow

logger = logging.getLogger(__name__)


def is_token_revoked(jti):
    return db.session.query(RevokedToken.id).filter_by(jti=jti).first() is not None


def revoke_token(jwt_payload):
    """Blocklist the token described by ``jwt_payload`` (as returned by ``get_jwt()``)"""
    jti = jwt_payload['jti']
    if is_token_revoked(jti):
        return

    exp = jwt_payload.get('exp')
    expires_at = datetime.fromtimestamp(exp, timezone.utc).replace(tzinfo=None) if exp else None
    db.session.add(RevokedToken(jti=jti, account_id=jwt_payload['sub'], expires_at=expires_at))
    try:
        db.session.commit()
    except IntegrityError:
        # revoked by a concurrent logout
        db.session.rollback()
        return
    logger.info("Token %s revoked for account %s", jti, jwt_payload['sub'])


def purge_expired_tokens():
    """Drop blocklist rows whose tokens have expired and can no longer be presented"""
    removed = db.session.execute(
        delete(RevokedToken)
        .where(RevokedToken.expires_at.is_not(None), RevokedToken.expires_at < utcnow())
        .execution_options(synchronize_session=False)
    ).rowcount
    db.session.commit()
    logger.info("Purged %s expired revoked tokens", removed)
    return removed
