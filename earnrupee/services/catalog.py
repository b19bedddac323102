import logging

from flask import current_app

from earnrupee import db, cache
from earnrupee.errors import NotFound
from earnrupee.models import Ad

logger = logging.getLogger(__name__)

ACTIVE_ADS_CACHE_KEY = 'active_ads'


def get_active_ads():
    """Serialized active ads, cached until an operator edits the catalog"""
    ads = cache.get(ACTIVE_ADS_CACHE_KEY)
    if ads is None:
        ads = [ad.to_dict() for ad in Ad.query.filter_by(is_active=True).order_by(Ad.title).all()]
        cache.set(ACTIVE_ADS_CACHE_KEY, ads, timeout=current_app.config.get('ACTIVE_ADS_CACHE_TIMEOUT', 300))
    return ads


def delete_ads_cache():
    cache.delete(ACTIVE_ADS_CACHE_KEY)


def get_ad(ad_id):
    ad = db.session.get(Ad, ad_id) if ad_id else None
    if ad is None:
        raise NotFound('Ad not found')
    return ad


def create_ad(data):
    """Create an ad from a validated ``AdCreate`` payload"""
    ad = Ad(**data.model_dump())
    db.session.add(ad)
    db.session.commit()
    delete_ads_cache()
    logger.info("Ad %s created: %s", ad.id, ad.title)
    return ad


def update_ad(ad_id, data):
    """Apply the fields set on an ``AdUpdate`` payload; views already started keep their snapshot"""
    ad = get_ad(ad_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(ad, field, value)
    db.session.commit()
    delete_ads_cache()
    logger.info("Ad %s updated", ad.id)
    return ad
