from datetime import datetime, timedelta, timezone


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(moment=None):
    """Midnight (UTC) of the day containing ``moment``"""
    moment = moment or utcnow()
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def today():
    return utcnow().date()


def yesterday():
    return today() - timedelta(days=1)
