# Utils package
from .clock import utcnow, start_of_day
from .money import to_money, money_str
