from models.calendar_models import CATEGORIES, DayEvents
from utils.dates import date_key


def merge_events(ad_hoc: dict, recurring: dict) -> dict:
    """
    Union ad-hoc and recurring ``{date: DayEvents}`` maps into new DayEvents.

    Per date and category, ad-hoc items come first and recurring items second.
    Keys are normalized to ``YYYY-MM-DD`` where they parse; inputs are not mutated.
    """
    merged = {}
    for source in (ad_hoc, recurring):
        for raw_date, day in source.items():
            key = date_key(raw_date) or str(raw_date)
            entry = merged.setdefault(key, DayEvents())
            for name in CATEGORIES:
                entry.category(name).extend(day.category(name))
    return merged
