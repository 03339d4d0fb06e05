from datetime import datetime

DATE_FORMAT_YYYY_MM_DD = '%Y-%m-%d'
TIME_FORMAT_HH_MM = '%H:%M'

"""
Returns a flag representing whether or not the incoming date matches the incoming format.

Arguments:
date_input – the date to be validated.
incoming_date_format – the date format.
"""
def is_valid_date(date_input: str,
                  incoming_date_format: str = DATE_FORMAT_YYYY_MM_DD) -> bool:
    try:
        datetime.strptime(date_input, incoming_date_format)
        return True
    except (ValueError, TypeError):
        return False

"""
Returns a flag representing whether or not the incoming slot time is a valid 24h HH:MM value.
"""
def is_valid_slot_time(time_input: str) -> bool:
    try:
        return datetime.strptime(time_input, TIME_FORMAT_HH_MM).strftime(TIME_FORMAT_HH_MM) == time_input
    except (ValueError, TypeError):
        return False
