from __future__ import annotations

from datetime import date as _date
from datetime import datetime as _datetime

from rest_framework.exceptions import ValidationError


def get_str(request, key: str) -> str:
	return (request.query_params.get(key) or "").strip()


def get_int(request, key: str):
	val = get_str(request, key)
	if not val:
		return None
	try:
		return int(val)
	except ValueError:
		raise ValidationError({key: "Must be an integer."})


def get_date(request, key: str):
	val = get_str(request, key)
	if not val:
		return None
	try:
		return _date.fromisoformat(val)
	except ValueError:
		try:
			return _datetime.fromisoformat(val).date()
		except ValueError:
			raise ValidationError({key: "Use the YYYY-MM-DD format."})


def parse_month(value) -> _date:
	"""Return the first day of the month named by `value`.

	Accepts "YYYY-MM", "YYYY-MM-DD" or a date object.
	"""
	if isinstance(value, _datetime):
		value = value.date()
	if isinstance(value, _date):
		return value.replace(day=1)
	text = str(value or "").strip()
	try:
		if len(text) == 7:
			return _datetime.strptime(text, "%Y-%m").date()
		return _date.fromisoformat(text).replace(day=1)
	except ValueError:
		raise ValueError(f"Invalid month {value!r}; use YYYY-MM.")


def month_bounds(value) -> tuple[_date, _date]:
	"""(first day of month, first day of the following month)."""
	start = parse_month(value)
	if start.month == 12:
		return start, start.replace(year=start.year + 1, month=1)
	return start, start.replace(month=start.month + 1)


def get_month(request, key: str = "month"):
	val = get_str(request, key)
	if not val:
		return None
	try:
		return parse_month(val)
	except ValueError:
		raise ValidationError({key: "Use the YYYY-MM format."})


def filter_by_period(request, qs, date_field: str):
	"""Apply the common client/month/before/from/to filters to a dated queryset."""
	client_id = get_int(request, "client")
	if client_id is None:
		client_id = get_int(request, "client_id")
	if client_id is not None:
		qs = qs.filter(client_id=client_id)

	month = get_month(request, "month")
	if month is not None:
		start, end = month_bounds(month)
		qs = qs.filter(**{f"{date_field}__gte": start, f"{date_field}__lt": end})

	# "Everything before this month" (used for carried-forward balances).
	before_year = get_int(request, "before_year")
	before_month = get_int(request, "before_month")
	if before_year and before_month:
		try:
			cutoff = _date(before_year, before_month, 1)
		except ValueError:
			raise ValidationError({"before_month": "Invalid month."})
		qs = qs.filter(**{f"{date_field}__lt": cutoff})

	date_from = get_date(request, "from")
	date_to = get_date(request, "to")
	if date_from:
		qs = qs.filter(**{f"{date_field}__gte": date_from})
	if date_to:
		qs = qs.filter(**{f"{date_field}__lte": date_to})
	return qs
