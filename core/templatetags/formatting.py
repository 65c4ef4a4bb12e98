from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template


register = template.Library()


_ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
_TEENS = [
	"Ten",
	"Eleven",
	"Twelve",
	"Thirteen",
	"Fourteen",
	"Fifteen",
	"Sixteen",
	"Seventeen",
	"Eighteen",
	"Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]


def _to_decimal(val) -> Decimal:
	# Avoid Decimal(float) binary artifacts; parse floats via str().
	return val if isinstance(val, Decimal) else Decimal(str(val))


def group_indian(digits: str) -> str:
	"""Group an integer digit string the Indian way: 12345678 -> 1,23,45,678."""
	if len(digits) <= 3:
		return digits
	head, tail = digits[:-3], digits[-3:]
	pairs = []
	while len(head) > 2:
		pairs.insert(0, head[-2:])
		head = head[:-2]
	if head:
		pairs.insert(0, head)
	return ",".join(pairs + [tail])


@register.filter(name="money")
def money(val):
	"""Format numeric values with Indian thousands separators.

	Usage in templates:
		{{ amount|money }}  ->  1,00,000
		{{ amount|money }}  ->  12,34,567.50
	"""
	try:
		if val is None or val == "":
			return "0"

		dec = _to_decimal(val).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
		sign = "-" if dec < 0 else ""
		dec = abs(dec)
		whole = int(dec)
		grouped = group_indian(str(whole))
		if dec == dec.to_integral_value():
			return f"{sign}{grouped}"
		fraction = f"{dec:.2f}".split(".")[1]
		return f"{sign}{grouped}.{fraction}"
	except (InvalidOperation, ValueError, TypeError):
		return str(val)


def _below_thousand(n: int) -> str:
	if n == 0:
		return ""
	if n < 10:
		return _ONES[n]
	if n < 20:
		return _TEENS[n - 10]
	if n < 100:
		return _TENS[n // 10] + (f" {_ONES[n % 10]}" if n % 10 else "")
	rest = _below_thousand(n % 100)
	return f"{_ONES[n // 100]} Hundred" + (f" {rest}" if rest else "")


def number_to_words(num: int) -> str:
	"""Spell a whole rupee amount using crore/lakh/thousand grouping."""
	num = int(num)
	if num == 0:
		return "Zero"
	if num < 0:
		return "Minus " + number_to_words(-num)

	parts = []
	crore, num = divmod(num, 10_000_000)
	lakh, num = divmod(num, 100_000)
	thousand, remainder = divmod(num, 1000)
	if crore:
		# Amounts of a hundred crore and above are spelled recursively.
		parts.append(f"{number_to_words(crore)} Crore")
	if lakh:
		parts.append(f"{_below_thousand(lakh)} Lakh")
	if thousand:
		parts.append(f"{_below_thousand(thousand)} Thousand")
	if remainder:
		parts.append(_below_thousand(remainder))
	return " ".join(parts)


@register.filter(name="rupees_in_words")
def rupees_in_words(val) -> str:
	try:
		whole = int(_to_decimal(val).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
	except (InvalidOperation, ValueError, TypeError):
		return ""
	return f"{number_to_words(whole)} Rupees Only"
