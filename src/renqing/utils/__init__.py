"""Utility functions for renqing."""

from renqing.utils.date_parser import parse_date
from renqing.utils.amount_parser import parse_amount
from renqing.utils.ids import generate_id

__all__ = ["parse_date", "parse_amount", "generate_id"]
