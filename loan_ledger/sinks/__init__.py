"""Output sinks for exporting ledger data."""

from loan_ledger.sinks.json_file import JsonFileSink
from loan_ledger.sinks.serialization import parse_amount, serialize_value, to_dict

__all__ = ["JsonFileSink", "parse_amount", "serialize_value", "to_dict"]
