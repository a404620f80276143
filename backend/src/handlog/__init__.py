"""HandLog backend: food diary, hand-condition log and trigger statistics."""

__version__ = "0.1.0"
