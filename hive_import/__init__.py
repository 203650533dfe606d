"""Generate Hive CREATE TABLE / LOAD DATA statements for exported tables."""

__version__ = "1.0.0"
