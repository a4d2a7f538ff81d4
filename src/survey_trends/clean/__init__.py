"""Validation of store documents before aggregation.

Rows that do not match the `RawResponse` / `Question` schemas are dropped and
counted; everything downstream works on validated models only.
"""
