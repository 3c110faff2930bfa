"""
Line-item generators for the estimate calculator.

Pure Python math, one module per category. Each generator takes an
EstimateContext (survey, resolved area, active rate tables, options) and
returns zero or more EstimateLineItem rows. Business rules live in rules.py.
"""
