"""
Models whose parameters the estimators operate on.
"""
