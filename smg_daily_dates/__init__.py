"""
SMG daily dates: business-day calculation for the SMG data pipeline.
"""

__version__ = "0.1.0"
