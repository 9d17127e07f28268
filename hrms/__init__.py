"""HRMS API - multi-tenant human resources backend"""

__version__ = "1.0.0"
