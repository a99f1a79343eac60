"""
Debt Planner

Amortization schedules, repayment strategies (avalanche, snowball, hybrid,
custom), extra-payment scenarios, consolidation and refinancing analysis,
credit utilization planning and debt-to-income tracking.
"""

__version__ = "0.1.0"
