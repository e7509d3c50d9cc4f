"""Academic Ledger package.

Reconciles attendance, fee and mark transaction logs per person and answers
cohort queries (dashboard, detail, export) over them. Organized by feature
modules (attendance, fees, academics, eligibility, cohort) with a thin Flask
controller layer on top of service/repository layers.
"""
