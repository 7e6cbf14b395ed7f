"""Timesheet Ledger package.

Reconciles punch-clock events into the monthly timesheet ("folha de ponto").
Organized by feature modules (punches, employees, ledger) with a thin Flask
controller layer over pure service code.
"""
