"""Attendance Tracker package.

This package is organized by feature modules (attendance, holidays, classes,
reports) with a thin Flask controller layer over service/repository layers.
The working-day and percentage computations are pure functions so dashboards
and reports share one implementation.
"""
