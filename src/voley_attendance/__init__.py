"""Voley Attendance package.

Organized by feature modules (players, trainings, sessions, attendance,
analytics, reports, ...) with a thin Flask controller layer on top of
service/repository layers sharing one SQLite store handle.
"""
