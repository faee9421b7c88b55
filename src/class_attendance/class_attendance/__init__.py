"""Class Attendance package.

Organized by feature modules (sessions, attendance, stats, ...) with a thin
Flask controller layer on top of service/repository layers.
"""
