"""College attendance backend.

This package is organized by feature modules (users, groups, students,
attendance, reports, ...) with a thin Flask controller layer over
service/repository layers. ``attendance.rules`` holds the attendance
percentage rules and is free of I/O.
"""
