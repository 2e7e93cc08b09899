"""HRMS Geo package.

Organized by feature modules (staff, attendance, presence, roles, ...)
with a thin Flask controller layer over service/repository layers.
"""
