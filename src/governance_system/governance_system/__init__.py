"""Student governance service package.

This package is organized by feature modules (attendance, clearances, points, ...)
with a thin Flask controller layer and SOLID service/repository layers.
"""
