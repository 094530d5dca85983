"""HR Records package.

This package is organized by feature modules (employees, absences, feedback, ...)
around a single authorization engine (rbac + authz) with a thin Flask controller
layer and service/repository layers.
"""
