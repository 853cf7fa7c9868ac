"""Campus System package.

Student-management backend organized by feature modules (attendance,
qr_sessions, fees, leaves, marks, ...), each with an in-memory repository,
a service holding the bookkeeping rules and a thin Flask JSON controller.
"""
