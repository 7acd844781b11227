"""Office Attendance package.

Attendance tracking with office geofencing and a manager approval workflow for
remote check-ins. Organized by feature modules (geo, attendance, approvals, ...)
with a thin Flask controller layer over service/repository layers.
"""
