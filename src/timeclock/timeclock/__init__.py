"""Time clock package.

Employees punch in/out, each shift gets its break and work minutes computed by
the ``worktime`` calculator, and administrators correct records and export
monthly reports. Feature modules follow the controller / service / repository
split.
"""
