"""Smart Attendance package.

Feature modules (users, attendance, notices, settings, reports) follow the
repository/service/controller split; ``client`` wraps the REST API with a
local fallback store and ``capture`` turns camera frames into attendance.
"""
