"""Swipe Attendance package.

Feature modules (teachers, roster, sessions, history, dashboard) each carry a
model, a repository protocol with its MySQL implementation, a service and a
thin Flask controller.
"""
