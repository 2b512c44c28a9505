"""Scheduler backend: staff UI and REST API for appointment scheduling."""
