"""Pharmacy back-office API: inventory, point of sale and dashboards."""
