"""Derived reads over store snapshots: search, dashboard stats and analytics."""
