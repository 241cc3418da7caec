"""
API Routers - Organized endpoint handlers for the reporting API.

Each router handles a specific domain:
- metrics: Dashboard trends, distributions, event comparison, attendance
- exports: Spreadsheet downloads
"""
