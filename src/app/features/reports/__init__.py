"""Report submission and scheduled report management for the operator dashboard.

Reports are not computed here. Requests are normalized, given the stored
credentials and forwarded to the external reporting service."""
