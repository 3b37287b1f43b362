"""Text extraction service for résumé and job-description uploads."""
