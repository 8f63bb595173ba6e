"""HTTP relay in front of the Backblaze B2 native API."""
