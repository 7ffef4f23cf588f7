"""HTTP surface - hook endpoints for the shop and the admin dashboard."""
