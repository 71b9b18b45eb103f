"""Gallery pages: login form, image grid, upload and delete actions."""
